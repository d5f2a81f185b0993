"""
PONG - Realtime two player pong
FastAPI + WebSocket Backend
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from .config import CORS_ORIGINS
from .game.engine import GameEngine
from .game.room import Room
from .schemas import Error, LeaveRoom, MovePaddle, RestartGame, RoomSummary, client_message_adapter

logger = logging.getLogger(__name__)

router = APIRouter()


# ============== REST API ==============

@router.get("/api/health")
async def health():
    return {"ok": True}


@router.get("/api/rooms", response_model=List[RoomSummary])
async def list_rooms(request: Request):
    """List all rooms (for debugging)"""
    engine: GameEngine = request.app.state.engine
    return engine.room_manager.get_summaries()


# ============== WEBSOCKET ==============

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Main game WebSocket endpoint"""
    engine: GameEngine = websocket.app.state.engine

    await websocket.accept()
    player_id = str(uuid.uuid4())
    logger.info(f"[WS] Player connected: {player_id}")

    room: Optional[Room] = None
    try:
        room = await engine.join(player_id, websocket)

        while True:
            raw = await websocket.receive_text()
            try:
                message = client_message_adapter.validate_json(raw)
            except ValidationError as e:
                logger.debug(f"[WS] {player_id}: invalid message {raw!r}")
                await room.send_to_player(
                    player_id,
                    Error(message=f"Invalid message: {e.errors()[0]['msg']}").model_dump(),
                )
                continue

            if isinstance(message, MovePaddle):
                await engine.move(room, player_id, message.direction)
            elif isinstance(message, RestartGame):
                await engine.restart(room, player_id)
            elif isinstance(message, LeaveRoom):
                break

    except WebSocketDisconnect:
        return
    except Exception:
        logger.exception(f"[WS] Error for {player_id}")
        return
    finally:
        logger.info(f"[WS] Player disconnected: {player_id}")
        if room is not None:
            await engine.leave(room, player_id)

    # Client asked to leave
    await websocket.close()


def create_app(engine: Optional[GameEngine] = None) -> FastAPI:
    engine = engine or GameEngine()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events"""
        await engine.start()
        yield
        await engine.stop()

    app = FastAPI(title="PONG", lifespan=lifespan)
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
