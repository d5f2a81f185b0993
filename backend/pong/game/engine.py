"""
Game engine - runs one fixed rate loop per active room.
"""
import asyncio
import logging
from typing import Optional

from fastapi import WebSocket

from ..config import GAME_OVER_ROOM_TTL
from ..schemas import PaddleMoved, PlayerJoined, PlayerLeft, RoomClosed
from .constants import TICK_RATE
from .room import Room, RoomManager

logger = logging.getLogger(__name__)


class GameEngine:
    """
    Owns the room registry and the per-room game loops.

    Everything here runs on one event loop. Room.tick() and the registry
    operations never await, so input handling cannot interleave with a tick.
    """

    TICK_RATE = TICK_RATE

    def __init__(self, game_over_ttl: float = GAME_OVER_ROOM_TTL):
        self.room_manager = RoomManager()
        self.game_over_ttl = game_over_ttl
        self.running = False

    async def start(self):
        """Start the game engine"""
        if self.running:
            return
        self.running = True
        logger.info(f"[Engine] Started (tick rate {self.TICK_RATE}/s)")

    async def stop(self):
        """Stop every room loop and pending removal"""
        self.running = False

        tasks = []
        for room in list(self.room_manager.rooms.values()):
            tasks.extend(t for t in (room.loop_task, room.cleanup_task) if t is not None)
            self.stop_room(room)
            self._cancel_cleanup(room)

        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("[Engine] Stopped")

    # -------------------- Sessions -------------------- #

    async def join(self, player_id: str, ws: WebSocket) -> Room:
        """Seat a player in a waiting room (or a new one) and start play when full"""
        while True:
            room = self.room_manager.find_or_create_room()
            if room.add_player(player_id):
                break

        player = room.get_player(player_id)
        room.connections[player_id] = ws
        logger.info(f"[Room {room.room_id}] {player_id} joined as {player.side}")

        await room.send_to_player(player_id, room.get_init_state(player_id))
        await room.broadcast(
            PlayerJoined(player_id=player_id, side=player.side).model_dump(),
            exclude=player_id,
        )

        if room.is_full:
            self.start_room(room)
        return room

    async def leave(self, room: Room, player_id: str):
        """Remove a player. An empty room is destroyed immediately."""
        if not room.remove_player(player_id):
            return
        logger.info(f"[Room {room.room_id}] {player_id} left")

        self.stop_room(room)
        if room.is_empty:
            self._cancel_cleanup(room)
            self.room_manager.remove_room(room.room_id)
            return

        await room.broadcast(PlayerLeft(player_id=player_id).model_dump())

    async def move(self, room: Room, player_id: str, direction: str):
        player = room.get_player(player_id)
        if player is None:
            return

        room.move_paddle(player_id, direction)
        opponent = room.opponent_of(player_id)
        if opponent:
            await room.send_to_player(
                opponent.id,
                PaddleMoved(player_id=player_id, paddle_y=player.paddle_y).model_dump(),
            )

    async def restart(self, room: Room, player_id: str) -> bool:
        """Restart a finished match. Ignored unless the room is in game over."""
        if player_id not in room.players:
            return False
        if self.room_manager.get_room(room.room_id) is not room:
            return False
        if not room.restart():
            return False

        self._cancel_cleanup(room)
        await room.broadcast(room.get_restart_event())
        self.start_room(room)
        return True

    # -------------------- Room loops -------------------- #

    def start_room(self, room: Room) -> bool:
        """Start the room loop. Returns False if it is already running or cannot run."""
        if room.is_running or room.game_over or not room.is_full:
            return False
        if self.room_manager.get_room(room.room_id) is not room:
            return False

        room.loop_task = asyncio.create_task(self._room_loop(room), name=f"room-{room.room_id}")
        logger.info(f"[Room {room.room_id}] Game loop started")
        return True

    def stop_room(self, room: Room) -> bool:
        """Stop the room loop. No tick runs after this returns."""
        task = room.loop_task
        if task is None:
            return False

        room.loop_task = None
        if task is not asyncio.current_task():
            task.cancel()
        logger.info(f"[Room {room.room_id}] Game loop stopped")
        return True

    async def _room_loop(self, room: Room):
        """Tick one room at a fixed rate until stopped or the game ends"""
        interval = 1.0 / self.TICK_RATE
        loop = asyncio.get_running_loop()
        task = asyncio.current_task()

        # Checked before every tick, stop_room() clears it
        while room.loop_task is task:
            loop_start = loop.time()

            try:
                events = room.tick()
            except Exception:
                logger.exception(f"[Room {room.room_id}] Tick failed, stopping room loop")
                room.loop_task = None
                return

            if room.game_over:
                room.loop_task = None
                self._schedule_cleanup(room)

            for event in events:
                await room.broadcast(event)

            if room.loop_task is not task:
                return

            elapsed = loop.time() - loop_start
            await asyncio.sleep(max(0.0, interval - elapsed))

    # -------------------- Game over cleanup -------------------- #

    def _schedule_cleanup(self, room: Room):
        self._cancel_cleanup(room)
        room.cleanup_task = asyncio.create_task(
            self._remove_after_game_over(room), name=f"cleanup-{room.room_id}"
        )

    def _cancel_cleanup(self, room: Room):
        task: Optional[asyncio.Task] = room.cleanup_task
        room.cleanup_task = None
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _remove_after_game_over(self, room: Room):
        await asyncio.sleep(self.game_over_ttl)

        if room.cleanup_task is not asyncio.current_task():
            return
        room.cleanup_task = None
        if self.room_manager.get_room(room.room_id) is not room or not room.game_over:
            return

        self.stop_room(room)
        self.room_manager.remove_room(room.room_id)
        logger.info(f"[Room {room.room_id}] Closed {self.game_over_ttl:g}s after game over")

        await room.broadcast(RoomClosed(room_id=room.room_id).model_dump())
        for player_id, ws in list(room.connections.items()):
            try:
                await ws.close()
            except Exception as e:
                logger.debug(f"[Room {room.room_id}] Close for {player_id} failed: {e}")
