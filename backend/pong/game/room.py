"""
Room and lobby management.
"""
import asyncio
import logging
import uuid
from typing import Dict, List, Optional

from fastapi import WebSocket

from ..schemas import FinalScore, GameInit, GameOver, GameRestart, GameState, RoomSummary, Size
from .ball import Ball
from .collision import ball_rect, bounce_velocity_y, paddle_rect, rects_overlap, swept_ball_rect
from .constants import (
    BALL_SIZE,
    BOUNCE_ACCELERATION,
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    PADDLE_HEIGHT,
    PADDLE_WIDTH,
    PLAYER1,
    PLAYER2,
    SIDES,
    WIN_SCORE,
)
from .player import PlayerEntity

logger = logging.getLogger(__name__)


class Room:
    """A two player match with its own ball, paddles and scores"""

    CANVAS_WIDTH = CANVAS_WIDTH
    CANVAS_HEIGHT = CANVAS_HEIGHT
    MAX_PLAYERS = 2
    WIN_SCORE = WIN_SCORE

    def __init__(self, room_id: str):
        self.room_id = room_id

        # Join order is preserved
        self.players: Dict[str, PlayerEntity] = {}
        self.connections: Dict[str, WebSocket] = {}

        self.ball = Ball()
        self.game_over = False
        self.winner_id: Optional[str] = None
        self.tick_count = 0

        # Managed by the engine
        self.loop_task: Optional[asyncio.Task] = None
        self.cleanup_task: Optional[asyncio.Task] = None

    # -------------------- Player management -------------------- #

    def add_player(self, player_id: str) -> bool:
        """Add a player on the first free side. Returns False if the room is full."""
        if self.is_full:
            return False

        taken = {p.side for p in self.players.values()}
        side = next(s for s in SIDES if s not in taken)
        self.players[player_id] = PlayerEntity(player_id, side)
        return True

    def remove_player(self, player_id: str) -> bool:
        """Remove a player from the room"""
        self.connections.pop(player_id, None)
        return self.players.pop(player_id, None) is not None

    def get_player(self, player_id: str) -> Optional[PlayerEntity]:
        return self.players.get(player_id)

    def get_player_by_side(self, side: str) -> Optional[PlayerEntity]:
        for player in self.players.values():
            if player.side == side:
                return player
        return None

    def opponent_of(self, player_id: str) -> Optional[PlayerEntity]:
        for pid, player in self.players.items():
            if pid != player_id:
                return player
        return None

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def is_empty(self) -> bool:
        return len(self.players) == 0

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.MAX_PLAYERS

    @property
    def is_running(self) -> bool:
        return self.loop_task is not None

    @property
    def status(self) -> str:
        if self.game_over:
            return "finished"
        if self.is_running:
            return "playing"
        if self.is_empty:
            return "empty"
        return "waiting"

    # -------------------- Game rules -------------------- #

    def move_paddle(self, player_id: str, direction: str):
        """Move a paddle. Unknown players are ignored (they may have just left)."""
        player = self.players.get(player_id)
        if player:
            player.move(direction)

    def tick(self) -> List[dict]:
        """
        Advance the match by one step. Returns the events to broadcast.
        """
        self.tick_count += 1
        prev_x = self.ball.position.x
        self.ball.update(self.CANVAS_WIDTH, self.CANVAS_HEIGHT)
        self._check_paddle_collisions(prev_x)

        scorer = self._check_scoring()
        if scorer is not None:
            scorer.score += 1
            logger.info(f"[Room {self.room_id}] {scorer.side} scored, score: {scorer.score}")
            if scorer.score >= self.WIN_SCORE:
                self.game_over = True
                self.winner_id = scorer.id
                logger.info(f"[Room {self.room_id}] Game over, winner: {scorer.id} ({scorer.side})")
                return [self.get_game_over_event()]

        if self._ball_out():
            self.ball.reset(self.CANVAS_WIDTH, self.CANVAS_HEIGHT)

        return [self.get_update_event()]

    def _check_paddle_collisions(self, prev_x: float):
        ball = self.ball
        box = ball_rect(ball.position.x, ball.position.y)
        # Covers the whole step so a fast ball cannot skip over a paddle
        swept = swept_ball_rect(prev_x, ball.position.x, ball.position.y)

        for player in self.players.values():
            paddle = paddle_rect(player.side, player.paddle_y, self.CANVAS_WIDTH)
            if not rects_overlap(swept, paddle):
                continue

            # Only bounce a ball heading into the paddle, so it cannot
            # flip back and forth while still overlapping it
            towards = ball.velocity.x < 0 if player.is_player1 else ball.velocity.x > 0
            if not towards:
                continue

            if not rects_overlap(box, paddle):
                # Passed through during the step, put it back on the paddle face
                ball.position.x = paddle[2] if player.is_player1 else paddle[0] - BALL_SIZE

            ball.velocity.x *= -BOUNCE_ACCELERATION
            ball.velocity.y = bounce_velocity_y(ball.position.y, player.paddle_y)

    def _ball_out(self) -> bool:
        return self.ball.position.x < 0 or self.ball.position.x > self.CANVAS_WIDTH

    def _check_scoring(self) -> Optional[PlayerEntity]:
        """Player credited for the ball leaving the canvas, if any"""
        if self.ball.position.x < 0:
            return self.get_player_by_side(PLAYER2)
        if self.ball.position.x > self.CANVAS_WIDTH:
            return self.get_player_by_side(PLAYER1)
        return None

    def restart(self) -> bool:
        """Start a fresh match after game over. Returns False if the game is not over."""
        if not self.game_over:
            return False

        for player in self.players.values():
            player.reset()
        self.ball.reset(self.CANVAS_WIDTH, self.CANVAS_HEIGHT)
        self.game_over = False
        self.winner_id = None
        logger.info(f"[Room {self.room_id}] Restarted")
        return True

    # -------------------- State -------------------- #

    def get_state(self) -> dict:
        """Snapshot of ball and players, safe to keep across ticks"""
        return {
            "ball": self.ball.to_state(),
            "players": [p.to_state() for p in self.players.values()],
        }

    def get_update_event(self) -> dict:
        return GameState(**self.get_state()).model_dump()

    def get_init_state(self, player_id: str) -> dict:
        player = self.players[player_id]
        return GameInit(
            room_id=self.room_id,
            player_id=player.id,
            side=player.side,
            is_player1=player.is_player1,
            canvas=Size(width=self.CANVAS_WIDTH, height=self.CANVAS_HEIGHT),
            paddle=Size(width=PADDLE_WIDTH, height=PADDLE_HEIGHT),
            ball_size=BALL_SIZE,
        ).model_dump()

    def get_game_over_event(self) -> dict:
        winner = self.players.get(self.winner_id)
        return GameOver(
            winner_id=self.winner_id,
            winner_side=winner.side if winner else None,
            winner_name=("Player 1" if winner.is_player1 else "Player 2") if winner else None,
            scores=[
                FinalScore(player_id=p.id, score=p.score, side=p.side)
                for p in self.players.values()
            ],
        ).model_dump()

    def get_restart_event(self) -> dict:
        return GameRestart(**self.get_state()).model_dump()

    def get_summary(self) -> RoomSummary:
        return RoomSummary(
            room_id=self.room_id,
            players=self.player_count,
            status=self.status,
            scores={p.side: p.score for p in self.players.values()},
        )

    # -------------------- Broadcasting -------------------- #

    async def broadcast(self, message: dict, exclude: Optional[str] = None):
        """Send message to all players in room"""
        for player_id in list(self.connections):
            if player_id == exclude:
                continue
            await self.send_to_player(player_id, message)

    async def send_to_player(self, player_id: str, message: dict):
        """Send message to specific player"""
        ws = self.connections.get(player_id)
        if ws is None:
            return
        try:
            await ws.send_json(message)
        except Exception as e:
            # The endpoint notices the dead socket and removes the player
            logger.warning(f"[Room {self.room_id}] Send to {player_id} failed: {e}")
            self.connections.pop(player_id, None)


class RoomManager:
    """Manages all active rooms"""

    def __init__(self):
        self.rooms: Dict[str, Room] = {}

    def create_room(self) -> Room:
        """Create a new room with unique id"""
        while True:
            room_id = str(uuid.uuid4())
            if room_id not in self.rooms:
                break

        room = Room(room_id)
        self.rooms[room_id] = room
        logger.info(f"[Room {room_id}] Created")
        return room

    def get_room(self, room_id: str) -> Optional[Room]:
        """Get room by id"""
        return self.rooms.get(room_id)

    def find_or_create_room(self) -> Room:
        """
        Return a room with one player waiting, or a new room.

        Any waiting room may be picked when there are several.
        """
        for room in self.rooms.values():
            if room.player_count == 1 and not room.game_over:
                return room

        return self.create_room()

    def remove_room(self, room_id: str):
        """Remove a room. Unknown ids are ignored."""
        if self.rooms.pop(room_id, None) is not None:
            logger.info(f"[Room {room_id}] Removed")

    def get_summaries(self) -> List[RoomSummary]:
        return [room.get_summary() for room in self.rooms.values()]
