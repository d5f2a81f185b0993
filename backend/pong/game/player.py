"""
Player entity for the game.
"""
from .collision import clamp, paddle_x
from .constants import CANVAS_HEIGHT, PADDLE_HEIGHT, PADDLE_SPEED, PLAYER1


class PlayerEntity:
    SPEED = PADDLE_SPEED  # units per move message
    MIN_Y = 0
    MAX_Y = CANVAS_HEIGHT - PADDLE_HEIGHT
    START_Y = (CANVAS_HEIGHT - PADDLE_HEIGHT) / 2

    def __init__(self, player_id: str, side: str):
        self.id = player_id
        # Fixed for the lifetime of the connection
        self.side = side

        self.paddle_y = self.START_Y
        self.score = 0

    @property
    def is_player1(self) -> bool:
        return self.side == PLAYER1

    @property
    def paddle_x(self) -> float:
        return paddle_x(self.side)

    def move(self, direction: str):
        """Move the paddle one step up or down, staying on the canvas"""
        if direction == "up":
            step = -self.SPEED
        elif direction == "down":
            step = self.SPEED
        else:
            return
        self.paddle_y = clamp(self.paddle_y + step, self.MIN_Y, self.MAX_Y)

    def reset(self):
        """Back to the starting position with no points"""
        self.paddle_y = self.START_Y
        self.score = 0

    def to_state(self) -> dict:
        return {
            "id": self.id,
            "side": self.side,
            "is_player1": self.is_player1,
            "paddle_y": self.paddle_y,
            "score": self.score,
        }
