"""
Ball entity.
"""
import random
from dataclasses import dataclass
from typing import Optional

from .constants import BALL_SPEED, CANVAS_HEIGHT, CANVAS_WIDTH


@dataclass
class Vector2:
    x: float = 0.0
    y: float = 0.0


class Ball:
    SPEED = BALL_SPEED

    def __init__(self, position: Optional[Vector2] = None, velocity: Optional[Vector2] = None):
        self.position = position or Vector2(CANVAS_WIDTH / 2, CANVAS_HEIGHT / 2)
        self.velocity = velocity or self._serve_velocity()

    @classmethod
    def _serve_velocity(cls) -> Vector2:
        return Vector2(
            cls.SPEED * random.choice((1, -1)),
            cls.SPEED * random.uniform(-1, 1),
        )

    def update(self, width: float = CANVAS_WIDTH, height: float = CANVAS_HEIGHT):
        """Move one tick. Only the top and bottom walls reflect."""
        self.position.x += self.velocity.x
        self.position.y += self.velocity.y

        if self.position.y <= 0 or self.position.y >= height:
            self.velocity.y = -self.velocity.y

    def reset(self, width: float = CANVAS_WIDTH, height: float = CANVAS_HEIGHT):
        """Serve again from the centre in a random direction"""
        self.position = Vector2(width / 2, height / 2)
        self.velocity = self._serve_velocity()

    def to_state(self) -> dict:
        return {
            "x": self.position.x,
            "y": self.position.y,
            "vx": self.velocity.x,
            "vy": self.velocity.y,
        }
