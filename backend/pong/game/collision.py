"""
Collision detection utilities.
"""
from typing import Tuple

from .constants import BALL_SIZE, BOUNCE_SPREAD, CANVAS_WIDTH, PADDLE_HEIGHT, PADDLE_WIDTH, PLAYER1

# (left, top, right, bottom)
Rect = Tuple[float, float, float, float]


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value between min and max"""
    return max(min_val, min(max_val, value))


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Axis-aligned overlap test. Touching edges do not count."""
    a_left, a_top, a_right, a_bottom = a
    b_left, b_top, b_right, b_bottom = b
    return (
        a_right > b_left
        and a_left < b_right
        and a_bottom > b_top
        and a_top < b_bottom
    )


def paddle_x(side: str, canvas_width: float = CANVAS_WIDTH) -> float:
    """Left edge of the paddle for a side"""
    return 0.0 if side == PLAYER1 else canvas_width - PADDLE_WIDTH


def paddle_rect(side: str, paddle_y: float, canvas_width: float = CANVAS_WIDTH) -> Rect:
    x = paddle_x(side, canvas_width)
    return (x, paddle_y, x + PADDLE_WIDTH, paddle_y + PADDLE_HEIGHT)


def ball_rect(x: float, y: float) -> Rect:
    return (x, y, x + BALL_SIZE, y + BALL_SIZE)


def swept_ball_rect(prev_x: float, x: float, y: float) -> Rect:
    """Ball box stretched over the horizontal distance covered in one tick"""
    return (min(prev_x, x), y, max(prev_x, x) + BALL_SIZE, y + BALL_SIZE)


def bounce_velocity_y(ball_y: float, paddle_y: float) -> float:
    """
    Vertical speed after a paddle hit.

    Hitting the paddle centre sends the ball straight back, hitting an edge
    deflects it by up to BOUNCE_SPREAD / 2 per tick.
    """
    hit = (ball_y - paddle_y) / PADDLE_HEIGHT
    return (hit - 0.5) * BOUNCE_SPREAD
