"""
Game constants shared with the browser client.

Changing any of these desyncs gameplay with clients built against the old values.
"""

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 400

PADDLE_WIDTH = 15
PADDLE_HEIGHT = 80
PADDLE_SPEED = 8  # units per tick

BALL_SIZE = 15  # ball is treated as a square of this side
BALL_SPEED = 5  # units per tick
BOUNCE_ACCELERATION = 1.1  # |vx| multiplier on every paddle return
BOUNCE_SPREAD = 10  # vy range produced by the hit-position bounce

WIN_SCORE = 10
TICK_RATE = 60  # ticks per second

PLAYER1 = "player1"
PLAYER2 = "player2"
SIDES = (PLAYER1, PLAYER2)

__all__ = [
    "CANVAS_WIDTH",
    "CANVAS_HEIGHT",
    "PADDLE_WIDTH",
    "PADDLE_HEIGHT",
    "PADDLE_SPEED",
    "BALL_SIZE",
    "BALL_SPEED",
    "BOUNCE_ACCELERATION",
    "BOUNCE_SPREAD",
    "WIN_SCORE",
    "TICK_RATE",
    "PLAYER1",
    "PLAYER2",
    "SIDES",
]
