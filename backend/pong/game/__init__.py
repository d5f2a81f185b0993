from .ball import Ball, Vector2
from .player import PlayerEntity
from .engine import GameEngine
from .room import Room, RoomManager

__all__ = ['Ball', 'Vector2', 'PlayerEntity', 'GameEngine', 'Room', 'RoomManager']
