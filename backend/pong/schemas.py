from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


# ============== Client -> Server ==============

class MovePaddle(BaseModel):
    type: Literal["move"] = "move"
    direction: Literal["up", "down"]


class RestartGame(BaseModel):
    type: Literal["restart"] = "restart"


class LeaveRoom(BaseModel):
    type: Literal["leave"] = "leave"


ClientMessage = Annotated[Union[MovePaddle, RestartGame, LeaveRoom], Field(discriminator="type")]
client_message_adapter = TypeAdapter(ClientMessage)


# ============== Server -> Client ==============

class Size(BaseModel):
    width: int
    height: int


class BallStateData(BaseModel):
    x: float
    y: float
    vx: float
    vy: float


class PlayerStateData(BaseModel):
    id: str
    side: Literal["player1", "player2"]
    is_player1: bool
    paddle_y: float
    score: int


class GameInit(BaseModel):
    type: Literal["init"] = "init"
    room_id: str
    player_id: str
    side: Literal["player1", "player2"]
    is_player1: bool
    canvas: Size
    paddle: Size
    ball_size: int


class GameState(BaseModel):
    type: Literal["update"] = "update"
    ball: BallStateData
    players: List[PlayerStateData]


class GameRestart(GameState):
    type: Literal["restart"] = "restart"


class PaddleMoved(BaseModel):
    type: Literal["paddle_moved"] = "paddle_moved"
    player_id: str
    paddle_y: float


class PlayerJoined(BaseModel):
    type: Literal["player_joined"] = "player_joined"
    player_id: str
    side: Literal["player1", "player2"]


class PlayerLeft(BaseModel):
    type: Literal["player_left"] = "player_left"
    player_id: str


class FinalScore(BaseModel):
    player_id: str
    score: int
    side: Literal["player1", "player2"]


class GameOver(BaseModel):
    type: Literal["game_over"] = "game_over"
    winner_id: Optional[str]
    winner_side: Optional[Literal["player1", "player2"]]
    winner_name: Optional[str]
    scores: List[FinalScore]


class RoomClosed(BaseModel):
    type: Literal["room_closed"] = "room_closed"
    room_id: str


class Error(BaseModel):
    type: Literal["error"] = "error"
    message: str


# ============== REST ==============

class RoomSummary(BaseModel):
    room_id: str
    players: int
    status: Literal["empty", "waiting", "playing", "finished"]
    scores: Dict[str, int] = Field(default_factory=dict)
