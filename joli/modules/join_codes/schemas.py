from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class JoinCodeResponse(BaseModel):
    game_id: str
    join_code: str


class ParticipantGameView(BaseModel):
    """Limited game information returned to participants who hold a join code."""
    id: str
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    type: str
    status: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    max_participants: Optional[int] = None


class JoinGameResponse(BaseModel):
    message: str
    game: ParticipantGameView
