from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any
from datetime import datetime
import re

_IMAGE_URL = re.compile(r"^https?://.+")
_IMAGE_DATA_URL = re.compile(r"^data:image/.+;base64,.+")


class GameStatus(str, Enum):
    draft = "draft"
    active = "active"
    paused = "paused"
    completed = "completed"
    cancelled = "cancelled"


class GameType(str, Enum):
    scavenger_hunt = "scavenger_hunt"
    dj_song_voting = "dj_song_voting"
    guess_the_song = "guess_the_song"
    trivia = "trivia"
    hangman = "hangman"
    word_scramble = "word_scramble"
    creative_challenge = "creative_challenge"
    truth_or_dare = "truth_or_dare"


def _check_image(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if _IMAGE_URL.match(value) or _IMAGE_DATA_URL.match(value):
        return value
    raise ValueError("Image must be a valid URL or data URL")


class GameCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    image: Optional[str] = None
    type: GameType
    rules: Optional[Dict[str, Any]] = None
    max_participants: Optional[int] = Field(default=None, ge=1)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("image")
    @classmethod
    def validate_image(cls, v):
        return _check_image(v)


class GameUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    image: Optional[str] = None
    type: Optional[GameType] = None
    rules: Optional[Dict[str, Any]] = None
    max_participants: Optional[int] = Field(default=None, ge=1)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("image")
    @classmethod
    def validate_image(cls, v):
        return _check_image(v)


class GameResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    type: str
    organizer_id: str
    rules: Optional[Dict[str, Any]] = None
    max_participants: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: str
    join_code: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
