from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import Game, ObjectIdStr, Review


class GameCreate(Game):
    model_config = ConfigDict(extra="forbid")


class GameUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid", allow_inf_nan=False)

    title: Optional[str] = Field(default=None, min_length=1)
    platform: Optional[str] = None
    genre: Optional[str] = None
    completed: Optional[bool] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    hours_played: Optional[float] = None
    cover_url: Optional[str] = None
    date_added: Optional[datetime] = None

    @field_validator("title", "completed", "rating", "hours_played", "date_added")
    @classmethod
    def not_null(cls, value, info):
        # Поле можно не передавать, но записать в него null нельзя.
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class GameOut(Game):
    id: str = Field(alias="_id")


class ReviewCreate(Review):
    model_config = ConfigDict(extra="forbid")


class ReviewUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid", allow_inf_nan=False)

    game_id: Optional[ObjectIdStr] = None
    title: Optional[str] = None
    content: Optional[str] = Field(default=None, min_length=1)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    date: Optional[datetime] = None

    @field_validator("game_id", "content", "date")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class ReviewOut(Review):
    id: str = Field(alias="_id")


class ReviewWithGame(ReviewOut):
    """Рецензия, у которой gameId заменён полной записью игры (None, если игры уже нет)."""

    game_id: Optional[GameOut] = None


class MessageOut(BaseModel):
    message: str


class GameDeletedOut(MessageOut):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    deleted_reviews: int
