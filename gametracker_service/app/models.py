from datetime import datetime, timezone
from typing import Annotated, Optional

from bson import ObjectId
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Имена коллекций MongoDB.
GAMES_COLLECTION = "juegos"
REVIEWS_COLLECTION = "resenas"


def utcnow() -> datetime:
    """Текущее время в UTC, обрезанное до миллисекунд (точность BSON Date)."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _check_object_id(value: str) -> str:
    if not ObjectId.is_valid(value):
        raise ValueError("must be a 24-character hex identifier")
    return value


# Строковое представление ObjectId, проверяемое на входе.
ObjectIdStr = Annotated[str, AfterValidator(_check_object_id)]


class Record(BaseModel):
    """Базовая модель документа: поля в JSON и в MongoDB хранятся в camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class Game(Record):
    """Игра в трекере (коллекция juegos)."""

    title: str = Field(min_length=1)
    platform: Optional[str] = None
    genre: Optional[str] = None
    completed: bool = False
    rating: float = Field(default=0, ge=0, le=5)
    hours_played: float = 0
    cover_url: Optional[str] = None
    date_added: datetime = Field(default_factory=utcnow)


class Review(Record):
    """Рецензия на игру (коллекция resenas).

    `game_id` только ссылается на игру: существование игры при записи не проверяется.
    """

    game_id: ObjectIdStr
    title: Optional[str] = None
    content: str = Field(min_length=1)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    date: datetime = Field(default_factory=utcnow)
