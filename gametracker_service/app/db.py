from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from .config import MONGO_URI
from .models import GAMES_COLLECTION, REVIEWS_COLLECTION

DEFAULT_DB_NAME = "gametracker"

# Ошибки, которые обработчики считают сбоем хранилища (ответ 500).
BACKEND_ERRORS = (PyMongoError, InvalidId)


class Storage:
    """Единственное долгоживущее подключение к MongoDB.

    Создаётся один раз при старте процесса и передаётся в обработчики
    через зависимость `get_storage`.
    """

    def __init__(self, client, db_name: str | None = None):
        self.client = client
        if db_name:
            self.db = client[db_name]
        else:
            self.db = client.get_default_database(DEFAULT_DB_NAME)

    @property
    def games(self):
        return self.db[GAMES_COLLECTION]

    @property
    def reviews(self):
        return self.db[REVIEWS_COLLECTION]

    async def ping(self) -> None:
        await self.client.admin.command("ping")

    async def collection_names(self) -> list[str]:
        return await self.db.list_collection_names()

    def close(self) -> None:
        self.client.close()


def create_storage(uri: str = MONGO_URI) -> Storage:
    """Создаёт клиента Motor. Само подключение устанавливается лениво, при первом запросе."""
    return Storage(AsyncIOMotorClient(uri, tz_aware=True))


def get_storage(request: Request) -> Storage:
    """FastAPI dependency: отдаёт хранилище, созданное при старте приложения."""
    return request.app.state.storage


def parse_object_id(value: str) -> ObjectId:
    """Превращает строковый идентификатор в ObjectId (InvalidId, если формат неверный)."""
    return ObjectId(value)
