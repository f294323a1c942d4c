"""Доступ к коллекциям juegos и resenas.

Каждый метод делает один запрос к MongoDB. Идентификаторы приходят строками;
неверный формат даёт `bson.errors.InvalidId`, ошибки драйвера пробрасываются
как есть (`pymongo.errors.PyMongoError`), их переводят в HTTP-ответы маршруты.
"""
from typing import Any

from bson import ObjectId
from fastapi import Depends
from pymongo import ReturnDocument

from .db import Storage, get_storage, parse_object_id
from .models import Game, Review


def _out(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    """Готовит документ к ответу: ObjectId превращаются в строки."""
    if doc is None:
        return None
    doc["_id"] = str(doc["_id"])
    if isinstance(doc.get("gameId"), ObjectId):
        doc["gameId"] = str(doc["gameId"])
    return doc


class GameRepository:
    def __init__(self, storage: Storage):
        self._col = storage.games

    async def list_all(self) -> list[dict]:
        """Все игры, новые сверху (по dateAdded)."""
        cursor = self._col.find().sort("dateAdded", -1)
        return [_out(doc) for doc in await cursor.to_list(length=None)]

    async def get(self, game_id: str) -> dict | None:
        return _out(await self._col.find_one({"_id": parse_object_id(game_id)}))

    async def create(self, game: Game) -> dict:
        doc = game.model_dump(by_alias=True, exclude_none=True)
        result = await self._col.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _out(doc)

    async def update(self, game_id: str, changes: dict[str, Any]) -> dict | None:
        """Перезаписывает переданные поля и возвращает обновлённую игру (None, если её нет)."""
        oid = parse_object_id(game_id)
        if not changes:
            return _out(await self._col.find_one({"_id": oid}))
        doc = await self._col.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return _out(doc)

    async def delete(self, game_id: str) -> dict | None:
        return _out(await self._col.find_one_and_delete({"_id": parse_object_id(game_id)}))

    async def find_by_ids(self, ids: list[ObjectId]) -> dict[str, dict]:
        if not ids:
            return {}
        cursor = self._col.find({"_id": {"$in": ids}})
        return {doc["_id"]: doc for doc in map(_out, await cursor.to_list(length=None))}


class ReviewRepository:
    def __init__(self, storage: Storage):
        self._col = storage.reviews
        self._games = GameRepository(storage)

    async def list_with_games(self) -> list[dict]:
        """Все рецензии, новые сверху, с подставленной записью игры вместо gameId.

        Если игра уже удалена, gameId будет None: запрос целиком не падает.
        """
        docs = await self._col.find().sort("date", -1).to_list(length=None)
        ids = list({doc["gameId"] for doc in docs if isinstance(doc.get("gameId"), ObjectId)})
        games = await self._games.find_by_ids(ids)
        reviews = [_out(doc) for doc in docs]
        for review in reviews:
            review["gameId"] = games.get(review.get("gameId"))
        return reviews

    async def list_by_game(self, game_id: str) -> list[dict]:
        cursor = self._col.find({"gameId": parse_object_id(game_id)}).sort("date", -1)
        return [_out(doc) for doc in await cursor.to_list(length=None)]

    async def create(self, review: Review) -> dict:
        doc = review.model_dump(by_alias=True, exclude_none=True)
        doc["gameId"] = parse_object_id(doc["gameId"])
        result = await self._col.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _out(doc)

    async def update(self, review_id: str, changes: dict[str, Any]) -> dict | None:
        oid = parse_object_id(review_id)
        if "gameId" in changes:
            changes = {**changes, "gameId": parse_object_id(changes["gameId"])}
        if not changes:
            return _out(await self._col.find_one({"_id": oid}))
        doc = await self._col.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return _out(doc)

    async def delete(self, review_id: str) -> dict | None:
        return _out(await self._col.find_one_and_delete({"_id": parse_object_id(review_id)}))

    async def delete_by_game(self, game_id: str) -> int:
        """Удаляет все рецензии игры и возвращает их количество."""
        result = await self._col.delete_many({"gameId": parse_object_id(game_id)})
        return result.deleted_count


def get_game_repository(storage: Storage = Depends(get_storage)) -> GameRepository:
    """FastAPI dependency: репозиторий игр поверх общего хранилища."""
    return GameRepository(storage)


def get_review_repository(storage: Storage = Depends(get_storage)) -> ReviewRepository:
    """FastAPI dependency: репозиторий рецензий поверх общего хранилища."""
    return ReviewRepository(storage)
