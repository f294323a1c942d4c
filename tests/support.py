import uuid
import unittest

from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.db import Storage
from app.main import create_app


class ApiTestCase(unittest.TestCase):
    """Приложение поверх mongomock: у каждого теста своя чистая база."""

    def setUp(self):
        self.storage = Storage(AsyncMongoMockClient(), db_name=f"gametracker_{uuid.uuid4().hex}")
        self.client = TestClient(create_app(storage=self.storage))

    def create_game(self, **fields):
        body = {"title": "Celeste", **fields}
        resp = self.client.post("/api/juegos", json=body)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def create_review(self, game_id, **fields):
        body = {"gameId": game_id, "content": "Great platformer", **fields}
        resp = self.client.post("/api/resenas", json=body)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()
