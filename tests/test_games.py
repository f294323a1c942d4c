"""
Tests for the /api/juegos endpoints.

Run with:
    python -m pytest tests/test_games.py
"""
from unittest.mock import AsyncMock, patch

from bson import ObjectId
from pymongo.errors import PyMongoError

from app.repositories import GameRepository, ReviewRepository
from support import ApiTestCase


class TestCreateGame(ApiTestCase):

    def test_create_returns_id_and_defaults(self):
        game = self.create_game()
        self.assertTrue(ObjectId.is_valid(game["_id"]))
        self.assertEqual(game["title"], "Celeste")
        self.assertFalse(game["completed"])
        self.assertEqual(game["rating"], 0)
        self.assertEqual(game["hoursPlayed"], 0)
        self.assertIn("dateAdded", game)

    def test_missing_title_is_400(self):
        resp = self.client.post("/api/juegos", json={"platform": "Switch"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("title", resp.json()["error"])

    def test_empty_title_is_400(self):
        resp = self.client.post("/api/juegos", json={"title": ""})
        self.assertEqual(resp.status_code, 400)

    def test_rating_out_of_range_is_400(self):
        resp = self.client.post("/api/juegos", json={"title": "Celeste", "rating": 6})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_negative_rating_is_400(self):
        resp = self.client.post("/api/juegos", json={"title": "Celeste", "rating": -1})
        self.assertEqual(resp.status_code, 400)

    def test_rating_bounds_are_accepted(self):
        self.assertEqual(self.create_game(rating=0)["rating"], 0)
        self.assertEqual(self.create_game(rating=5)["rating"], 5)

    def test_rating_within_range(self):
        game = self.create_game(rating=4.5)
        self.assertEqual(game["rating"], 4.5)

    def test_infinite_hours_played_is_400(self):
        resp = self.client.post(
            "/api/juegos",
            content=b'{"title": "Celeste", "hoursPlayed": Infinity}',
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("hoursPlayed", resp.json()["error"])
        self.assertEqual(self.client.get("/api/juegos").json(), [])

    def test_nan_rating_is_400(self):
        resp = self.client.post(
            "/api/juegos",
            content=b'{"title": "Celeste", "rating": NaN}',
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)

    def test_unknown_field_is_rejected(self):
        resp = self.client.post("/api/juegos", json={"title": "Celeste", "owner": "me"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("owner", resp.json()["error"])

    def test_malformed_json_is_400(self):
        resp = self.client.post(
            "/api/juegos",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(resp.json()["error"].startswith("body: "))

    def test_backend_error_is_500(self):
        with patch.object(GameRepository, "create", new=AsyncMock(side_effect=PyMongoError("down"))):
            resp = self.client.post("/api/juegos", json={"title": "Celeste"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Error creating game"})


class TestReadGames(ApiTestCase):

    def test_round_trip(self):
        posted = {"title": "Hades", "platform": "PC", "genre": "Roguelike", "coverUrl": "http://img/hades.png"}
        created = self.create_game(**posted)
        resp = self.client.get(f"/api/juegos/{created['_id']}")
        self.assertEqual(resp.status_code, 200)
        fetched = resp.json()
        for key, value in posted.items():
            self.assertEqual(fetched[key], value)
        self.assertEqual(fetched["_id"], created["_id"])
        self.assertFalse(fetched["completed"])
        self.assertEqual(fetched["rating"], 0)
        self.assertEqual(fetched["hoursPlayed"], 0)
        self.assertTrue(fetched["dateAdded"])

    def test_list_is_newest_first(self):
        self.create_game(title="Old", dateAdded="2023-01-01T00:00:00Z")
        self.create_game(title="New", dateAdded="2025-01-01T00:00:00Z")
        self.create_game(title="Middle", dateAdded="2024-01-01T00:00:00Z")
        resp = self.client.get("/api/juegos")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([g["title"] for g in resp.json()], ["New", "Middle", "Old"])

    def test_list_empty(self):
        resp = self.client.get("/api/juegos")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [])

    def test_unknown_id_is_404(self):
        resp = self.client.get(f"/api/juegos/{ObjectId()}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Game not found"})

    def test_malformed_id_is_500(self):
        resp = self.client.get("/api/juegos/not-an-id")
        self.assertEqual(resp.status_code, 500)
        self.assertIn("error", resp.json())

    def test_list_backend_error_is_500(self):
        with patch.object(GameRepository, "list_all", new=AsyncMock(side_effect=PyMongoError("down"))):
            resp = self.client.get("/api/juegos")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Error fetching games"})


class TestUpdateGame(ApiTestCase):

    def test_partial_update_keeps_other_fields(self):
        game = self.create_game(platform="Switch")
        resp = self.client.put(f"/api/juegos/{game['_id']}", json={"completed": True, "hoursPlayed": 12})
        self.assertEqual(resp.status_code, 200)
        updated = resp.json()
        self.assertTrue(updated["completed"])
        self.assertEqual(updated["hoursPlayed"], 12)
        self.assertEqual(updated["platform"], "Switch")
        self.assertEqual(updated["title"], "Celeste")

    def test_update_is_persisted(self):
        game = self.create_game()
        self.client.put(f"/api/juegos/{game['_id']}", json={"rating": 5})
        self.assertEqual(self.client.get(f"/api/juegos/{game['_id']}").json()["rating"], 5)

    def test_empty_update_returns_current_record(self):
        game = self.create_game()
        resp = self.client.put(f"/api/juegos/{game['_id']}", json={})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["title"], "Celeste")

    def test_rating_out_of_range_is_400(self):
        game = self.create_game()
        resp = self.client.put(f"/api/juegos/{game['_id']}", json={"rating": 7})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.client.get(f"/api/juegos/{game['_id']}").json()["rating"], 0)

    def test_null_title_is_400(self):
        game = self.create_game()
        resp = self.client.put(f"/api/juegos/{game['_id']}", json={"title": None})
        self.assertEqual(resp.status_code, 400)

    def test_infinite_hours_played_update_is_400(self):
        game = self.create_game()
        resp = self.client.put(
            f"/api/juegos/{game['_id']}",
            content=b'{"hoursPlayed": -Infinity}',
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.client.get(f"/api/juegos/{game['_id']}").json()["hoursPlayed"], 0)

    def test_null_completed_is_400(self):
        game = self.create_game()
        resp = self.client.put(f"/api/juegos/{game['_id']}", json={"completed": None})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("completed", resp.json()["error"])

    def test_unknown_field_is_400(self):
        game = self.create_game()
        resp = self.client.put(f"/api/juegos/{game['_id']}", json={"_id": str(ObjectId())})
        self.assertEqual(resp.status_code, 400)

    def test_unknown_id_is_404(self):
        resp = self.client.put(f"/api/juegos/{ObjectId()}", json={"completed": True})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Game not found"})

    def test_malformed_id_is_400(self):
        resp = self.client.put("/api/juegos/123", json={"completed": True})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Error updating game"})


class TestDeleteGame(ApiTestCase):

    def test_delete_cascades_to_reviews(self):
        game = self.create_game()
        other = self.create_game(title="Hades")
        self.create_review(game["_id"])
        self.create_review(game["_id"], title="Second look")
        kept = self.create_review(other["_id"])

        resp = self.client.delete(f"/api/juegos/{game['_id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Game deleted successfully", "deletedReviews": 2})

        self.assertEqual(self.client.get(f"/api/resenas/juego/{game['_id']}").json(), [])
        self.assertEqual(self.client.get(f"/api/juegos/{game['_id']}").status_code, 404)
        remaining = self.client.get(f"/api/resenas/juego/{other['_id']}").json()
        self.assertEqual([r["_id"] for r in remaining], [kept["_id"]])

    def test_unknown_id_is_404(self):
        resp = self.client.delete(f"/api/juegos/{ObjectId()}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Game not found"})

    def test_malformed_id_is_500(self):
        resp = self.client.delete("/api/juegos/xyz")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Error deleting game"})

    def test_review_cleanup_failure_is_reported_as_partial(self):
        game = self.create_game()
        self.create_review(game["_id"])
        failing = AsyncMock(side_effect=PyMongoError("connection lost"))
        with patch.object(ReviewRepository, "delete_by_game", new=failing):
            resp = self.client.delete(f"/api/juegos/{game['_id']}")

        self.assertEqual(resp.status_code, 500)
        body = resp.json()
        self.assertTrue(body["partial"])
        self.assertTrue(body["gameDeleted"])
        self.assertIn("error", body)
        # игра удалена, рецензия осталась сиротой
        self.assertEqual(self.client.get(f"/api/juegos/{game['_id']}").status_code, 404)
        self.assertEqual(len(self.client.get(f"/api/resenas/juego/{game['_id']}").json()), 1)
