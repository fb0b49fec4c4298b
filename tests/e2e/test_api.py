"""
End-to-End Tests for the REST API

Runs the FastAPI app in-process with TestClient. The assistant singleton is
replaced by one on a virtual clock so replies can be fired on demand.
"""

import random
from unittest.mock import MagicMock

import pytest
import sys
import os

# Add project root and backend to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "leetmetric_assistant", "src"))
sys.path.insert(0, os.path.join(project_root, "backend"))

from fastapi.testclient import TestClient

import main
from leetmetric_assistant.assistant import QUICK_QUESTIONS, LeetMetricAssistant
from leetmetric_assistant.config import VARIANT_KEY
from leetmetric_assistant.dashboard import DashboardRenderer
from leetmetric_assistant.preference_store import InMemoryStore
from leetmetric_assistant.scheduler import VirtualTimer
from leetmetric_assistant.session_state import WELCOME_MESSAGE
from leetmetric_assistant.stats_client import StatsFetchError, StatsRecord


class TestAssistantAPI:
    """Test suite for backend/main.py endpoints."""

    @pytest.fixture
    def timer(self):
        return VirtualTimer()

    @pytest.fixture
    def store(self):
        return InMemoryStore()

    @pytest.fixture
    def stats_client(self):
        return MagicMock()

    @pytest.fixture
    def client(self, monkeypatch, timer, store, stats_client):
        assistant = LeetMetricAssistant(timer=timer, store=store, rng=random.Random(3))
        dashboard = DashboardRenderer(store, rng=random.Random(3))
        assistant.events.subscribe(dashboard.on_preference_changed)

        monkeypatch.setattr(main, "_assistant_instance", assistant)
        monkeypatch.setattr(main, "_dashboard_instance", dashboard)
        monkeypatch.setattr(main, "_stats_client", stats_client)
        return TestClient(main.app)

    def test_health(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["topics"] == 9

    def test_open_then_welcome(self, client, timer):
        response = client.post("/api/sessions/s1/open")
        assert response.json()["surface"] == "open"

        timer.run_all()

        messages = client.get("/api/sessions/s1/messages").json()["messages"]
        assert [m["content"] for m in messages] == [WELCOME_MESSAGE]
        assert messages[0]["sender"] == "assistant"

    def test_surface_endpoints(self, client):
        assert client.post("/api/sessions/s2/toggle").json()["surface"] == "open"
        assert client.post("/api/sessions/s2/minimize").json()["surface"] == "minimized"
        assert client.post("/api/sessions/s2/minimize").json()["surface"] == "open"
        assert client.post("/api/sessions/s2/close").json()["surface"] == "closed"

    def test_unknown_session_is_404(self, client):
        assert client.post("/api/sessions/nobody/close").status_code == 404
        assert client.get("/api/sessions/nobody/messages").status_code == 404

    def test_message_reply_after_delay(self, client, timer):
        response = client.post("/api/sessions/s3/messages", json={"content": "explain binary search"})
        assert response.status_code == 202
        assert response.json()["composing"] is True
        assert response.json()["message_count"] == 1

        timer.run_all()

        body = client.get("/api/sessions/s3/messages").json()
        assert body["composing"] is False
        assert len(body["messages"]) == 2
        reply = body["messages"][1]
        assert reply["content"].startswith("**Binary Search Algorithm**")
        assert reply["html"].startswith("<strong>Binary Search Algorithm</strong>")
        assert '<pre><code class="language-python">' in reply["html"]

    def test_blank_message_rejected(self, client, timer):
        response = client.post("/api/sessions/s4/messages", json={"content": "   "})
        assert response.status_code == 422
        assert timer.pending == 0
        assert client.get("/api/sessions/s4/messages").json()["messages"] == []

    def test_quick_questions(self, client, timer):
        listed = client.get("/api/quick-questions").json()["questions"]
        assert [q["question"] for q in listed] == list(QUICK_QUESTIONS)

        assert client.post("/api/sessions/s5/quick/1").status_code == 202
        timer.run_all()
        messages = client.get("/api/sessions/s5/messages").json()["messages"]
        assert messages[0]["content"] == QUICK_QUESTIONS[1]
        assert messages[1]["content"].startswith("**Dynamic Programming (DP)**")

        assert client.post("/api/sessions/s5/quick/99").status_code == 404

    def test_select_variant(self, client, store):
        response = client.put("/api/sessions/s6/variant", json={"variant": "C++"})
        assert response.status_code == 200
        assert response.json()["variant"] == "cpp"
        assert response.json()["variant_name"] == "C++"
        assert store.get(VARIANT_KEY) == "cpp"

        messages = client.get("/api/sessions/s6/messages").json()["messages"]
        assert "**C++**" in messages[-1]["content"]

        dashboard = client.get("/api/dashboard").json()
        assert dashboard["preferred_variant"] == "cpp"
        assert dashboard["language_stats"][0]["name"] == "C++"

    def test_unknown_variant_rejected(self, client):
        response = client.put("/api/sessions/s7/variant", json={"variant": "rust"})
        assert response.status_code == 422

    def test_list_variants(self, client):
        variants = client.get("/api/variants").json()["variants"]
        assert [v["value"] for v in variants] == ["python", "javascript", "java", "cpp"]

    def test_stats_lookup(self, client, stats_client):
        stats_client.fetch.return_value = StatsRecord.from_api(
            "alice", {"easySolved": 10, "totalEasy": 100, "ranking": 5000}
        )

        response = client.get("/api/stats/alice")

        assert response.status_code == 200
        assert response.json()["total_solved"] == 10
        assert response.json()["recent_searches"] == ["alice"]
        stats_client.fetch.assert_called_once_with("alice")

    def test_stats_lookup_failure(self, client, stats_client):
        stats_client.fetch.side_effect = StatsFetchError("HTTP error! status: 404", status=404)

        response = client.get("/api/stats/ghost")

        assert response.status_code == 502
        assert response.json()["detail"] == {"message": "HTTP error! status: 404", "status": 404}

    def test_compare_users(self, client, stats_client):
        stats_client.fetch.side_effect = [
            StatsRecord.from_api("alice", {"easySolved": 10, "hardSolved": 1}),
            StatsRecord.from_api("bob", {"easySolved": 4, "mediumSolved": 6}),
        ]
        client.get("/api/stats/alice")

        response = client.get("/api/compare/bob")

        assert response.status_code == 200
        assert response.json()["user1"]["total_solved"] == 11
        assert response.json()["user2"] == {
            "username": "bob", "total_solved": 10, "easy": 4, "medium": 6, "hard": 0
        }

    def test_compare_without_shown_user(self, client, stats_client):
        response = client.get("/api/compare/bob")

        assert response.status_code == 400
        stats_client.fetch.assert_not_called()

    def test_compare_lookup_failure(self, client, stats_client):
        stats_client.fetch.side_effect = [
            StatsRecord.from_api("alice", {}),
            StatsFetchError("HTTP error! status: 404", status=404),
        ]
        client.get("/api/stats/alice")

        response = client.get("/api/compare/ghost")

        assert response.status_code == 502
        assert response.json()["detail"]["status"] == 404


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
