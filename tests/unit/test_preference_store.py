"""
Unit Tests for the Preference Store
"""

from unittest.mock import MagicMock

import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "leetmetric_assistant", "src"))

from leetmetric_assistant.preference_store import (
    InMemoryStore,
    SupabaseStore,
    create_store,
)


class TestInMemoryStore:
    """Test suite for InMemoryStore."""

    def test_get_and_set(self):
        store = InMemoryStore({"a": "1"})
        assert store.get("a") == "1"
        assert store.get("missing") is None

        store.set("a", "2")
        assert store.get("a") == "2"


class TestSupabaseStore:
    """Test suite for SupabaseStore with a mocked client."""

    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def store(self, client):
        return SupabaseStore(client)

    def test_get_reads_value_column(self, store, client):
        query = client.table.return_value.select.return_value.eq.return_value
        query.execute.return_value = MagicMock(data=[{"value": "java"}])

        assert store.get("leetmetric-ai-variant") == "java"
        client.table.assert_called_with("preferences")
        client.table.return_value.select.assert_called_with("value")
        client.table.return_value.select.return_value.eq.assert_called_with("key", "leetmetric-ai-variant")

    def test_get_missing_row(self, store, client):
        query = client.table.return_value.select.return_value.eq.return_value
        query.execute.return_value = MagicMock(data=[])

        assert store.get("nothing") is None

    def test_set_upserts(self, store, client):
        store.set("leetmetric-ai-variant", "cpp")

        client.table.return_value.upsert.assert_called_once_with(
            {"key": "leetmetric-ai-variant", "value": "cpp"}, on_conflict="key"
        )

    def test_falls_back_to_memory_on_errors(self, store, client):
        client.table.side_effect = Exception("connection refused")

        store.set("k", "v")
        assert store.get("k") == "v"


class TestCreateStore:
    """Test suite for create_store()."""

    def test_without_client(self):
        assert isinstance(create_store(None), InMemoryStore)

    def test_with_client(self):
        assert isinstance(create_store(MagicMock()), SupabaseStore)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
