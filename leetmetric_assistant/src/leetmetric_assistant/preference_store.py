"""
Preference Store

String key-value persistence for the selected variant and recent lookups.
Uses a Supabase table when a client is available, otherwise process memory.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """get/set contract shared by all stores."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...


class InMemoryStore(KeyValueStore):
    """Process-local store; contents are lost on restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SupabaseStore(KeyValueStore):
    """
    Supabase-backed store.

    Expects a table with text columns `key` (primary key) and `value`.
    Reads and writes that fail are logged and served from an in-memory copy
    so a database outage never breaks a chat session.

    Args:
        supabase_client: Supabase client instance
        table: Table name (default: preferences)
    """

    def __init__(self, supabase_client, table: str = "preferences"):
        self.supabase = supabase_client
        self.table = table
        self._fallback = InMemoryStore()

    def get(self, key: str) -> Optional[str]:
        try:
            result = self.supabase.table(self.table) \
                .select('value') \
                .eq('key', key) \
                .execute()

            if result.data and len(result.data) > 0:
                return result.data[0].get("value")
            return self._fallback.get(key)

        except Exception as e:
            logger.warning(f"⚠️ [SupabaseStore] Error reading {key!r}: {e}, using in-memory copy")
            return self._fallback.get(key)

    def set(self, key: str, value: str) -> None:
        self._fallback.set(key, value)
        try:
            self.supabase.table(self.table) \
                .upsert({"key": key, "value": value}, on_conflict="key") \
                .execute()
        except Exception as e:
            logger.warning(f"⚠️ [SupabaseStore] Error writing {key!r}: {e}, kept in memory only")


def create_store(supabase_client=None) -> KeyValueStore:
    """Supabase store when a client is given, in-memory otherwise."""
    if supabase_client is not None:
        logger.info("✅ [PreferenceStore] Using Supabase table 'preferences'")
        return SupabaseStore(supabase_client)
    logger.warning("⚠️ [PreferenceStore] Supabase not available, using in-memory store")
    return InMemoryStore()
