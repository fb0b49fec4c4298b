"""
Dashboard Collaborator

Display data that sits next to the chat: the last fetched stats record,
recent searches and per-language problem counts. Listens for
preferenceChanged to re-derive the language breakdown.
"""

import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from leetmetric_assistant.config import RECENT_SEARCHES_KEY
from leetmetric_assistant.preference_store import KeyValueStore
from leetmetric_assistant.stats_client import StatsRecord, contest_rank
from leetmetric_assistant.variants import DEFAULT_VARIANT, Variant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LanguageProfile:
    name: str
    color: str
    base: int
    spread: int


# Synthetic counts: base + randint(0, spread - 1)
LANGUAGES = (
    LanguageProfile("Python", "#3776ab", 20, 50),
    LanguageProfile("JavaScript", "#f7df1e", 15, 30),
    LanguageProfile("Java", "#ed8b00", 18, 40),
    LanguageProfile("C++", "#00599c", 12, 25),
    LanguageProfile("Go", "#00add8", 5, 15),
)


class DashboardRenderer:
    """
    Holds dashboard display state.

    Args:
        store: Key-value store for recent searches
        rng: Random source for the synthetic language counts
        recent_limit: Maximum number of recent searches kept
    """

    def __init__(
        self,
        store: KeyValueStore,
        rng: Optional[random.Random] = None,
        recent_limit: int = 5
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.recent_limit = recent_limit
        self.preferred_variant: Variant = DEFAULT_VARIANT
        self.current_record: Optional[StatsRecord] = None
        self.contest: Optional[Dict[str, Any]] = None
        self.comparison: Optional[Dict[str, Any]] = None
        self.language_stats: List[Dict[str, Any]] = []
        self.refresh_count = 0
        self.recent_searches: List[str] = self._load_recent_searches()

    def _load_recent_searches(self) -> List[str]:
        raw = self.store.get(RECENT_SEARCHES_KEY)
        if not raw:
            return []
        try:
            searches = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"⚠️ [Dashboard] Ignoring unreadable recent searches: {raw[:40]!r}")
            return []
        if not isinstance(searches, list):
            return []
        return [str(item) for item in searches][:self.recent_limit]

    def add_recent_search(self, username: str) -> List[str]:
        """Move a username to the front, de-duplicated and capped."""
        searches = [item for item in self.recent_searches if item != username]
        searches.insert(0, username)
        self.recent_searches = searches[:self.recent_limit]
        self.store.set(RECENT_SEARCHES_KEY, json.dumps(self.recent_searches))
        return self.recent_searches

    def show_record(self, record: StatsRecord):
        self.current_record = record
        self.add_recent_search(record.username)
        self.comparison = None
        self.contest = self.generate_contest()
        self.regenerate_language_stats()

    def generate_contest(self) -> Dict[str, Any]:
        # The stats API has no contest data; the rating is synthetic
        rating = 1500 + self.rng.randrange(500)
        return {"rating": rating, "rank": contest_rank(rating)}

    @staticmethod
    def comparison_stats(record: StatsRecord) -> Dict[str, Any]:
        return {
            "username": record.username,
            "total_solved": record.total_solved,
            "easy": record.easy_solved,
            "medium": record.medium_solved,
            "hard": record.hard_solved,
        }

    def compare(self, other: StatsRecord) -> Dict[str, Any]:
        """
        Side-by-side solved counts of the shown user and another user.

        Raises:
            ValueError: If no user is shown yet
        """
        if self.current_record is None:
            raise ValueError("Look up a user before comparing.")
        self.comparison = {
            "user1": self.comparison_stats(self.current_record),
            "user2": self.comparison_stats(other),
        }
        logger.info(f"⚖️ [Dashboard] Comparing {self.current_record.username} with {other.username}")
        return self.comparison

    def regenerate_language_stats(self) -> List[Dict[str, Any]]:
        """Fresh synthetic counts with the preferred language listed first."""
        stats = [
            {
                "name": language.name,
                "color": language.color,
                "count": language.base + self.rng.randrange(language.spread),
                "preferred": language.name == self.preferred_variant.display_name,
            }
            for language in LANGUAGES
        ]
        stats.sort(key=lambda item: not item["preferred"])
        self.language_stats = stats
        self.refresh_count += 1
        return stats

    def on_preference_changed(self, variant: Variant):
        logger.info(f"🔄 [Dashboard] Preference changed to {variant.display_name}, regenerating language stats")
        self.preferred_variant = variant
        self.regenerate_language_stats()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "preferred_variant": self.preferred_variant.value,
            "recent_searches": list(self.recent_searches),
            "language_stats": list(self.language_stats),
            "stats": self.current_record.to_dict() if self.current_record else None,
            "contest": self.contest,
            "comparison": self.comparison,
        }
