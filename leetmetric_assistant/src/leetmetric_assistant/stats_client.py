"""
LeetCode Statistics Client

Fetches a user's solved-problem counts from the public stats API.
Used by the dashboard only; the chat engine never calls it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from leetmetric_assistant.config import STATS_API_URL

logger = logging.getLogger(__name__)

DIFFICULTIES = ("easy", "medium", "hard")

CONTEST_RANKS = (
    (1200, "Newbie"),
    (1400, "Pupil"),
    (1600, "Specialist"),
    (1900, "Expert"),
    (2100, "Candidate Master"),
    (2300, "Master"),
    (2400, "International Master"),
)


class StatsFetchError(Exception):
    """Stats API failure: carries the HTTP status when there was one."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


@dataclass
class StatsRecord:
    """Solved/total counts per difficulty plus ranking and streak."""
    username: str
    easy_solved: int = 0
    medium_solved: int = 0
    hard_solved: int = 0
    total_easy: int = 0
    total_medium: int = 0
    total_hard: int = 0
    ranking: Optional[int] = None
    streak: int = 0

    @classmethod
    def from_api(cls, username: str, payload: Dict[str, Any]) -> "StatsRecord":
        """Build from the API's camelCase JSON; missing counts read as 0."""
        return cls(
            username=username,
            easy_solved=int(payload.get("easySolved") or 0),
            medium_solved=int(payload.get("mediumSolved") or 0),
            hard_solved=int(payload.get("hardSolved") or 0),
            total_easy=int(payload.get("totalEasy") or 0),
            total_medium=int(payload.get("totalMedium") or 0),
            total_hard=int(payload.get("totalHard") or 0),
            ranking=payload.get("ranking") or None,
            streak=int(payload.get("streak") or 0),
        )

    @property
    def total_solved(self) -> int:
        return self.easy_solved + self.medium_solved + self.hard_solved

    @property
    def total_questions(self) -> int:
        return self.total_easy + self.total_medium + self.total_hard

    @property
    def success_rate(self) -> float:
        """Percentage of all questions solved, one decimal."""
        if self.total_questions <= 0:
            return 0.0
        return round(self.total_solved / self.total_questions * 100, 1)

    def difficulty_progress(self) -> Dict[str, Dict[str, float]]:
        progress = {}
        for level in DIFFICULTIES:
            solved = getattr(self, f"{level}_solved")
            total = getattr(self, f"total_{level}")
            progress[level] = {
                "solved": solved,
                "total": total,
                "percentage": round(solved / total * 100, 1) if total > 0 else 0.0,
            }
        return progress

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "total_solved": self.total_solved,
            "total_questions": self.total_questions,
            "success_rate": self.success_rate,
            "ranking": self.ranking,
            "streak": self.streak,
            "difficulties": self.difficulty_progress(),
        }


def contest_rank(rating: int) -> str:
    for upper_bound, title in CONTEST_RANKS:
        if rating < upper_bound:
            return title
    return "Grandmaster"


class StatsClient:
    """
    HTTP client for the stats API.

    Args:
        base_url: API root; the username is appended as a path segment
        timeout: Request timeout in seconds
        session: Optional requests.Session to reuse connections
    """

    def __init__(
        self,
        base_url: str = STATS_API_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests

    def fetch(self, username: str) -> StatsRecord:
        """
        Fetch statistics for one user.

        Raises:
            StatsFetchError: Blank username, network failure, non-2xx status,
                or an error reported in the JSON body
        """
        username = (username or "").strip()
        if not username:
            raise StatsFetchError("Please enter a username.")

        url = f"{self.base_url}/{username}"
        try:
            response = self.http.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ [StatsClient] Request to {url} failed: {e}")
            raise StatsFetchError(f"Request failed: {e}") from e

        if not response.ok:
            raise StatsFetchError(f"HTTP error! status: {response.status_code}", status=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise StatsFetchError("Stats API returned invalid JSON", status=response.status_code) from e

        if payload.get("error"):
            raise StatsFetchError(str(payload["error"]))
        if payload.get("status") == "error":
            raise StatsFetchError(str(payload.get("message") or "Stats API reported an error"))

        logger.info(f"📊 [StatsClient] Fetched stats for {username}")
        return StatsRecord.from_api(username, payload)
