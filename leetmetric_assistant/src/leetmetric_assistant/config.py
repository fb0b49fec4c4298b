"""
Assistant Configuration

Environment-driven settings (a .env file is honoured through python-dotenv).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from leetmetric_assistant.variants import DEFAULT_VARIANT, Variant

load_dotenv()

STATS_API_URL = "https://leetcode-stats-api.herokuapp.com"

# Key-value store keys
VARIANT_KEY = "leetmetric-ai-variant"
RECENT_SEARCHES_KEY = "leetmetric-recent-searches"


_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class AssistantConfig:
    """Tunable behaviour of the assistant and its collaborators."""
    min_delay: float = 1.0
    max_delay: float = 3.0
    welcome_delay: float = 0.5
    infer_variant: bool = True
    default_variant: Variant = DEFAULT_VARIANT
    stats_api_url: str = STATS_API_URL
    stats_timeout: float = 10.0
    recent_limit: int = 5
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    def __post_init__(self):
        if self.min_delay < 0 or self.max_delay < self.min_delay:
            raise ValueError(f"Invalid response delay range: {self.min_delay}..{self.max_delay}")
        if self.welcome_delay < 0:
            raise ValueError("welcome_delay must not be negative")
        if self.recent_limit < 1:
            raise ValueError("recent_limit must be at least 1")

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls) -> "AssistantConfig":
        """Build config from LEETMETRIC_* and SUPABASE_* environment variables."""
        return cls(
            min_delay=float(os.getenv("LEETMETRIC_MIN_DELAY", "1.0")),
            max_delay=float(os.getenv("LEETMETRIC_MAX_DELAY", "3.0")),
            welcome_delay=float(os.getenv("LEETMETRIC_WELCOME_DELAY", "0.5")),
            infer_variant=_env_bool("LEETMETRIC_INFER_VARIANT", True),
            default_variant=Variant.parse(os.getenv("LEETMETRIC_DEFAULT_VARIANT", DEFAULT_VARIANT.value)),
            stats_api_url=os.getenv("LEETMETRIC_STATS_API_URL", STATS_API_URL).rstrip("/"),
            stats_timeout=float(os.getenv("LEETMETRIC_STATS_TIMEOUT", "10")),
            recent_limit=int(os.getenv("LEETMETRIC_RECENT_LIMIT", "5")),
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_key=os.getenv("SUPABASE_SERVICE_KEY") or None,
        )
