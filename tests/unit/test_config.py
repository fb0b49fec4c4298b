"""
Unit Tests for Assistant Configuration
"""

import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "leetmetric_assistant", "src"))

from leetmetric_assistant.config import STATS_API_URL, AssistantConfig
from leetmetric_assistant.variants import Variant

ENV_VARS = (
    "LEETMETRIC_MIN_DELAY",
    "LEETMETRIC_MAX_DELAY",
    "LEETMETRIC_WELCOME_DELAY",
    "LEETMETRIC_INFER_VARIANT",
    "LEETMETRIC_DEFAULT_VARIANT",
    "LEETMETRIC_STATS_API_URL",
    "LEETMETRIC_STATS_TIMEOUT",
    "LEETMETRIC_RECENT_LIMIT",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
)


class TestAssistantConfig:
    """Test suite for AssistantConfig."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)

    def test_defaults_from_empty_env(self):
        config = AssistantConfig.from_env()

        assert config.min_delay == 1.0
        assert config.max_delay == 3.0
        assert config.welcome_delay == 0.5
        assert config.infer_variant is True
        assert config.default_variant == Variant.PYTHON
        assert config.stats_api_url == STATS_API_URL
        assert config.recent_limit == 5
        assert not config.supabase_configured

    def test_values_from_env(self, monkeypatch):
        monkeypatch.setenv("LEETMETRIC_MIN_DELAY", "0")
        monkeypatch.setenv("LEETMETRIC_MAX_DELAY", "0.5")
        monkeypatch.setenv("LEETMETRIC_INFER_VARIANT", "False")
        monkeypatch.setenv("LEETMETRIC_DEFAULT_VARIANT", "C++")
        monkeypatch.setenv("LEETMETRIC_STATS_API_URL", "http://localhost:9000/")
        monkeypatch.setenv("LEETMETRIC_RECENT_LIMIT", "3")
        monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-key")

        config = AssistantConfig.from_env()

        assert config.min_delay == 0.0
        assert config.max_delay == 0.5
        assert config.infer_variant is False
        assert config.default_variant == Variant.CPP
        assert config.stats_api_url == "http://localhost:9000"
        assert config.recent_limit == 3
        assert config.supabase_configured

    def test_unknown_default_variant_rejected(self, monkeypatch):
        monkeypatch.setenv("LEETMETRIC_DEFAULT_VARIANT", "cobol")
        with pytest.raises(ValueError):
            AssistantConfig.from_env()

    @pytest.mark.parametrize("value, expected", [
        ("1", True),
        ("yes", True),
        ("On", True),
        ("TRUE", True),
        ("0", False),
        ("no", False),
        ("off", False),
        ("", True),
    ])
    def test_infer_variant_flag_spellings(self, monkeypatch, value, expected):
        monkeypatch.setenv("LEETMETRIC_INFER_VARIANT", value)
        assert AssistantConfig.from_env().infer_variant is expected

    @pytest.mark.parametrize("kwargs", [
        {"min_delay": -1.0},
        {"min_delay": 2.0, "max_delay": 1.0},
        {"welcome_delay": -0.1},
        {"recent_limit": 0},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            AssistantConfig(**kwargs)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
