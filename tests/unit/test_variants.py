"""
Unit Tests for Output Variants
"""

import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "leetmetric_assistant", "src"))

from leetmetric_assistant.variants import DEFAULT_VARIANT, INFERENCE_ORDER, Variant, infer_variant


class TestVariant:
    """Test suite for Variant and infer_variant()."""

    def test_default_is_python(self):
        assert DEFAULT_VARIANT == Variant.PYTHON

    @pytest.mark.parametrize("text, expected", [
        ("python", Variant.PYTHON),
        ("JavaScript", Variant.JAVASCRIPT),
        ("  java ", Variant.JAVA),
        ("C++", Variant.CPP),
        ("cpp", Variant.CPP),
        ("CPP", Variant.CPP),
    ])
    def test_parse(self, text, expected):
        assert Variant.parse(text) == expected

    @pytest.mark.parametrize("text", ["rust", "", None])
    def test_parse_unknown(self, text):
        with pytest.raises(ValueError):
            Variant.parse(text)

    def test_display_names(self):
        assert [v.display_name for v in Variant] == ["Python", "JavaScript", "Java", "C++"]

    def test_javascript_checked_before_java(self):
        assert INFERENCE_ORDER.index(Variant.JAVASCRIPT) < INFERENCE_ORDER.index(Variant.JAVA)
        assert infer_variant("javascript closures") == Variant.JAVASCRIPT

    def test_infer_from_keywords(self):
        assert infer_variant("java streams") == Variant.JAVA
        assert infer_variant("modern c++ templates") == Variant.CPP
        assert infer_variant("python generators") == Variant.PYTHON
        assert infer_variant("graphs and trees") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
