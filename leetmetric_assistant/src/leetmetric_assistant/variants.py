"""
Output Variants

Closed set of language-flavoured personas that decide which snippet a
topic response shows and which vocabulary the assistant uses.
"""

from enum import Enum
from typing import Optional, Tuple


class Variant(Enum):
    """Language personas the assistant can answer in."""
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    JAVA = "java"
    CPP = "cpp"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def fence_tag(self) -> str:
        """Language tag used on fenced code blocks."""
        return _FENCE_TAGS[self]

    @property
    def keywords(self) -> Tuple[str, ...]:
        return _KEYWORDS[self]

    @classmethod
    def parse(cls, value: str) -> "Variant":
        """
        Resolve a variant from its value, enum name or display name.

        Raises:
            ValueError: If the text names no known variant
        """
        text = (value or "").strip().lower()
        for variant in cls:
            if text in (variant.value, variant.name.lower(), variant.display_name.lower()):
                return variant
        raise ValueError(f"Unknown variant: {value!r}")


DEFAULT_VARIANT = Variant.PYTHON

_DISPLAY_NAMES = {
    Variant.PYTHON: "Python",
    Variant.JAVASCRIPT: "JavaScript",
    Variant.JAVA: "Java",
    Variant.CPP: "C++",
}

_FENCE_TAGS = {
    Variant.PYTHON: "python",
    Variant.JAVASCRIPT: "javascript",
    Variant.JAVA: "java",
    Variant.CPP: "cpp",
}

_KEYWORDS = {
    Variant.PYTHON: ("python",),
    Variant.JAVASCRIPT: ("javascript", "typescript", "node.js"),
    Variant.JAVA: ("java",),
    Variant.CPP: ("c++", "cpp"),
}

# "javascript" contains "java", so JavaScript has to be tested first
INFERENCE_ORDER: Tuple[Variant, ...] = (
    Variant.JAVASCRIPT,
    Variant.CPP,
    Variant.JAVA,
    Variant.PYTHON,
)


def infer_variant(normalized_text: str) -> Optional[Variant]:
    """Return the first variant whose keyword appears in already-lowercased text."""
    for variant in INFERENCE_ORDER:
        if any(keyword in normalized_text for keyword in variant.keywords):
            return variant
    return None
