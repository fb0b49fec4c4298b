"""
Intent Matching

Ordered keyword rules, evaluated first-match-wins against the normalized
message. Variant inference runs before the topic rules and may switch the
session's current variant as a side effect.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Sequence, Tuple

from leetmetric_assistant.knowledge_base import KnowledgeBase, KnowledgeEntry, Topic
from leetmetric_assistant.variants import Variant, infer_variant

if TYPE_CHECKING:
    from leetmetric_assistant.session_state import SessionState

logger = logging.getLogger(__name__)

EntryHandler = Callable[[KnowledgeEntry, Variant], str]


@dataclass(frozen=True)
class IntentRule:
    """A topic rule: fires when any trigger phrase is a substring of the input."""
    name: str
    triggers: Tuple[str, ...]
    topic: Topic
    handler: Optional[EntryHandler] = None  # None -> standard entry template

    def matches(self, normalized_text: str) -> bool:
        return any(trigger in normalized_text for trigger in self.triggers)


@dataclass(frozen=True)
class IntentMatch:
    """Winning rule together with its knowledge entry."""
    rule: IntentRule
    entry: KnowledgeEntry


# Priority order matters: earlier rules win ties
DEFAULT_RULES: Tuple[IntentRule, ...] = (
    IntentRule("binary_search", ("binary search",), Topic.BINARY_SEARCH),
    IntentRule("dynamic_programming", ("dynamic programming", "dp"), Topic.DYNAMIC_PROGRAMMING),
    IntentRule("two_pointers", ("two pointer",), Topic.TWO_POINTERS),
    IntentRule("study_plan", ("study plan", "how to start"), Topic.STUDY_PLAN),
    IntentRule("interview", ("interview", "preparation"), Topic.INTERVIEW),
    IntentRule("time_complexity", ("time complexity", "big o"), Topic.TIME_COMPLEXITY),
    IntentRule("data_structures", ("data structure",), Topic.DATA_STRUCTURES),
    IntentRule("problem_solving", ("how to solve", "approach"), Topic.PROBLEM_SOLVING),
    IntentRule("help", ("help", "what can you do"), Topic.HELP),
)


def normalize(text: str) -> str:
    return (text or "").strip().lower()


class IntentMatcher:
    """
    Classifies free text against the knowledge base.

    Args:
        knowledge_base: Registry the rules resolve their topics against
        rules: Ordered rule list (defaults to DEFAULT_RULES)
        infer_variant: Whether a language mention switches the session variant
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        rules: Optional[Sequence[IntentRule]] = None,
        infer_variant: bool = True
    ):
        self.knowledge_base = knowledge_base
        self.rules: Tuple[IntentRule, ...] = tuple(DEFAULT_RULES if rules is None else rules)
        self.infer_variant = infer_variant

        for rule in self.rules:
            if knowledge_base.lookup(rule.topic) is None:
                raise ValueError(f"Rule {rule.name!r} points at unknown topic {rule.topic.value!r}")

    def detect_variant(self, raw_text: str) -> Optional[Variant]:
        """Variant named in the text, if any. Does not touch any session."""
        return infer_variant(normalize(raw_text))

    def match(self, raw_text: str) -> Optional[IntentMatch]:
        """Topic rule lookup only, without variant inference."""
        text = normalize(raw_text)
        if not text:
            return None

        for rule in self.rules:
            if rule.matches(text):
                return IntentMatch(rule=rule, entry=self.knowledge_base.lookup(rule.topic))
        return None

    def classify(self, raw_text: str, session: "SessionState") -> Optional[IntentMatch]:
        """
        Classify a message for a session.

        Variant inference is applied to the session before topic matching,
        whether or not a topic rule matches afterwards.

        Returns:
            IntentMatch for the first matching rule, or None
        """
        if self.infer_variant:
            variant = self.detect_variant(raw_text)
            if variant is not None:
                session.apply_inferred_variant(variant)

        match = self.match(raw_text)
        if match:
            logger.debug(f"🎯 [IntentMatcher] '{raw_text[:40]}' -> {match.rule.name}")
        else:
            logger.debug(f"🔍 [IntentMatcher] No rule matched '{raw_text[:40]}'")
        return match
