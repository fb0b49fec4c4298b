"""
Response Templating

Turns a matched knowledge entry plus the session's current variant into
micro-format text. Unmatched input gets a random encouragement instead.
"""

import random
from typing import TYPE_CHECKING, List, Optional, Sequence

from leetmetric_assistant.formatter import fence
from leetmetric_assistant.knowledge_base import KnowledgeEntry
from leetmetric_assistant.variants import Variant

if TYPE_CHECKING:
    from leetmetric_assistant.intent_matcher import IntentRule
    from leetmetric_assistant.session_state import SessionState


ENCOURAGEMENTS = (
    "Great question! Let me help you with that. Could you be more specific about what aspect you'd like to focus on?",
    "I'd love to help! Can you provide more details about the specific problem or concept you're working on?",
    "That's a good topic to explore! What specific part would you like me to explain or help you with?",
    "Excellent! I can definitely assist with that. Could you share more context about your current "
    "understanding or where you're stuck?",
    "I'm here to help you master that concept! What would be most helpful - an explanation, examples, "
    "or practice problems? I'll show any code in {variant}.",
)


def compose_entry(entry: KnowledgeEntry, variant: Variant) -> str:
    """Standard template for a knowledge entry in the given variant."""
    parts: List[str] = [f"**{entry.title}**"]
    if entry.explanation:
        parts.append(entry.explanation)

    if entry.metadata:
        facts = []
        for label, value in entry.metadata:
            if "\n" in value:
                facts.append(f"**{label}:**\n{value}")
            else:
                facts.append(f"**{label}:** {value}")
        parts.append("\n".join(facts))

    used_variant, snippet = entry.snippet_for(variant)
    if entry.is_code:
        parts.append(
            f"**{used_variant.display_name} {entry.snippet_label}:**\n"
            f"{fence(snippet, used_variant.fence_tag)}"
        )
    else:
        parts.append(snippet)

    if entry.tip:
        parts.append(f"**💡 Pro Tip:** {entry.tip}")
    if entry.closing:
        parts.append(entry.closing)

    return "\n\n".join(parts)


class TemplateRenderer:
    """
    Renders replies for a session.

    Args:
        rng: Random source for the encouragement pool
        encouragements: Fallback pool; "{variant}" is replaced by the
            current variant's display name
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        encouragements: Sequence[str] = ENCOURAGEMENTS
    ):
        if not encouragements:
            raise ValueError("Encouragement pool must not be empty")
        self.rng = rng or random.Random()
        self.encouragements = tuple(encouragements)

    def render(
        self,
        entry: Optional[KnowledgeEntry],
        session: "SessionState",
        rule: Optional["IntentRule"] = None
    ) -> str:
        variant = session.current_variant
        if entry is None:
            return self.encouragement(variant)
        if rule is not None and rule.handler is not None:
            return rule.handler(entry, variant)
        return compose_entry(entry, variant)

    def encouragement(self, variant: Variant) -> str:
        template = self.rng.choice(self.encouragements)
        return template.replace("{variant}", variant.display_name)
