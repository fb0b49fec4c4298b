"""
Session State Data Model

Per-conversation state: current variant, append-only message history and
the chat surface (closed / open / minimized).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from leetmetric_assistant.events import PreferenceEvents
from leetmetric_assistant.formatter import to_html
from leetmetric_assistant.variants import DEFAULT_VARIANT, Variant

WELCOME_MESSAGE = (
    "Hello! 👋 I'm your LeetCode AI assistant. I can help you with algorithms, data structures, "
    "problem-solving strategies, and interview preparation. What would you like to know?"
)


class Sender(Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatSurface(Enum):
    """Visibility of the chat widget."""
    CLOSED = "closed"
    OPEN = "open"
    MINIMIZED = "minimized"


@dataclass(frozen=True)
class Message:
    """One chat message; content is micro-format text."""
    sender: Sender
    content: str
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def html(self) -> str:
        return to_html(self.content)

    @property
    def time_label(self) -> str:
        return self.created_at.strftime("%I:%M %p")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sender": self.sender.value,
            "content": self.content,
            "html": self.html,
            "time": self.time_label,
            "created_at": self.created_at.isoformat(),
        }


def acknowledgement_for(variant: Variant) -> str:
    return f"Got it! I'll show code examples in **{variant.display_name}** from now on."


@dataclass
class SessionState:
    """Mutable state of one assistant conversation."""
    session_id: str
    events: PreferenceEvents = field(default_factory=PreferenceEvents, repr=False)
    current_variant: Variant = DEFAULT_VARIANT
    surface: ChatSurface = ChatSurface.CLOSED
    pending_responses: int = 0
    welcome_scheduled: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    last_updated: datetime = field(default_factory=datetime.now)
    _history: List[Message] = field(default_factory=list, init=False, repr=False)

    # ==================== History ====================

    @property
    def history(self) -> Tuple[Message, ...]:
        return tuple(self._history)

    def add_message(self, sender: Sender, content: str) -> Message:
        """Append a message; history is never reordered or edited."""
        message = Message(sender=sender, content=content)
        self._history.append(message)
        self.last_updated = message.created_at
        return message

    @property
    def composing(self) -> bool:
        """True while at least one response is scheduled but not delivered."""
        return self.pending_responses > 0

    # ==================== Preferences ====================

    def set_variant(self, variant: Variant) -> Message:
        """
        Explicit variant selection.

        Always acknowledges in history and emits preferenceChanged, even when
        the variant is unchanged.
        """
        self.current_variant = variant
        ack = self.add_message(Sender.ASSISTANT, acknowledgement_for(variant))
        self.events.emit(variant)
        return ack

    def apply_inferred_variant(self, variant: Variant) -> bool:
        """
        Variant inferred from free text. Emits preferenceChanged only on an
        actual change and adds nothing to history.

        Returns:
            True if the variant changed
        """
        if variant is self.current_variant:
            return False
        self.current_variant = variant
        self.last_updated = datetime.now()
        self.events.emit(variant)
        return True

    # ==================== Chat surface ====================

    def open(self) -> bool:
        """
        Show the chat.

        Returns:
            True when the caller should schedule the one-time welcome message
        """
        self.surface = ChatSurface.OPEN
        if not self._history and not self.welcome_scheduled:
            self.welcome_scheduled = True
            return True
        return False

    def close(self) -> ChatSurface:
        self.surface = ChatSurface.CLOSED
        return self.surface

    def minimize(self) -> ChatSurface:
        """Toggle between open and minimized; ignored while closed."""
        if self.surface is ChatSurface.OPEN:
            self.surface = ChatSurface.MINIMIZED
        elif self.surface is ChatSurface.MINIMIZED:
            self.surface = ChatSurface.OPEN
        return self.surface

    def toggle(self) -> Optional[bool]:
        """
        Chat launcher button: opens when closed, closes otherwise.

        Returns:
            open()'s welcome flag when opening, None when closing
        """
        if self.surface is ChatSurface.CLOSED:
            return self.open()
        self.close()
        return None
