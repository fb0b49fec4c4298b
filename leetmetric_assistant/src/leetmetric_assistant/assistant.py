"""
LeetMetric AI Assistant

Orchestrates the chat engine: keeps one SessionState per conversation and
wires the intent matcher, template renderer, response scheduler, preference
events and key-value store together.
"""

import logging
import random
from typing import Dict, Optional, Tuple, Union

from leetmetric_assistant.config import VARIANT_KEY, AssistantConfig
from leetmetric_assistant.events import PreferenceEvents
from leetmetric_assistant.intent_matcher import IntentMatcher
from leetmetric_assistant.knowledge_base import KnowledgeBase, build_knowledge_base
from leetmetric_assistant.preference_store import InMemoryStore, KeyValueStore
from leetmetric_assistant.renderer import TemplateRenderer
from leetmetric_assistant.scheduler import AsyncioTimer, DeferredTask, ResponseScheduler, Timer
from leetmetric_assistant.session_state import (
    WELCOME_MESSAGE,
    ChatSurface,
    Message,
    Sender,
    SessionState,
)
from leetmetric_assistant.variants import Variant

logger = logging.getLogger(__name__)

QUICK_QUESTIONS: Tuple[str, ...] = (
    "Explain binary search algorithm",
    "What is dynamic programming?",
    "How to prepare for coding interviews?",
    "Give me a study plan for beginners",
    "Explain time complexity and Big O",
    "What data structures should I know?",
)


class LeetMetricAssistant:
    """
    Rule-based algorithm assistant.

    Args:
        config: Behaviour settings (delays, inference policy, default variant)
        knowledge_base: Topic registry (built from the default registry if None)
        timer: Timer for reply delays (asyncio loop timer if None)
        store: Key-value store for the selected variant
        events: Channel for preferenceChanged notifications
        rng: Random source shared by the renderer and the scheduler
    """

    def __init__(
        self,
        config: Optional[AssistantConfig] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
        timer: Optional[Timer] = None,
        store: Optional[KeyValueStore] = None,
        events: Optional[PreferenceEvents] = None,
        rng: Optional[random.Random] = None
    ):
        self.config = config or AssistantConfig()
        self.knowledge_base = knowledge_base or build_knowledge_base()
        self.timer = timer or AsyncioTimer()
        self.store = store or InMemoryStore()
        self.events = events or PreferenceEvents()
        self.rng = rng or random.Random()

        self.matcher = IntentMatcher(self.knowledge_base, infer_variant=self.config.infer_variant)
        self.renderer = TemplateRenderer(rng=self.rng)
        self.scheduler = ResponseScheduler(
            self.timer,
            self.respond,
            min_delay=self.config.min_delay,
            max_delay=self.config.max_delay,
            rng=self.rng,
            fallback=lambda session: self.renderer.render(None, session),
        )

        self.sessions: Dict[str, SessionState] = {}

    # ==================== Sessions ====================

    def _stored_variant(self) -> Variant:
        stored = self.store.get(VARIANT_KEY)
        if stored:
            try:
                return Variant.parse(stored)
            except ValueError:
                logger.warning(f"⚠️ [Assistant] Ignoring unknown stored variant {stored!r}")
        return self.config.default_variant

    def get_or_create_session(self, session_id: str) -> SessionState:
        """Existing session, or a new one seeded with the stored variant."""
        session = self.sessions.get(session_id)
        if session is None:
            session = SessionState(
                session_id=session_id,
                events=self.events,
                current_variant=self._stored_variant(),
            )
            self.sessions[session_id] = session
            logger.info(f"💾 [Session] Created session {session_id} (variant={session.current_variant.value})")
        return session

    def get_session(self, session_id: str) -> Optional[SessionState]:
        return self.sessions.get(session_id)

    def _resolve(self, session: Union[str, SessionState]) -> SessionState:
        if isinstance(session, SessionState):
            return session
        return self.get_or_create_session(session)

    # ==================== Chat surface ====================

    def open_chat(self, session: Union[str, SessionState]) -> ChatSurface:
        state = self._resolve(session)
        if state.open():
            self.timer.call_later(self.config.welcome_delay, lambda: self._deliver_welcome(state))
        return state.surface

    def close_chat(self, session: Union[str, SessionState]) -> ChatSurface:
        return self._resolve(session).close()

    def minimize_chat(self, session: Union[str, SessionState]) -> ChatSurface:
        return self._resolve(session).minimize()

    def toggle_chat(self, session: Union[str, SessionState]) -> ChatSurface:
        state = self._resolve(session)
        if state.surface is ChatSurface.CLOSED:
            return self.open_chat(state)
        return state.close()

    def _deliver_welcome(self, session: SessionState):
        if session.history:
            return
        session.add_message(Sender.ASSISTANT, WELCOME_MESSAGE)

    # ==================== Messages ====================

    def respond(self, raw_text: str, session: SessionState) -> str:
        """Classify and render one reply. Runs when the delayed delivery fires."""
        match = self.matcher.classify(raw_text, session)
        if match is None:
            logger.info(f"💬 [Assistant] No topic for '{raw_text[:40]}', sending encouragement")
            return self.renderer.render(None, session)
        logger.info(f"🎯 [Assistant] Topic {match.rule.name} (variant={session.current_variant.value})")
        return self.renderer.render(match.entry, session, rule=match.rule)

    def submit(self, session: Union[str, SessionState], raw_text: str) -> Optional[DeferredTask]:
        """
        Send a user message.

        Returns:
            The scheduled reply, or None if the text was blank
        """
        return self.scheduler.submit(raw_text, self._resolve(session))

    def ask_quick_question(self, session: Union[str, SessionState], index: int) -> Optional[DeferredTask]:
        """
        Raises:
            IndexError: If there is no quick question at that index
        """
        if not 0 <= index < len(QUICK_QUESTIONS):
            raise IndexError(f"No quick question #{index}")
        return self.submit(session, QUICK_QUESTIONS[index])

    # ==================== Preferences ====================

    def set_variant(self, session: Union[str, SessionState], variant: Union[Variant, str]) -> Message:
        """
        Explicit variant selection from the UI.

        Raises:
            ValueError: If a string names no known variant
        """
        if isinstance(variant, str):
            variant = Variant.parse(variant)
        state = self._resolve(session)
        ack = state.set_variant(variant)
        self.store.set(VARIANT_KEY, variant.value)
        logger.info(f"🔄 [Assistant] Session {state.session_id} switched to {variant.display_name}")
        return ack
