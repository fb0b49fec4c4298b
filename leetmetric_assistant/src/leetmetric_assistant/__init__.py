"""LeetMetric AI assistant: rule-based algorithm Q&A with language variants."""

from leetmetric_assistant.assistant import QUICK_QUESTIONS, LeetMetricAssistant
from leetmetric_assistant.config import AssistantConfig
from leetmetric_assistant.events import PreferenceEvents
from leetmetric_assistant.intent_matcher import DEFAULT_RULES, IntentMatch, IntentMatcher, IntentRule
from leetmetric_assistant.knowledge_base import (
    KnowledgeBase,
    KnowledgeBaseError,
    KnowledgeEntry,
    Topic,
    build_knowledge_base,
)
from leetmetric_assistant.renderer import TemplateRenderer
from leetmetric_assistant.scheduler import AsyncioTimer, DeferredTask, ResponseScheduler, VirtualTimer
from leetmetric_assistant.session_state import ChatSurface, Message, Sender, SessionState
from leetmetric_assistant.variants import DEFAULT_VARIANT, Variant

__all__ = [
    "AssistantConfig",
    "AsyncioTimer",
    "ChatSurface",
    "DEFAULT_RULES",
    "DEFAULT_VARIANT",
    "DeferredTask",
    "IntentMatch",
    "IntentMatcher",
    "IntentRule",
    "KnowledgeBase",
    "KnowledgeBaseError",
    "KnowledgeEntry",
    "LeetMetricAssistant",
    "Message",
    "PreferenceEvents",
    "QUICK_QUESTIONS",
    "ResponseScheduler",
    "Sender",
    "SessionState",
    "TemplateRenderer",
    "Topic",
    "Variant",
    "VirtualTimer",
    "build_knowledge_base",
]
