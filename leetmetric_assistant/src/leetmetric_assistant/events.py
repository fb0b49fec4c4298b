"""
Preference Events

Publish/subscribe channel for variant changes. The dashboard subscribes
here instead of being called directly by the chat session.
"""

import logging
from typing import Callable, List

from leetmetric_assistant.variants import Variant

logger = logging.getLogger(__name__)

PreferenceListener = Callable[[Variant], None]


class PreferenceEvents:
    """Synchronous in-process event channel for preferenceChanged."""

    def __init__(self):
        self._listeners: List[PreferenceListener] = []

    def subscribe(self, listener: PreferenceListener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, variant: Variant) -> int:
        """
        Notify every listener of a new preference.

        A listener that raises is logged and skipped; the rest still run.

        Returns:
            Number of listeners notified successfully
        """
        delivered = 0
        for listener in list(self._listeners):
            try:
                listener(variant)
                delivered += 1
            except Exception as e:
                logger.warning(f"⚠️ [PreferenceEvents] Listener failed for {variant.value}: {e}", exc_info=True)
        logger.debug(f"📣 [PreferenceEvents] preferenceChanged({variant.value}) -> {delivered} listener(s)")
        return delivered

    def __len__(self) -> int:
        return len(self._listeners)
