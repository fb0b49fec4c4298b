"""
Response Scheduling

Simulated think-time between a user message and the assistant's reply.
Timers are abstracted so the service runs on the asyncio loop while tests
drive a virtual clock by hand.
"""

import asyncio
import heapq
import itertools
import logging
import random
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

from leetmetric_assistant.session_state import SessionState, Sender

logger = logging.getLogger(__name__)

Responder = Callable[[str, SessionState], str]
FallbackReply = Callable[[SessionState], str]

FALLBACK_REPLY = "Sorry, I couldn't put an answer together for that. Could you ask it another way?"


class DeferredTask:
    """Handle for a callback scheduled on a Timer."""

    def __init__(self, callback: Callable[[], None], due: float):
        self.callback = callback
        self.due = due
        self.cancelled = False
        self.done = False
        self._handle: Optional[asyncio.TimerHandle] = None

    def cancel(self) -> bool:
        if self.done or self.cancelled:
            return False
        self.cancelled = True
        if self._handle is not None:
            self._handle.cancel()
        return True

    def _run(self):
        if self.cancelled or self.done:
            return
        self.done = True
        self.callback()


class Timer(ABC):
    """Minimal deferred-call interface."""

    @abstractmethod
    def now(self) -> float:
        ...

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> DeferredTask:
        ...


class AsyncioTimer(Timer):
    """Timer backed by the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> DeferredTask:
        loop = self.loop
        task = DeferredTask(callback, loop.time() + delay)
        task._handle = loop.call_later(delay, task._run)
        return task


class VirtualTimer(Timer):
    """
    Manually advanced clock for deterministic tests.

    Tasks fire in due-time order; ties fire in scheduling order.
    """

    def __init__(self):
        self._now = 0.0
        self._queue: List[Tuple[float, int, DeferredTask]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> DeferredTask:
        task = DeferredTask(callback, self._now + max(delay, 0.0))
        heapq.heappush(self._queue, (task.due, next(self._seq), task))
        return task

    @property
    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing every task that comes due.

        Returns:
            Number of callbacks run
        """
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            self._now = due
            if not task.cancelled:
                task._run()
                fired += 1
        self._now = target
        return fired

    def run_all(self) -> int:
        """Fire everything that is scheduled, including tasks scheduled meanwhile."""
        fired = 0
        while self._queue:
            due, _, task = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if not task.cancelled:
                task._run()
                fired += 1
        return fired


class ResponseScheduler:
    """
    Accepts user messages and delivers replies after a random delay.

    Every firing answers the oldest outstanding message of its session, so
    replies arrive in submission order even when delays differ.

    Args:
        timer: Timer used for delays
        responder: Produces the reply text for (message, session)
        min_delay: Lower bound of the think-time, seconds
        max_delay: Upper bound of the think-time, seconds
        rng: Random source for the delay
        fallback: Reply used when the responder raises, so every user
            message still gets an answer
    """

    def __init__(
        self,
        timer: Timer,
        responder: Responder,
        min_delay: float = 1.0,
        max_delay: float = 3.0,
        rng: Optional[random.Random] = None,
        fallback: Optional[FallbackReply] = None
    ):
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError(f"Invalid delay range: {min_delay}..{max_delay}")
        self.timer = timer
        self.responder = responder
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.rng = rng or random.Random()
        self.fallback = fallback or (lambda session: FALLBACK_REPLY)
        self._outstanding: Dict[str, Deque[str]] = {}

    @staticmethod
    def can_submit(raw_text: Optional[str]) -> bool:
        """Send button state: disabled for empty or whitespace-only input."""
        return bool(raw_text and raw_text.strip())

    def next_delay(self) -> float:
        return self.rng.uniform(self.min_delay, self.max_delay)

    def submit(self, raw_text: str, session: SessionState) -> Optional[DeferredTask]:
        """
        Record a user message and schedule its reply.

        Returns:
            The scheduled task, or None when the input was blank
        """
        if not self.can_submit(raw_text):
            logger.debug(f"⏭️ [Scheduler] Ignoring blank input for session {session.session_id}")
            return None

        message = raw_text.strip()
        session.add_message(Sender.USER, message)
        self._outstanding.setdefault(session.session_id, deque()).append(message)
        session.pending_responses += 1

        delay = self.next_delay()
        logger.debug(f"⏳ [Scheduler] Reply for session {session.session_id} in {delay:.2f}s")
        return self.timer.call_later(delay, lambda: self._deliver(session))

    def outstanding(self, session: SessionState) -> int:
        return len(self._outstanding.get(session.session_id, ()))

    def _deliver(self, session: SessionState):
        queue = self._outstanding.get(session.session_id)
        if not queue:
            return
        message = queue.popleft()
        try:
            reply = self.responder(message, session)
        except Exception as e:
            logger.error(f"❌ [Scheduler] Responder failed for session {session.session_id}: {e}", exc_info=True)
            reply = self.fallback(session)
        finally:
            session.pending_responses = max(session.pending_responses - 1, 0)
        session.add_message(Sender.ASSISTANT, reply)
        logger.debug(f"📤 [Scheduler] Delivered reply for session {session.session_id}")
