"""
Unit Tests for Response Scheduling

Uses VirtualTimer so delays are deterministic.
"""

import random

import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "leetmetric_assistant", "src"))

from leetmetric_assistant.scheduler import FALLBACK_REPLY, ResponseScheduler, VirtualTimer
from leetmetric_assistant.session_state import Sender, SessionState


def echo(message, session):
    return f"reply to {message}"


class TestVirtualTimer:
    """Test suite for VirtualTimer."""

    def test_fires_in_due_order(self):
        timer = VirtualTimer()
        fired = []
        timer.call_later(2.0, lambda: fired.append("b"))
        timer.call_later(1.0, lambda: fired.append("a"))
        timer.call_later(2.0, lambda: fired.append("c"))

        assert timer.advance(1.5) == 1
        assert fired == ["a"]
        assert timer.now() == 1.5

        assert timer.advance(1.0) == 2
        assert fired == ["a", "b", "c"]

    def test_cancelled_task_does_not_fire(self):
        timer = VirtualTimer()
        fired = []
        task = timer.call_later(1.0, lambda: fired.append("x"))

        assert task.cancel() is True
        assert task.cancel() is False
        assert timer.pending == 0
        assert timer.run_all() == 0
        assert fired == []

    def test_run_all_includes_nested_tasks(self):
        timer = VirtualTimer()
        fired = []
        timer.call_later(1.0, lambda: timer.call_later(1.0, lambda: fired.append("inner")))

        assert timer.run_all() == 2
        assert fired == ["inner"]
        assert timer.now() == 2.0


class TestResponseScheduler:
    """Test suite for ResponseScheduler."""

    @pytest.fixture
    def timer(self):
        return VirtualTimer()

    @pytest.fixture
    def scheduler(self, timer):
        return ResponseScheduler(timer, echo, rng=random.Random(11))

    @pytest.fixture
    def session(self):
        return SessionState(session_id="sched_session")

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_blank_input_rejected(self, scheduler, session, timer, text):
        assert not ResponseScheduler.can_submit(text)
        assert scheduler.submit(text, session) is None
        assert session.history == ()
        assert timer.pending == 0

    def test_user_message_recorded_immediately(self, scheduler, session):
        scheduler.submit("  binary search  ", session)

        assert len(session.history) == 1
        assert session.history[0].sender == Sender.USER
        assert session.history[0].content == "binary search"
        assert session.composing

    def test_reply_within_delay_window(self, scheduler, session, timer):
        task = scheduler.submit("hello", session)

        assert 1.0 <= task.due <= 3.0
        timer.advance(0.99)
        assert len(session.history) == 1

        timer.advance(2.01)
        assert len(session.history) == 2
        assert session.history[1].sender == Sender.ASSISTANT
        assert session.history[1].content == "reply to hello"
        assert not session.composing

    def test_replies_keep_submission_order(self, timer, session):
        delays = iter([3.0, 1.0, 2.0])

        class FixedDelays(random.Random):
            def uniform(self, a, b):
                return next(delays)

        scheduler = ResponseScheduler(timer, echo, rng=FixedDelays())
        for text in ("first", "second", "third"):
            scheduler.submit(text, session)

        timer.run_all()

        contents = [m.content for m in session.history if m.sender == Sender.ASSISTANT]
        assert contents == ["reply to first", "reply to second", "reply to third"]
        assert scheduler.outstanding(session) == 0

    def test_sessions_are_independent(self, scheduler, timer):
        one = SessionState(session_id="one")
        two = SessionState(session_id="two")
        scheduler.submit("a", one)
        scheduler.submit("b", two)

        timer.run_all()

        assert one.history[-1].content == "reply to a"
        assert two.history[-1].content == "reply to b"

    def test_failed_responder_still_answers(self, timer, session):
        def broken(message, state):
            raise RuntimeError("boom")

        scheduler = ResponseScheduler(timer, broken)
        scheduler.submit("hi", session)
        scheduler.submit("again", session)

        assert timer.run_all() == 2
        assert not session.composing
        assert [m.sender for m in session.history] == [
            Sender.USER, Sender.USER, Sender.ASSISTANT, Sender.ASSISTANT
        ]
        assert session.history[-1].content == FALLBACK_REPLY

    def test_custom_fallback_reply(self, timer, session):
        def broken(message, state):
            raise KeyError(message)

        scheduler = ResponseScheduler(
            timer, broken, fallback=lambda state: f"retry later, {state.session_id}"
        )
        scheduler.submit("hi", session)
        timer.run_all()

        assert session.history[-1].content == "retry later, sched_session"

    def test_invalid_delay_range(self, timer):
        with pytest.raises(ValueError):
            ResponseScheduler(timer, echo, min_delay=3.0, max_delay=1.0)
        with pytest.raises(ValueError):
            ResponseScheduler(timer, echo, min_delay=-1.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
