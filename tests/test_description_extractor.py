import asyncio
from dataclasses import replace

import pytest

from conftest import FakeDocument
from descrelay.extractor.description import extract_description
from descrelay.extractor.handler import GET_TITLE_AND_DESCRIPTION, ExtractionResult, handle_request
from descrelay.extractor.state import Phase, RetryState, after_poll
from descrelay.observability import RecordingHook


def run(doc, settings, sleep, hook=None):
    return asyncio.run(extract_description(doc, settings, sleep=sleep, hook=hook))

def test_expands_once_then_waits_before_first_poll(settings, fake_sleep):
    doc = FakeDocument(expand=True, description="full text")
    assert run(doc, settings, fake_sleep) == "full text"
    assert doc.clicks == 1
    assert fake_sleep.delays == [1.0]
    assert doc.polls == 1

def test_no_control_polls_without_delay(settings, fake_sleep):
    doc = FakeDocument(expand=False, description="text")
    assert run(doc, settings, fake_sleep) == "text"
    assert doc.clicks == 0
    assert fake_sleep.delays == []

def test_content_appearing_late(settings, fake_sleep):
    doc = FakeDocument(description="late", description_from=3)
    assert run(doc, settings, fake_sleep) == "late"
    assert doc.polls == 3
    assert fake_sleep.delays == [1.0, 1.0]

def test_empty_container_retried_like_missing(settings, fake_sleep):
    doc = FakeDocument(description="finally", description_from=3, empty_polls=2)
    hook = RecordingHook()
    assert run(doc, settings, fake_sleep, hook) == "finally"
    results = [p for name, p in hook.events if name == "attempt_result"]
    assert results == [(1, True, 0), (2, True, 0), (3, True, len("finally"))]

def test_exhaustion_returns_none_and_stops(settings, fake_sleep):
    doc = FakeDocument(description_from=None)
    hook = RecordingHook()
    assert run(doc, settings, fake_sleep, hook) is None
    assert doc.polls == settings.max_attempts
    assert fake_sleep.delays == [1.0] * (settings.max_attempts - 1)
    assert hook.names()[-1] == "exhausted"
    assert hook.names().count("attempt_started") == settings.max_attempts

def test_exhaustion_sentinel_mode(settings, fake_sleep):
    doc = FakeDocument(description_from=None, expand=True)
    s = replace(settings, on_exhausted="sentinel")
    assert run(doc, s, fake_sleep) == "Description unavailable"
    # one delay after expanding, then one between each poll
    assert fake_sleep.delays == [1.0] * s.max_attempts

def test_larger_budget(settings, fake_sleep):
    doc = FakeDocument(description_from=None)
    s = replace(settings, max_attempts=5)
    assert run(doc, s, fake_sleep) is None
    assert doc.polls == 5

def test_resolved_text_is_trimmed(settings, fake_sleep):
    doc = FakeDocument(description="\n   padded text  \n")
    assert run(doc, settings, fake_sleep) == "padded text"

def test_hook_event_order(settings, fake_sleep):
    doc = FakeDocument(expand=True, description_from=2)
    hook = RecordingHook()
    run(doc, settings, fake_sleep, hook)
    assert hook.names() == [
        "expansion",
        "attempt_started", "attempt_result",
        "attempt_started", "attempt_result",
        "resolved",
    ]

def test_retry_state_is_bounded():
    state = RetryState(max_attempts=3)
    for _ in range(3):
        state = state.start_attempt()
    assert state.attempts_used == 3
    assert state.remaining == 0
    with pytest.raises(ValueError):
        state.start_attempt()

def test_after_poll_transitions():
    fresh = RetryState(attempts_used=1, max_attempts=3)
    spent = RetryState(attempts_used=3, max_attempts=3)
    assert after_poll(fresh, "x") == (Phase.RESOLVED, fresh)
    assert after_poll(fresh, "") == (Phase.POLLING, fresh)
    assert after_poll(spent, "") == (Phase.EXHAUSTED, spent)
    assert after_poll(spent, "x")[0] is Phase.RESOLVED
    assert Phase.RESOLVED.terminal and Phase.EXHAUSTED.terminal
    assert not Phase.POLLING.terminal


class HiddenControlDocument(FakeDocument):
    """Already expanded: the show-more control is still in the tree but clicking it times out."""

    async def click(self, selector):
        self.clicks += 1
        raise TimeoutError("element is not visible")


def test_failed_click_still_polls(settings, fake_sleep):
    doc = HiddenControlDocument(expand=True, description="already expanded text")
    hook = RecordingHook()
    assert run(doc, settings, fake_sleep, hook) == "already expanded text"
    assert doc.clicks == 1
    assert doc.polls == 1
    assert fake_sleep.delays == []
    assert hook.events[0] == ("expansion", False)


def test_failed_click_through_handler(settings, fake_sleep):
    doc = HiddenControlDocument(expand=True, description="already expanded text")
    result = asyncio.run(
        handle_request({"action": GET_TITLE_AND_DESCRIPTION}, doc, settings, sleep=fake_sleep)
    )
    assert result == ExtractionResult(title="A title", description="already expanded text")


class CountingControl:
    def __init__(self, present):
        self.present = present
        self.activations = 0

    async def is_present(self):
        return self.present

    async def activate(self):
        self.activations += 1


def test_injected_control_is_used(settings, fake_sleep):
    doc = FakeDocument(expand=False, description="text")
    control = CountingControl(present=True)
    result = asyncio.run(extract_description(doc, settings, control=control, sleep=fake_sleep))
    assert result == "text"
    assert control.activations == 1
    assert doc.clicks == 0
    assert fake_sleep.delays == [1.0]


def test_phases_are_the_poll_loop_states():
    assert [p.name for p in Phase] == ["POLLING", "RESOLVED", "EXHAUSTED"]
