# descrelay/extractor/description.py
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from ..config import ExtractionSettings
from ..document import Document, ExpansionControl, SelectorControl
from ..dom.flatten import flatten
from ..log import warn
from ..observability import ExtractionHook, LogHook
from .state import Phase, RetryState, after_poll

Sleeper = Callable[[float], Awaitable[None]]


async def poll_once(document: Document, selector: str) -> tuple[bool, str]:
    node = await document.select(selector)
    if node is None:
        return False, ""
    return True, flatten(node).strip()


async def extract_description(
    document: Document,
    settings: Optional[ExtractionSettings] = None,
    *,
    control: Optional[ExpansionControl] = None,
    sleep: Sleeper = asyncio.sleep,
    hook: Optional[ExtractionHook] = None,
) -> Optional[str]:
    """
    Reveal the collapsed description and poll for its text.

    Clicks the "show more" control once if it is there, waits one fixed
    delay, then polls the description container up to `max_attempts`
    times with the same fixed delay between polls. Returns the flattened
    text, or the configured exhausted value (None or the sentinel) when
    every attempt came back empty. Never raises for missing content, and a
    click that fails (control hidden once expanded) only skips the delay.
    """
    settings = settings or ExtractionSettings.from_env()
    hook = hook or LogHook()
    control = control or SelectorControl(document, settings.expand_selector)
    state = RetryState(max_attempts=settings.max_attempts)

    if await control.is_present():
        try:
            await control.activate()
        except Exception as e:
            warn(f"extract: show-more click failed, polling anyway :: {e}")
            hook.expansion(False)
        else:
            hook.expansion(True)
            await sleep(settings.poll_delay)
    else:
        hook.expansion(False)

    phase = Phase.POLLING
    text = ""
    while not phase.terminal:
        state = state.start_attempt()
        hook.attempt_started(state.attempts_used, state.max_attempts)
        found, text = await poll_once(document, settings.description_selector)
        hook.attempt_result(state.attempts_used, found, len(text))
        phase, state = after_poll(state, text)
        if phase is Phase.POLLING:
            await sleep(settings.poll_delay)

    if phase is Phase.RESOLVED:
        hook.resolved(text, state.attempts_used)
        return text
    hook.exhausted(state.attempts_used)
    return settings.exhausted_value()
