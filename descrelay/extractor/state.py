# descrelay/extractor/state.py
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple


class Phase(str, Enum):
    """Phases of the poll loop. The expansion step before it is reported through the hook."""

    POLLING = "polling"
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"

    @property
    def terminal(self) -> bool:
        return self in (Phase.RESOLVED, Phase.EXHAUSTED)


@dataclass(frozen=True)
class RetryState:
    """Attempt bookkeeping for one extraction call. Each poll is one attempt."""

    attempts_used: int = 0
    max_attempts: int = 3

    @property
    def remaining(self) -> int:
        return self.max_attempts - self.attempts_used

    def start_attempt(self) -> "RetryState":
        if self.remaining <= 0:
            raise ValueError(f"retry budget spent ({self.attempts_used}/{self.max_attempts})")
        return replace(self, attempts_used=self.attempts_used + 1)


def after_poll(state: RetryState, text: Optional[str]) -> Tuple[Phase, RetryState]:
    """
    Transition after one poll. Non-empty text resolves; otherwise keep
    polling while attempts remain, else the call is exhausted.
    """
    if text:
        return Phase.RESOLVED, state
    if state.remaining > 0:
        return Phase.POLLING, state
    return Phase.EXHAUSTED, state
