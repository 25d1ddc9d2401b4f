# descrelay/observability.py
from __future__ import annotations

import logging
from typing import Any, List, Tuple

from .log import VERBOSE, debug, info, warn


def setup_logging() -> None:
    if not VERBOSE:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)sZ [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    for name in ("urllib3", "requests", "uvicorn"):
        logging.getLogger(name).setLevel(logging.INFO)


class ExtractionHook:
    """
    Extension points of one extraction call. Every method is a no-op here;
    subclasses pick the events they care about.
    """

    def expansion(self, activated: bool) -> None:
        pass

    def attempt_started(self, attempt: int, max_attempts: int) -> None:
        pass

    def attempt_result(self, attempt: int, found: bool, length: int) -> None:
        pass

    def resolved(self, text: str, attempts: int) -> None:
        pass

    def exhausted(self, attempts: int) -> None:
        pass


class LogHook(ExtractionHook):
    def expansion(self, activated: bool) -> None:
        if activated:
            info("extract: expanded description")
        else:
            debug("extract: no show-more control, polling directly")

    def attempt_started(self, attempt: int, max_attempts: int) -> None:
        debug(f"extract: attempt {attempt}/{max_attempts}")

    def attempt_result(self, attempt: int, found: bool, length: int) -> None:
        debug(f"extract: attempt {attempt} found={found} len={length}")

    def resolved(self, text: str, attempts: int) -> None:
        info(f"extract: description resolved after {attempts} attempt(s) ({len(text)} chars)")

    def exhausted(self, attempts: int) -> None:
        warn(f"extract: no description after {attempts} attempt(s)")


class RecordingHook(ExtractionHook):
    """Keeps every event as an (event, payload) tuple."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    def expansion(self, activated: bool) -> None:
        self.events.append(("expansion", activated))

    def attempt_started(self, attempt: int, max_attempts: int) -> None:
        self.events.append(("attempt_started", attempt))

    def attempt_result(self, attempt: int, found: bool, length: int) -> None:
        self.events.append(("attempt_result", (attempt, found, length)))

    def resolved(self, text: str, attempts: int) -> None:
        self.events.append(("resolved", attempts))

    def exhausted(self, attempts: int) -> None:
        self.events.append(("exhausted", attempts))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


setup_logging()
