# descrelay/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

TITLE_SELECTOR = os.getenv(
    "DR_TITLE_SELECTOR", "h1.ytd-watch-metadata, h1.ytd-video-primary-info-renderer"
)
EXPAND_SELECTOR = os.getenv("DR_EXPAND_SELECTOR", "#description-inline-expander #expand")
DESCRIPTION_SELECTOR = os.getenv(
    "DR_DESCRIPTION_SELECTOR", "#description-inline-expander #expanded yt-attributed-string"
)

MAX_ATTEMPTS = min(5, max(3, int(os.getenv("DR_MAX_ATTEMPTS", "3"))))
POLL_DELAY = float(os.getenv("DR_POLL_DELAY", "1.0"))          # seconds, fixed, no backoff

TITLE_SENTINEL = os.getenv("DR_TITLE_SENTINEL", "Title unavailable")
DESCRIPTION_SENTINEL = os.getenv("DR_DESCRIPTION_SENTINEL", "Description unavailable")
ON_EXHAUSTED = os.getenv("DR_ON_EXHAUSTED", "null").strip().lower()   # "null" | "sentinel"

DELIVERY_URL = os.getenv("DR_DELIVERY_URL", "http://localhost:8000/data")
HTTP_TIMEOUT = float(os.getenv("DR_HTTP_TIMEOUT", "15"))

CACHE_DIR = Path(os.getenv("DR_CACHE_DIR", Path.home() / ".cache" / "descrelay")).expanduser()
CACHE_TTL = int(os.getenv("DR_CACHE_TTL", "3600"))

LLM_URL = os.getenv("DR_LLM_URL", "https://api.openai.com/v1/chat/completions")
LLM_KEY = os.getenv("DR_LLM_KEY", "")
LLM_MODEL = os.getenv("DR_LLM_MODEL", "gpt-4o-mini")

USER_AGENT = os.getenv(
    "DR_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0 Safari/537.36",
)


@dataclass(frozen=True)
class ExtractionSettings:
    title_selector: str = TITLE_SELECTOR
    expand_selector: str = EXPAND_SELECTOR
    description_selector: str = DESCRIPTION_SELECTOR
    max_attempts: int = MAX_ATTEMPTS
    poll_delay: float = POLL_DELAY
    title_sentinel: str = TITLE_SENTINEL
    description_sentinel: str = DESCRIPTION_SENTINEL
    on_exhausted: str = ON_EXHAUSTED

    @classmethod
    def from_env(cls) -> "ExtractionSettings":
        return cls()

    def exhausted_value(self) -> Optional[str]:
        """Terminal value of an extraction that ran out of attempts."""
        if self.on_exhausted == "sentinel":
            return self.description_sentinel
        return None
