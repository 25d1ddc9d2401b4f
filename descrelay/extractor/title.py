# descrelay/extractor/title.py
from __future__ import annotations

from typing import Optional

from ..config import ExtractionSettings
from ..document import Document


async def read_title(document: Document, settings: Optional[ExtractionSettings] = None) -> str:
    """Trimmed text of the page heading, or the title sentinel. One lookup, no retries."""
    settings = settings or ExtractionSettings.from_env()
    node = await document.select(settings.title_selector)
    if node is None:
        return settings.title_sentinel
    return node.text_content().strip() or settings.title_sentinel
