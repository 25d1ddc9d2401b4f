# descrelay/extractor/handler.py
from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Set

from ..config import ExtractionSettings
from ..document import Document
from ..log import err
from ..observability import ExtractionHook
from .description import Sleeper, extract_description
from .title import read_title

GET_TITLE = "getTitle"
GET_TITLE_AND_DESCRIPTION = "getTitleAndDescription"
ACTIONS = (GET_TITLE, GET_TITLE_AND_DESCRIPTION)


@dataclass(frozen=True)
class ExtractionResult:
    title: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


async def handle_request(
    request: Dict[str, Any],
    document: Document,
    settings: Optional[ExtractionSettings] = None,
    *,
    sleep: Sleeper = asyncio.sleep,
    hook: Optional[ExtractionHook] = None,
) -> ExtractionResult:
    """
    Answer one extraction request. Title and description run side by side
    and the result is built only after both settle; a failure in one
    branch falls back to that branch's default value.
    """
    settings = settings or ExtractionSettings.from_env()
    action = (request or {}).get("action")
    if action not in ACTIONS:
        raise ValueError(f"unknown action: {action!r}")

    if action == GET_TITLE:
        title = await _settle(read_title(document, settings), settings.title_sentinel, "title")
        return ExtractionResult(title=title)

    title_res, desc_res = await asyncio.gather(
        read_title(document, settings),
        extract_description(document, settings, sleep=sleep, hook=hook),
        return_exceptions=True,
    )
    if isinstance(title_res, BaseException):
        err(f"handler: title read failed :: {title_res}")
        title_res = settings.title_sentinel
    if isinstance(desc_res, BaseException):
        err(f"handler: description extraction failed :: {desc_res}")
        desc_res = settings.exhausted_value()
    return ExtractionResult(title=title_res, description=desc_res)


async def _settle(coro, fallback, what: str):
    try:
        return await coro
    except Exception as e:
        err(f"handler: {what} read failed :: {e}")
        return fallback


class MessageListener:
    """
    Request/response endpoint for a messaging transport.

    `on_message` returns True when the reply will arrive later through
    `send_response` (the transport must keep the channel open), and False
    for actions it does not answer. Each accepted request gets exactly one
    reply.
    """

    def __init__(
        self,
        document: Document,
        settings: Optional[ExtractionSettings] = None,
        *,
        sleep: Sleeper = asyncio.sleep,
        hook: Optional[ExtractionHook] = None,
    ) -> None:
        self.document = document
        self.settings = settings or ExtractionSettings.from_env()
        self.sleep = sleep
        self.hook = hook
        self._pending: Set[asyncio.Future] = set()

    def on_message(self, request: Dict[str, Any], send_response: Callable[[Dict[str, Any]], None]) -> bool:
        if (request or {}).get("action") not in ACTIONS:
            return False
        task = asyncio.ensure_future(self._answer(request, send_response))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _answer(self, request, send_response) -> None:
        result = await handle_request(
            request, self.document, self.settings, sleep=self.sleep, hook=self.hook
        )
        send_response(result.to_dict())
