# descrelay/delivery/http_client.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from ..config import DELIVERY_URL, HTTP_TIMEOUT
from ..log import info, warn

_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class DeliveryError(RuntimeError):
    pass


@dataclass(frozen=True)
class DeliveryReply:
    result: str
    cached: bool = False


def post_payload(payload: dict, url: str = DELIVERY_URL, timeout: float = HTTP_TIMEOUT) -> DeliveryReply:
    """POST one payload and parse the reply. Raises DeliveryError on any failure."""
    try:
        resp = requests.post(url, json=payload, headers=_HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise DeliveryError(f"POST {url} failed: {e}") from e
    if not (200 <= resp.status_code < 300):
        raise DeliveryError(f"POST {url} -> HTTP {resp.status_code}: {(resp.text or '')[:200]}")
    try:
        body = resp.json()
    except ValueError as e:
        raise DeliveryError(f"POST {url} returned non-JSON body") from e
    if not isinstance(body, dict) or "result" not in body:
        raise DeliveryError(f"POST {url} reply has no 'result' field")
    return DeliveryReply(result=str(body["result"]), cached=bool(body.get("cached", False)))


def deliver(
    title: str,
    description: Optional[str],
    url: str = DELIVERY_URL,
    timeout: float = HTTP_TIMEOUT,
    raise_errors: bool = False,
) -> Optional[DeliveryReply]:
    """
    Send {title, description} to the receiver once. Failures are logged
    and yield None; nothing is retried.
    """
    info(f"deliver: -> POST {url}")
    try:
        reply = post_payload({"title": title, "description": description}, url=url, timeout=timeout)
    except DeliveryError as e:
        warn(f"deliver: {e}")
        if raise_errors:
            raise
        return None
    tag = " (cached)" if reply.cached else ""
    info(f"deliver: <- {reply.result}{tag}")
    return reply
