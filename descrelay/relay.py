# descrelay/relay.py
from __future__ import annotations

from typing import Callable, Optional, Tuple

from .clean_text import normalize
from .delivery.http_client import DeliveryReply, deliver
from .extractor.handler import ExtractionResult
from .log import info


def relay(
    result: ExtractionResult,
    deliver_fn: Callable[..., Optional[DeliveryReply]] = deliver,
    skip_empty: bool = False,
) -> Tuple[dict, Optional[DeliveryReply]]:
    """
    Normalize the raw description of `result` and hand it to the receiver.
    Returns the cleaned payload and the receiver's reply (None when
    delivery failed or was skipped).
    """
    payload = {"title": result.title, "description": normalize(result.description)}
    if skip_empty and payload["description"] is None:
        info("relay: no usable description, delivery skipped")
        return payload, None
    return payload, deliver_fn(payload["title"], payload["description"])
