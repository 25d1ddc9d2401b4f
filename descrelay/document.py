# descrelay/document.py
"""
Document access for the extractor.

The extractor only ever needs two things from a rendered page: a read-only
snapshot of the first element matching a selector, and the ability to click
one. `SoupDocument` serves saved HTML; `PlaywrightDocument` serves a live
Chromium page.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Protocol

from bs4 import BeautifulSoup

from .config import USER_AGENT
from .dom.nodes import Node, from_soup, parse_element
from .log import warn


class Document(Protocol):
    async def select(self, selector: str) -> Optional[Node]: ...

    async def click(self, selector: str) -> bool: ...


class SoupDocument:
    """Static HTML. Clicking is accepted but changes nothing."""

    def __init__(self, html: str, base_url: str = "") -> None:
        self.soup = BeautifulSoup(html or "", "html.parser")
        self.base_url = base_url
        self.clicks = 0

    async def select(self, selector: str) -> Optional[Node]:
        tag = self.soup.select_one(selector)
        if tag is None:
            return None
        return from_soup(tag, self.base_url)

    async def click(self, selector: str) -> bool:
        if self.soup.select_one(selector) is None:
            return False
        self.clicks += 1
        return True


class PlaywrightDocument:
    """A live page from playwright.async_api."""

    def __init__(self, page) -> None:
        self.page = page

    async def select(self, selector: str) -> Optional[Node]:
        handle = await self.page.query_selector(selector)
        if handle is None:
            return None
        html = await handle.evaluate("e => e.outerHTML")
        return parse_element(html, self.page.url)

    async def click(self, selector: str) -> bool:
        handle = await self.page.query_selector(selector)
        if handle is None:
            return False
        await handle.click()
        return True


class ExpansionControl(Protocol):
    async def is_present(self) -> bool: ...

    async def activate(self) -> None: ...


class SelectorControl:
    """The "show more" control, as an ensure-expanded capability."""

    def __init__(self, document: Document, selector: str) -> None:
        self.document = document
        self.selector = selector

    async def is_present(self) -> bool:
        return await self.document.select(self.selector) is not None

    async def activate(self) -> None:
        await self.document.click(self.selector)


@asynccontextmanager
async def open_page(
    url: str, timeout_ms: int = 45000, headed: bool = False
) -> AsyncIterator[PlaywrightDocument]:
    """Launch Chromium, load `url` and yield it as a Document."""
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=not headed)
        context = await browser.new_context(user_agent=USER_AGENT)
        page = await context.new_page()
        page.set_default_timeout(timeout_ms)
        try:
            try:
                await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
            except Exception as e:
                warn(f"open_page: domcontentloaded failed for {url} :: {e}; retrying with load")
                await page.goto(url, wait_until="load", timeout=timeout_ms + 10000)
            await page.wait_for_timeout(1200)
            yield PlaywrightDocument(page)
        finally:
            await context.close()
            await browser.close()
