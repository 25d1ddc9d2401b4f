import asyncio

import pytest

from descrelay.config import ExtractionSettings
from descrelay.dom.nodes import element, text_node

SETTINGS = ExtractionSettings(
    title_selector="h1",
    expand_selector="#more",
    description_selector="#desc",
    max_attempts=3,
    poll_delay=1.0,
    title_sentinel="Title unavailable",
    description_sentinel="Description unavailable",
    on_exhausted="null",
)


class FakeDocument:
    """
    Scripted page. The description container shows up from poll
    `description_from` on (None = never); `empty_polls` polls before that
    find the container but with no text in it.
    """

    def __init__(self, title="A title", description="some text", description_from=1,
                 expand=False, empty_polls=0, fail_on=None):
        self.title = title
        self.description = description
        self.description_from = description_from
        self.expand = expand
        self.empty_polls = empty_polls
        self.fail_on = fail_on
        self.polls = 0
        self.clicks = 0
        self.log = []

    async def select(self, selector):
        if selector == self.fail_on:
            raise RuntimeError(f"driver lost {selector}")
        if selector == SETTINGS.title_selector:
            if self.title is None:
                return None
            return element("h1", text_node(self.title))
        if selector == SETTINGS.expand_selector:
            return element("button", text_node("more")) if self.expand else None
        if selector == SETTINGS.description_selector:
            self.polls += 1
            self.log.append(("poll", self.polls))
            if self.description_from is None or self.polls < self.description_from:
                if self.polls <= self.empty_polls:
                    return element("div", text_node("   \n"))
                return None
            return element("div", text_node(self.description))
        return None

    async def click(self, selector):
        self.clicks += 1
        self.log.append(("click", selector))
        return True


class FakeSleep:
    def __init__(self, log=None):
        self.delays = []
        self.log = log

    async def __call__(self, seconds):
        self.delays.append(seconds)
        if self.log is not None:
            self.log.append(("sleep", seconds))
        await asyncio.sleep(0)


@pytest.fixture
def settings():
    return SETTINGS


@pytest.fixture
def fake_sleep():
    return FakeSleep()
