"""Playwright-backed page rendering."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncContextManager, AsyncIterator, List, Optional, Protocol

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright

from .config import CrawlConfig
from .content import extract_links

logger = logging.getLogger("a11y_crawler.browser")


@dataclass
class LoadedPage:
    """A page that finished loading, ready for evaluation."""

    url: str
    final_url: str
    status: int
    title: str
    links: List[str] = field(default_factory=list)
    handle: Any = None


class Renderer(Protocol):
    def load(self, url: str, timeout: float) -> AsyncContextManager[LoadedPage]:
        """Navigate to ``url`` and yield the loaded page until the block exits."""


class PlaywrightRenderer:
    """Shares one browser context across the run, opening a tab per load."""

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self._playwright_cm = None
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def start(self) -> None:
        self._playwright_cm = async_playwright()
        self._playwright = await self._playwright_cm.__aenter__()
        try:
            self._browser = await self._playwright.chromium.launch(headless=self.config.headless)
            self._context = await self._browser.new_context(
                viewport={
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                },
                user_agent=self.config.user_agent,
                locale=self.config.locale,
            )
        except BaseException:
            await self.stop()
            raise
        logger.debug("Browser started (headless=%s)", self.config.headless)

    async def stop(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
            self._context = None
        if self._playwright_cm is not None:
            await self._playwright_cm.__aexit__(None, None, None)
            self._playwright_cm = None
            self._playwright = None

    async def __aenter__(self) -> "PlaywrightRenderer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    @asynccontextmanager
    async def load(self, url: str, timeout: float) -> AsyncIterator[LoadedPage]:
        if self._context is None:
            raise RuntimeError("Renderer has not been started")
        page = await self._context.new_page()
        page.set_default_navigation_timeout(timeout * 1000)
        try:
            logger.info("Loading %s", url)
            response = await page.goto(url, wait_until="networkidle")
            if self.config.wait_after_load:
                await page.wait_for_timeout(int(self.config.wait_after_load * 1000))
            status = response.status if response is not None else 0
            title = await page.title()
            final_url = page.url or url
            html = await page.content()
            yield LoadedPage(
                url=url,
                final_url=final_url,
                status=status,
                title=title,
                links=extract_links(html, final_url),
                handle=page,
            )
        finally:
            await page.close()
