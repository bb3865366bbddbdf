"""Headless Chromium page (Playwright) used by the console monitor."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

logger = logging.getLogger(__name__)


class PlaywrightSurface:
    """
    Rendering surface backed by a Playwright-driven Chromium page.

    Use as an async context manager or call :meth:`start` / :meth:`close`.
    """

    def __init__(self, url: str, *, headless: bool = True, nav_timeout_s: float = 15.0) -> None:
        self.url = url
        self.headless = headless
        self.nav_timeout_s = float(nav_timeout_s)
        self.playwright: Playwright | None = None
        self.browser: Browser | None = None
        self.page: Page | None = None
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready and self.page is not None

    async def start(self) -> None:
        logger.info("Launching Chromium (headless=%s)", self.headless)
        self.playwright = await async_playwright().start()
        try:
            self.browser = await self.playwright.chromium.launch(headless=self.headless)
            self.page = await self.browser.new_page()
            self.page.on("load", self._on_load)
            self.page.on("framenavigated", self._on_frame_navigated)
            await self.navigate(self.url)
        except Exception:
            await self.close()
            raise

    async def navigate(self, url: str) -> None:
        if self.page is None:
            raise RuntimeError("PlaywrightSurface.start() has not been called")
        self.url = url
        self._ready = False
        logger.info("Loading amplifier page %s", url)
        await self.page.goto(url, wait_until="load", timeout=self.nav_timeout_s * 1000.0)
        self._ready = True

    def _on_load(self, _page: Any) -> None:
        self._ready = True

    def _on_frame_navigated(self, frame: Any) -> None:
        if self.page is not None and frame == self.page.main_frame:
            self._ready = False

    async def run_query(self, script: str) -> Optional[str]:
        if self.page is None:
            return None
        result = await self.page.evaluate(script)
        if result is None or isinstance(result, str):
            return result
        return json.dumps(result)

    async def close(self) -> None:
        self._ready = False
        if self.page is not None:
            try:
                await self.page.close()
            except Exception as exc:
                logger.debug("Page close failed: %s", exc)
            self.page = None
        if self.browser is not None:
            try:
                await self.browser.close()
            except Exception as exc:
                logger.debug("Browser close failed: %s", exc)
            self.browser = None
        if self.playwright is not None:
            await self.playwright.stop()
            self.playwright = None

    async def __aenter__(self) -> PlaywrightSurface:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
