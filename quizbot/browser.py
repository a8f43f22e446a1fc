"""
Browser Automation Module
Playwright wrapper owning the shared Chromium instance and quiz pages.
"""

import os
import asyncio
import logging
from typing import Any, Optional, Protocol
from playwright.async_api import async_playwright, Browser, Page, TimeoutError as PlaywrightTimeout

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-web-security',
    '--disable-features=IsolateOrigins,site-per-process',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--disable-gpu',
    '--no-first-run',
    '--no-zygote',
    '--disable-extensions'
]


class PageAccessor(Protocol):
    """Runs a DOM function inside the loaded document and returns its result."""

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        ...


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ('0', 'false', 'no', 'off', '')


class BrowserManager:
    """
    Manages the single browser shared by all quiz sessions.
    The browser is launched on first use and reused afterwards.
    """

    def __init__(self, headless: Optional[bool] = None, timeout: Optional[int] = None,
                 executable_path: Optional[str] = None):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode (HEADLESS env, default true)
            timeout: Default timeout in milliseconds (BROWSER_TIMEOUT env, default 30000)
            executable_path: Chromium binary to use instead of Playwright's (CHROMIUM_PATH env)
        """
        self.headless = headless if headless is not None else _env_flag('HEADLESS', True)
        self.timeout = timeout if timeout is not None else int(os.getenv('BROWSER_TIMEOUT', '30000'))
        self.executable_path = executable_path or os.getenv('CHROMIUM_PATH') or None
        self.browser: Optional[Browser] = None
        self.playwright = None
        self._lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self) -> Browser:
        """Start the browser instance, or return the running one."""
        async with self._lock:
            if self.browser and self.browser.is_connected():
                return self.browser
            try:
                if not self.playwright:
                    self.playwright = await async_playwright().start()
                self.browser = await self.playwright.chromium.launch(
                    headless=self.headless,
                    executable_path=self.executable_path,
                    args=LAUNCH_ARGS
                )
                logger.info(f"Browser started (headless={self.headless})")
            except Exception as e:
                logger.error(f"Failed to start browser: {e}")
                raise
            return self.browser

    async def close(self):
        """Close the browser instance."""
        if self.browser:
            await self.browser.close()
            self.browser = None
        if self.playwright:
            await self.playwright.stop()
            self.playwright = None
        logger.info("Browser closed")

    async def create_page(self) -> Page:
        """Create a new browser page."""
        browser = await self.start()
        context = await browser.new_context(viewport={'width': 1280, 'height': 800})
        page = await context.new_page()
        page.set_default_timeout(self.timeout)
        return page

    async def close_page(self, page: Page):
        """Close a page together with its browser context."""
        context = page.context
        await page.close()
        await context.close()

    async def navigate(self, page: Page, url: str, wait_for: str = 'networkidle'):
        """
        Load a URL in an existing page and wait for it to settle.

        Args:
            page: Page to navigate
            url: URL to load
            wait_for: Wait condition ('load', 'domcontentloaded', 'networkidle')
        """
        max_retries = 2

        for attempt in range(max_retries):
            try:
                logger.info(f"Loading page: {url} (attempt {attempt + 1})")
                await page.goto(url, wait_until=wait_for, timeout=self.timeout)
                await self._wait_for_stability(page)
                logger.info(f"Page loaded successfully: {url}")
                return
            except PlaywrightTimeout:
                logger.warning(f"Timeout loading page (attempt {attempt + 1})")
                if attempt == max_retries - 1:
                    raise
                await asyncio.sleep(2)

    async def _wait_for_stability(self, page: Page, check_interval: float = 0.5, stable_time: float = 1.0):
        """
        Wait for the page to stabilize (no more DOM changes).

        Args:
            page: Page instance
            check_interval: Time between checks in seconds
            stable_time: Required stable time in seconds
        """
        last_html = ""
        stable_count = 0
        required_stable = int(stable_time / check_interval)

        for _ in range(20):  # Max 10 seconds
            current_html = await page.content()

            if current_html == last_html:
                stable_count += 1
                if stable_count >= required_stable:
                    return
            else:
                stable_count = 0
                last_html = current_html

            await asyncio.sleep(check_interval)
