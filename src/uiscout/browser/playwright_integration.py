"""Playwright browser lifecycle management.

This module provides the PlaywrightManager class which owns the Playwright
instance, the browser, its contexts and pages for a discovery run.

CRITICAL: Proper cleanup is essential to avoid resource leaks.
"""

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)
from typing import Optional, Dict, Any, List
import logging

logger = logging.getLogger(__name__)


class PlaywrightManager:
    """Manage Playwright browser instances, contexts and pages.

    PATTERN: One browser per engine, reused across contexts.

    CRITICAL: Always call cleanup() or use as async context manager.
    """

    def __init__(self, browser_type: str = "chromium", headless: bool = True):
        """Initialize the Playwright manager.

        Args:
            browser_type: Playwright engine name (chromium, firefox, webkit)
            headless: Whether to run in headless mode
        """
        self.browser_type = browser_type
        self.headless = headless
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.contexts: List[BrowserContext] = []
        self.pages: List[Page] = []
        self._initialized = False

    async def __aenter__(self):
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.cleanup()

    async def initialize(self) -> None:
        """Start Playwright.

        Raises:
            RuntimeError: If initialization fails
        """
        if self._initialized:
            return

        try:
            self.playwright = await async_playwright().start()
            self._initialized = True
            logger.info("Playwright initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Playwright: {e}")
            raise RuntimeError(f"Playwright initialization failed: {e}")

    async def launch_browser(self, **options: Any) -> Browser:
        """Launch the browser, reusing it if already running.

        Args:
            **options: Additional browser launch options

        Returns:
            Browser instance

        Raises:
            RuntimeError: If browser fails to launch
        """
        if not self._initialized:
            await self.initialize()

        if self.browser is not None:
            logger.debug(f"Reusing existing {self.browser_type} browser")
            return self.browser

        try:
            launcher = getattr(self.playwright, self.browser_type)
            self.browser = await launcher.launch(headless=self.headless, **options)
            logger.info(
                f"Launched {self.browser_type} browser (headless={self.headless})"
            )
            return self.browser
        except Exception as e:
            logger.error(f"Failed to launch {self.browser_type} browser: {e}")
            raise RuntimeError(f"Browser launch failed: {e}")

    async def create_context(
        self, viewport: Optional[Dict[str, int]] = None, **options: Any
    ) -> BrowserContext:
        """Create an isolated browser context.

        Args:
            viewport: Optional {"width", "height"} mapping
            **options: Additional context options

        Returns:
            Browser context

        Raises:
            RuntimeError: If context creation fails
        """
        browser = await self.launch_browser()
        try:
            context_options: Dict[str, Any] = dict(options)
            if viewport:
                context_options["viewport"] = viewport
            context = await browser.new_context(**context_options)
            self.contexts.append(context)
            logger.debug(f"Created browser context ({len(self.contexts)} open)")
            return context
        except Exception as e:
            logger.error(f"Failed to create browser context: {e}")
            raise RuntimeError(f"Context creation failed: {e}")

    async def create_page(self, context: BrowserContext) -> Page:
        """Create a new page in the specified context.

        Raises:
            RuntimeError: If page creation fails
        """
        try:
            page = await context.new_page()
            self.pages.append(page)
            logger.debug(f"Created page ({len(self.pages)} open)")
            return page
        except Exception as e:
            logger.error(f"Failed to create page: {e}")
            raise RuntimeError(f"Page creation failed: {e}")

    async def navigate(
        self, page: Page, url: str, wait_until: str = "load", timeout: int = 30000
    ) -> None:
        """Navigate page to URL.

        Args:
            page: Page instance
            url: Target URL
            wait_until: Wait condition (load, domcontentloaded, networkidle)
            timeout: Navigation timeout in milliseconds

        Raises:
            RuntimeError: If navigation fails
        """
        try:
            await page.goto(url, wait_until=wait_until, timeout=timeout)
            logger.info(f"Navigated to {url}")
        except Exception as e:
            logger.error(f"Navigation to {url} failed: {e}")
            raise RuntimeError(f"Navigation failed: {e}")

    async def open_page(self, url: str, timeout: int = 30000) -> Page:
        """Create a context and page and navigate it to url."""
        context = await self.create_context()
        page = await self.create_page(context)
        await self.navigate(page, url, timeout=timeout)
        return page

    async def cleanup(self) -> None:
        """Close pages, contexts and the browser, then stop Playwright.

        CRITICAL: Must be called to prevent resource leaks.

        Raises:
            RuntimeError: If any resource failed to close
        """
        errors = []

        for page in self.pages:
            try:
                await page.close()
            except Exception as e:
                errors.append(f"Failed to close page: {e}")
        self.pages.clear()

        for context in self.contexts:
            try:
                await context.close()
            except Exception as e:
                errors.append(f"Failed to close context: {e}")
        self.contexts.clear()

        if self.browser is not None:
            try:
                await self.browser.close()
                logger.debug(f"Closed browser: {self.browser_type}")
            except Exception as e:
                errors.append(f"Failed to close browser: {e}")
            self.browser = None

        if self.playwright:
            try:
                await self.playwright.stop()
                logger.info("Playwright stopped successfully")
            except Exception as e:
                errors.append(f"Failed to stop Playwright: {e}")
            self.playwright = None

        self._initialized = False

        if errors:
            error_msg = "; ".join(errors)
            logger.warning(f"Cleanup completed with errors: {error_msg}")
            raise RuntimeError(f"Cleanup errors: {error_msg}")
        logger.info("Cleanup completed successfully")
