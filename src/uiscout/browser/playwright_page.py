"""Playwright implementation of the page capability.

Element handles are Playwright ``Locator`` objects. Reads and interactions use
a bounded action timeout so a detached element never blocks for Playwright's
default 30 seconds.

CRITICAL: Errors that mean the page, context or browser is gone are raised as
PageUnavailableError. Every other Playwright error propagates unchanged.
"""

import logging
from typing import Awaitable, List, Optional, Sequence, TypeVar

from playwright.async_api import (
    Error as PlaywrightError,
    Locator,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from uiscout.browser.page_capability import PageCapability
from uiscout.errors import PageUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CLOSED_MARKERS = ("has been closed", "Target closed", "Browser closed")

_SCOPE_SCRIPT = """
(el, keywords) => {
    let current = el.parentElement;
    while (current) {
        if (current.id) return '#' + CSS.escape(current.id);
        const match = Array.from(current.classList).find(
            (c) => keywords.some((k) => c.includes(k))
        );
        if (match) return '.' + CSS.escape(match);
        current = current.parentElement;
    }
    return null;
}
"""

_PATH_SCRIPT = """
(el, keywords) => {
    const isScope = (node) => keywords !== null && (
        !!node.id ||
        Array.from(node.classList).some((c) => keywords.some((k) => c.includes(k)))
    );
    const steps = [];
    let current = el;
    while (current.parentElement && current !== document.body) {
        const parent = current.parentElement;
        const sameTag = Array.from(parent.children).filter(
            (c) => c.tagName === current.tagName
        );
        const position = sameTag.indexOf(current) + 1;
        steps.unshift(`${current.tagName.toLowerCase()}:nth-of-type(${position})`);
        if (isScope(parent)) break;
        current = parent;
    }
    return steps;
}
"""

_VALUE_SCRIPT = "el => ('value' in el) ? el.value : el.getAttribute('value')"


class PlaywrightPage(PageCapability):
    """Page capability backed by a Playwright page.

    Example:
        >>> async with PlaywrightManager() as manager:
        ...     page = await manager.open_page("https://example.com")
        ...     capability = PlaywrightPage(page)
        ...     buttons = await capability.locate_all("button")
    """

    def __init__(self, page: Page, action_timeout_ms: int = 5000):
        """Wrap a Playwright page.

        Args:
            page: Playwright page instance
            action_timeout_ms: Timeout for reads and interactions
        """
        self.page = page
        self.action_timeout_ms = action_timeout_ms

    def _is_closed_error(self, error: Exception) -> bool:
        if self.page.is_closed():
            return True
        message = str(error)
        return any(marker in message for marker in _CLOSED_MARKERS)

    async def _guard(self, awaitable: Awaitable[T]) -> T:
        """Await a Playwright call, translating closed-page errors."""
        try:
            return await awaitable
        except PlaywrightTimeoutError:
            raise
        except PlaywrightError as e:
            if self._is_closed_error(e):
                logger.error(f"Page is no longer available: {e}")
                raise PageUnavailableError(str(e)) from e
            raise

    # Queries

    async def locate_all(self, selector: str) -> List[Locator]:
        return await self._guard(self.page.locator(selector).all())

    async def first(self, selector: str) -> Optional[Locator]:
        locator = self.page.locator(selector)
        if await self._guard(locator.count()) == 0:
            return None
        return locator.first

    async def count(self, selector: str) -> int:
        return await self._guard(self.page.locator(selector).count())

    async def locate_within(self, handle: Locator, selector: str) -> List[Locator]:
        return await self._guard(handle.locator(selector).all())

    # Reads

    async def get_attribute(self, handle: Locator, name: str) -> Optional[str]:
        return await self._guard(
            handle.get_attribute(name, timeout=self.action_timeout_ms)
        )

    async def text_content(self, handle: Locator) -> Optional[str]:
        return await self._guard(handle.text_content(timeout=self.action_timeout_ms))

    async def all_text_contents(self, handle: Locator, selector: str) -> List[str]:
        return await self._guard(handle.locator(selector).all_text_contents())

    async def tag_name(self, handle: Locator) -> str:
        return await self._guard(
            handle.evaluate(
                "el => el.tagName.toLowerCase()", timeout=self.action_timeout_ms
            )
        )

    async def structural_scope(
        self, handle: Locator, keywords: Sequence[str]
    ) -> Optional[str]:
        return await self._guard(
            handle.evaluate(
                _SCOPE_SCRIPT, list(keywords), timeout=self.action_timeout_ms
            )
        )

    async def sibling_path(
        self, handle: Locator, keywords: Optional[Sequence[str]]
    ) -> List[str]:
        arg = list(keywords) if keywords is not None else None
        return await self._guard(
            handle.evaluate(_PATH_SCRIPT, arg, timeout=self.action_timeout_ms)
        )

    async def value_of(self, handle: Locator) -> Optional[str]:
        return await self._guard(
            handle.evaluate(_VALUE_SCRIPT, timeout=self.action_timeout_ms)
        )

    # Checks

    async def is_visible(self, handle: Locator, timeout_ms: int) -> bool:
        if timeout_ms <= 0:
            return await self._guard(handle.is_visible())
        try:
            await self._guard(handle.wait_for(state="visible", timeout=timeout_ms))
            return True
        except PlaywrightTimeoutError:
            return False

    async def first_visible(self, selector: str, timeout_ms: int) -> Optional[Locator]:
        locator = self.page.locator(selector).first
        if await self.is_visible(locator, timeout_ms):
            return locator
        return None

    async def is_enabled(self, handle: Locator, timeout_ms: int) -> bool:
        try:
            return await self._guard(handle.is_enabled(timeout=timeout_ms or None))
        except PlaywrightTimeoutError:
            return False

    async def is_checked(self, handle: Locator) -> bool:
        return await self._guard(handle.is_checked(timeout=self.action_timeout_ms))

    # Interactions

    async def click(self, handle: Locator) -> None:
        await self._guard(handle.click(timeout=self.action_timeout_ms))

    async def fill(self, handle: Locator, value: str) -> None:
        await self._guard(handle.fill(value, timeout=self.action_timeout_ms))

    async def hover(self, handle: Locator) -> None:
        await self._guard(handle.hover(timeout=self.action_timeout_ms))

    async def focus(self, handle: Locator) -> None:
        await self._guard(handle.focus(timeout=self.action_timeout_ms))

    async def select(self, handle: Locator, value: str) -> None:
        await self._guard(handle.select_option(value, timeout=self.action_timeout_ms))

    async def check(self, handle: Locator) -> None:
        await self._guard(handle.check(timeout=self.action_timeout_ms))

    async def uncheck(self, handle: Locator) -> None:
        await self._guard(handle.uncheck(timeout=self.action_timeout_ms))

    async def press(self, handle: Locator, key: str) -> None:
        await self._guard(handle.press(key, timeout=self.action_timeout_ms))

    async def screenshot(self, handle: Locator, path: str) -> None:
        await self._guard(handle.screenshot(path=path, timeout=self.action_timeout_ms))

    async def take_screenshot(self, path: str) -> None:
        await self._guard(self.page.screenshot(path=path, full_page=True))
        logger.debug(f"Captured screenshot to {path}")

    # Page level

    async def wait_for_timeout(self, ms: int) -> None:
        await self._guard(self.page.wait_for_timeout(ms))

    async def url(self) -> str:
        return self.page.url

    async def title(self) -> str:
        return await self._guard(self.page.title())
