"""Unique selector resolution for located elements.

This module provides the SelectorResolver class which turns an element handle
into a locator expression that matches exactly that element, using a fixed
priority chain from the most stable attribute to a structural fallback.

PATTERN: Try tiers in priority order, verify non-trivial tiers by count
CRITICAL: Resolution is deterministic. The same element in the same DOM state
always resolves to the same string.
"""

import logging
from typing import Any, Optional

from uiscout.browser.page_capability import PageCapability
from uiscout.errors import PageUnavailableError

logger = logging.getLogger(__name__)


class SelectorResolver:
    """Resolve and validate unique selectors for elements.

    Tiers, each attempted only when the previous yields nothing or is not
    unique:
    1. data-testid - explicitly for testing
    2. id
    3. full class list - accepted only when it matches exactly one element
    4. role + aria-label
    5. text content - buttons and links only, verified unique
    6. structural - nearest id/keyword ancestor plus a sibling nth-of-type
       path, or a body-anchored path; verified unique
    7. title, aria-label, short text, then tag:first-of-type
    """

    # Ancestor class keywords that mark a usable structural scope
    STRUCTURAL_KEYWORDS = ("nav", "menu", "toolbar", "panel", "container", "header")

    # Tags eligible for the text tier
    TEXT_TAGS = ("button", "a")

    MAX_TEXT_LENGTH = 50
    SHORT_TEXT_LENGTH = 20
    SHORT_TEXT_THRESHOLD = 10
    LAST_RESORT_TEXT_LENGTH = 30

    DEFAULT_FALLBACK = "button:first-of-type"

    def __init__(self, page: PageCapability):
        """Initialize the resolver.

        Args:
            page: Page capability used for attribute reads and count queries
        """
        self.page = page

    async def resolve(self, element: Any) -> str:
        """Resolve the most stable unique selector for an element.

        Args:
            element: Element handle produced by the page capability

        Returns:
            Selector string

        Raises:
            PageUnavailableError: If the page went away during resolution

        Example:
            >>> selector = await resolver.resolve(handle)
            >>> selector
            '[data-testid="submit-button"]'
        """
        tag: Optional[str] = None
        try:
            testid = await self.page.get_attribute(element, "data-testid")
            if testid:
                return f'[data-testid="{self._escape_attribute_value(testid)}"]'

            element_id = await self.page.get_attribute(element, "id")
            if element_id:
                return f"#{self._escape_css_selector(element_id)}"

            selector = await self._class_selector(element)
            if selector:
                return selector

            selector = await self._role_selector(element)
            if selector:
                return selector

            tag = await self.page.tag_name(element)

            selector = await self._text_selector(element, tag)
            if selector:
                return selector

            selector = await self._structural_selector(element)
            if selector:
                return selector

            return await self._last_resort_selector(element, tag)

        except PageUnavailableError:
            raise
        except Exception as e:
            fallback = f"{tag}:first-of-type" if tag else self.DEFAULT_FALLBACK
            logger.debug(f"Selector resolution failed, using {fallback}: {e}")
            return fallback

    async def _class_selector(self, element: Any) -> Optional[str]:
        class_name = await self.page.get_attribute(element, "class")
        if not class_name:
            return None

        # Skip utility classes with pseudo-state prefixes (hover:, md:)
        classes = [c for c in class_name.split(" ") if c and ":" not in c]
        if not classes:
            return None

        selector = "." + ".".join(self._escape_css_selector(c) for c in classes)
        count = await self.page.count(selector)
        if count == 1:
            return selector

        logger.debug(f"Class selector matches {count} elements: {selector}")
        return None

    async def _role_selector(self, element: Any) -> Optional[str]:
        role = await self.page.get_attribute(element, "role")
        aria_label = await self.page.get_attribute(element, "aria-label")
        if role and aria_label:
            return (
                f'[role="{self._escape_attribute_value(role)}"]'
                f'[aria-label="{self._escape_attribute_value(aria_label)}"]'
            )
        return None

    async def _text_selector(self, element: Any, tag: str) -> Optional[str]:
        if tag not in self.TEXT_TAGS:
            return None

        text = await self.page.text_content(element)
        clean_text = (text or "").strip()
        if not clean_text:
            return None

        if len(clean_text) <= self.MAX_TEXT_LENGTH:
            selector = self._has_text(tag, clean_text)
            if await self.page.count(selector) == 1:
                return selector

        if len(clean_text) > self.SHORT_TEXT_THRESHOLD:
            selector = self._has_text(tag, clean_text[: self.SHORT_TEXT_LENGTH])
            if await self.page.count(selector) == 1:
                return selector

        return None

    async def _structural_selector(self, element: Any) -> Optional[str]:
        scope = await self.page.structural_scope(element, self.STRUCTURAL_KEYWORDS)
        if not scope:
            return None

        steps = await self.page.sibling_path(element, self.STRUCTURAL_KEYWORDS)
        if steps:
            selector = f"{scope} > {' > '.join(steps)}"
            if await self.page.count(selector) == 1:
                return selector
            logger.debug(f"Scoped selector not unique: {selector}")

        # Scope class shared by several containers; anchor at body instead
        steps = await self.page.sibling_path(element, None)
        if steps:
            selector = f"body > {' > '.join(steps)}"
            if await self.page.count(selector) == 1:
                return selector

        return None

    async def _last_resort_selector(self, element: Any, tag: str) -> str:
        title = await self.page.get_attribute(element, "title")
        if title:
            return f'{tag}[title="{self._escape_attribute_value(title)}"]'

        aria_label = await self.page.get_attribute(element, "aria-label")
        if aria_label:
            return f'{tag}[aria-label="{self._escape_attribute_value(aria_label)}"]'

        text = await self.page.text_content(element)
        if text and len(text) < self.LAST_RESORT_TEXT_LENGTH and text.strip():
            return self._has_text(tag, text.strip())

        return f"{tag}:first-of-type"

    async def find_label_for_input(self, element: Any) -> str:
        """Find the human readable label of a form control.

        Checks, in order: ``label[for=id]``, an ancestor label, aria-label,
        then a preceding sibling label.

        Args:
            element: Form control handle

        Returns:
            Label text, or an empty string when none is found
        """
        try:
            element_id = await self.page.get_attribute(element, "id")
            if element_id:
                label = await self.page.first(
                    f'label[for="{self._escape_attribute_value(element_id)}"]'
                )
                if label is not None:
                    text = await self.page.text_content(label)
                    if text:
                        return text

            ancestors = await self.page.locate_within(element, "xpath=ancestor::label")
            if ancestors:
                text = await self.page.text_content(ancestors[0])
                if text:
                    return text

            aria_label = await self.page.get_attribute(element, "aria-label")
            if aria_label:
                return aria_label

            siblings = await self.page.locate_within(
                element, "xpath=preceding-sibling::label"
            )
            if siblings:
                text = await self.page.text_content(siblings[0])
                if text:
                    return text

            return ""
        except PageUnavailableError:
            raise
        except Exception as e:
            logger.debug(f"Label lookup failed: {e}")
            return ""

    def _has_text(self, tag: str, text: str) -> str:
        return f'{tag}:has-text("{self._escape_attribute_value(text)}")'

    def _escape_attribute_value(self, value: str) -> str:
        """Escape a value placed inside double quotes."""
        return value.replace("\\", "\\\\").replace('"', '\\"')

    def _escape_css_selector(self, value: str) -> str:
        """Escape special characters in a CSS identifier.

        Args:
            value: Identifier to escape

        Returns:
            Escaped identifier
        """
        special_chars = r'!"#$%&\'()*+,./:;<=>?@[\]^`{|}~'

        return "".join(f"\\{char}" if char in special_chars else char for char in value)
