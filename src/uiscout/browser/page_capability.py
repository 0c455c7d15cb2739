"""Abstract page capability used by discovery and execution.

This module defines the narrow interface the scanners, the selector resolver
and the test executor use to talk to a rendered page. Element handles are
opaque: only the implementation that produced a handle knows what it is.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence


class PageCapability(ABC):
    """Abstract base class for page automation backends.

    Defines the query, read, check and interaction operations every backend
    must provide so discovery and execution never depend on a concrete
    automation library.

    CRITICAL: Implementations must raise PageUnavailableError when the page,
    its context or the browser has gone away. Any other exception is treated
    as an element-level or pattern-level failure by callers.
    """

    # Queries

    @abstractmethod
    async def locate_all(self, selector: str) -> List[Any]:
        """Return handles for every element matching selector.

        Raises:
            PageUnavailableError: If the page is gone
        """
        pass

    @abstractmethod
    async def first(self, selector: str) -> Optional[Any]:
        """Return a handle for the first element matching selector, or None."""
        pass

    @abstractmethod
    async def count(self, selector: str) -> int:
        """Return the number of elements matching selector."""
        pass

    @abstractmethod
    async def locate_within(self, handle: Any, selector: str) -> List[Any]:
        """Return handles for descendants of handle matching selector."""
        pass

    # Reads

    @abstractmethod
    async def get_attribute(self, handle: Any, name: str) -> Optional[str]:
        """Read an attribute, None when absent."""
        pass

    @abstractmethod
    async def text_content(self, handle: Any) -> Optional[str]:
        """Read the element's text content."""
        pass

    @abstractmethod
    async def all_text_contents(self, handle: Any, selector: str) -> List[str]:
        """Read text content of every descendant of handle matching selector."""
        pass

    @abstractmethod
    async def tag_name(self, handle: Any) -> str:
        """Return the lower-case tag name."""
        pass

    @abstractmethod
    async def structural_scope(
        self, handle: Any, keywords: Sequence[str]
    ) -> Optional[str]:
        """Find the nearest ancestor usable as a selector scope.

        Walks ancestors from the parent upward. The first ancestor carrying an
        id yields ``#id``; the first carrying a class containing one of
        keywords yields ``.class``.

        Args:
            handle: Element handle
            keywords: Structural class keywords (nav, menu, ...)

        Returns:
            Scope selector or None if no ancestor qualifies
        """
        pass

    @abstractmethod
    async def sibling_path(
        self, handle: Any, keywords: Optional[Sequence[str]]
    ) -> List[str]:
        """Build ``tag:nth-of-type(n)`` steps leading down to handle.

        Each step indexes a node among its same-tag siblings. The walk goes up
        from handle and stops below the ancestor ``structural_scope`` would pick
        for keywords, or below body when keywords is None.

        Args:
            handle: Element handle
            keywords: Structural class keywords, or None for a document path

        Returns:
            Steps ordered from the outermost node down to handle
        """
        pass

    @abstractmethod
    async def value_of(self, handle: Any) -> Optional[str]:
        """Current value of a form control (falls back to the value attribute)."""
        pass

    # Checks (bounded waits)

    @abstractmethod
    async def is_visible(self, handle: Any, timeout_ms: int) -> bool:
        """Wait up to timeout_ms for the element to be visible."""
        pass

    @abstractmethod
    async def first_visible(self, selector: str, timeout_ms: int) -> Optional[Any]:
        """Wait up to timeout_ms for the first match of selector to be visible.

        Returns:
            Handle of the first match, or None if it never became visible
        """
        pass

    @abstractmethod
    async def is_enabled(self, handle: Any, timeout_ms: int) -> bool:
        """Check whether the element is enabled, waiting up to timeout_ms."""
        pass

    @abstractmethod
    async def is_checked(self, handle: Any) -> bool:
        """Check whether a checkbox or radio is checked."""
        pass

    # Interactions

    @abstractmethod
    async def click(self, handle: Any) -> None:
        pass

    @abstractmethod
    async def fill(self, handle: Any, value: str) -> None:
        pass

    @abstractmethod
    async def hover(self, handle: Any) -> None:
        pass

    @abstractmethod
    async def focus(self, handle: Any) -> None:
        pass

    @abstractmethod
    async def select(self, handle: Any, value: str) -> None:
        """Select an option by value or label."""
        pass

    @abstractmethod
    async def check(self, handle: Any) -> None:
        pass

    @abstractmethod
    async def uncheck(self, handle: Any) -> None:
        pass

    @abstractmethod
    async def press(self, handle: Any, key: str) -> None:
        pass

    @abstractmethod
    async def screenshot(self, handle: Any, path: str) -> None:
        """Capture a screenshot of a single element to path."""
        pass

    @abstractmethod
    async def take_screenshot(self, path: str) -> None:
        """Capture a full-page screenshot to path."""
        pass

    # Page level

    @abstractmethod
    async def wait_for_timeout(self, ms: int) -> None:
        pass

    @abstractmethod
    async def url(self) -> str:
        pass

    @abstractmethod
    async def title(self) -> str:
        pass
