"""Button discovery and tooltip probing."""

import logging
from typing import Any, List, Optional, Set

from uiscout.discovery.scanners.base import ElementScanner, FeatureCategory
from uiscout.errors import PageUnavailableError
from uiscout.models.feature_models import Capability, DiscoveredFeature, FeatureType

logger = logging.getLogger(__name__)


class ButtonScanner(ElementScanner):
    """Discover clickable button-like elements."""

    CATEGORIES = (FeatureCategory.BUTTONS,)

    BUTTON_PATTERNS = [
        "button",
        '[role="button"]',
        "a.btn",
        "a.button",
        '[class*="button"]',
        '[class*="btn"]',
        'input[type="button"]',
        'input[type="submit"]',
        "[onclick]",
    ]

    TOOLTIP_SELECTOR = '[role="tooltip"], .tooltip, [class*="tooltip"]'

    async def discover_category(
        self, category: FeatureCategory, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        if category != FeatureCategory.BUTTONS:
            raise ValueError(f"ButtonScanner does not produce {category.value}")
        return await self.discover_buttons(visited)

    async def discover_buttons(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover visible buttons.

        Args:
            visited: Selectors already emitted in this session

        Returns:
            Button features in pattern order
        """
        return await self._scan_patterns(
            self.BUTTON_PATTERNS, self._extract_button, visited, "buttons"
        )

    async def _extract_button(self, element: Any, selector: str) -> DiscoveredFeature:
        text = await self._text(element)
        title = await self._attribute(element, "title")
        aria_label = await self._attribute(element, "aria-label")
        class_name = await self._attribute(element, "class")

        # Title is preferred over aria-label for naming
        return DiscoveredFeature(
            name=text or title or aria_label or "Unnamed Button",
            type=FeatureType.BUTTON,
            selector=selector,
            text=text,
            attributes={"title": title, "aria-label": aria_label, "class": class_name},
            actions=[Capability.CLICK, Capability.HOVER, Capability.FOCUS],
        )

    async def discover_tooltips(self, buttons: List[DiscoveredFeature]) -> None:
        """Hover buttons and record any tooltip they reveal.

        Only the first ``config.tooltip_limit`` buttons are probed. Found text is
        stored in ``attributes["tooltip"]``.

        Args:
            buttons: Button features, mutated in place
        """
        logger.info("Discovering button tooltips...")

        for button in buttons[: self.config.tooltip_limit]:
            try:
                element = await self.page.first(button.selector)
                if element is None or not await self.page.is_visible(element, 0):
                    continue

                await self.page.hover(element)

                tooltip = await self.page.first_visible(
                    self.TOOLTIP_SELECTOR, self.config.tooltip_timeout_ms
                )
                if tooltip is not None:
                    tooltip_text = await self.page.text_content(tooltip) or ""
                    button.attributes["tooltip"] = tooltip_text
                    logger.info(f"Found tooltip for {button.name}: {tooltip_text}")
            except PageUnavailableError:
                raise
            except Exception as e:
                logger.debug(f"Tooltip probe failed for {button.selector}: {e}")
