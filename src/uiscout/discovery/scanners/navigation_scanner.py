"""Menu, dropdown and tab discovery."""

import logging
from typing import Any, List, Optional, Set

from uiscout.discovery.scanners.base import ElementScanner, FeatureCategory
from uiscout.errors import PageUnavailableError
from uiscout.models.feature_models import Capability, DiscoveredFeature, FeatureType

logger = logging.getLogger(__name__)


class NavigationScanner(ElementScanner):
    """Discover navigation elements: menus with their items, dropdowns and tabs."""

    CATEGORIES = (
        FeatureCategory.MENUS,
        FeatureCategory.DROPDOWNS,
        FeatureCategory.TABS,
    )

    MENU_PATTERNS = [
        '[role="menu"]',
        '[role="menubar"]',
        '[role="menuitem"]',
        "nav",
        ".menu",
        ".navbar",
        '[class*="menu"]',
        '[class*="nav"]',
        "ul.dropdown",
        ".dropdown-menu",
    ]

    MENU_ITEM_PATTERNS = ["li", "a", '[role="menuitem"]', ".menu-item", '[class*="item"]']

    DROPDOWN_PATTERNS = [
        "select",
        '[role="combobox"]',
        '[role="listbox"]',
        ".dropdown",
        '[class*="dropdown"]',
        ".select",
        '[class*="select"]',
        '[aria-haspopup="listbox"]',
    ]

    TAB_PATTERNS = [
        '[role="tablist"]',
        '[role="tab"]',
        ".tabs",
        '[class*="tab"]',
        ".nav-tabs",
        '[data-toggle="tab"]',
    ]

    MAX_NAME_LENGTH = 50
    MAX_SUMMARY_LENGTH = 100

    async def discover_category(
        self, category: FeatureCategory, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        if category == FeatureCategory.MENUS:
            return await self.discover_menus(visited)
        if category == FeatureCategory.DROPDOWNS:
            return await self.discover_dropdowns(visited)
        if category == FeatureCategory.TABS:
            return await self.discover_tabs(visited)
        raise ValueError(f"NavigationScanner does not produce {category.value}")

    async def discover_menus(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover menus and navigation bars, with their items as children."""
        return await self._scan_patterns(
            self.MENU_PATTERNS, self._extract_menu, visited, "menus"
        )

    async def discover_dropdowns(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover selects, comboboxes and custom dropdowns."""
        return await self._scan_patterns(
            self.DROPDOWN_PATTERNS, self._extract_dropdown, visited, "dropdowns"
        )

    async def discover_tabs(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover tab lists and tabs."""
        return await self._scan_patterns(
            self.TAB_PATTERNS, self._extract_tabs, visited, "tab groups"
        )

    async def _extract_menu(self, element: Any, selector: str) -> DiscoveredFeature:
        text = await self._text(element)
        items = await self._discover_menu_items(element)
        logger.debug(f"Menu {selector} has {len(items)} items")

        return DiscoveredFeature(
            name=text[: self.MAX_NAME_LENGTH] or "Menu",
            type=FeatureType.MENU,
            selector=selector,
            text=text,
            children=items,
            actions=[Capability.CLICK, Capability.HOVER],
        )

    async def _discover_menu_items(self, menu: Any) -> List[DiscoveredFeature]:
        items: List[DiscoveredFeature] = []
        seen: Set[str] = set()

        for pattern in self.MENU_ITEM_PATTERNS:
            try:
                elements = await self.page.locate_within(menu, pattern)
            except PageUnavailableError:
                raise
            except Exception as e:
                logger.debug(f"Skipping menu item pattern {pattern}: {e}")
                continue

            for element in elements:
                try:
                    selector = await self.resolver.resolve(element)
                    if selector in seen:
                        continue
                    text = await self._text(element)
                    href = await self._attribute(element, "href")
                    items.append(
                        DiscoveredFeature(
                            name=text or "Menu Item",
                            type=FeatureType.OTHER,
                            selector=selector,
                            text=text,
                            attributes={"href": href},
                            actions=[Capability.CLICK],
                        )
                    )
                    seen.add(selector)
                except PageUnavailableError:
                    raise
                except Exception as e:
                    logger.debug(f"Skipping menu item: {e}")

        return items

    async def _extract_dropdown(self, element: Any, selector: str) -> DiscoveredFeature:
        label = (await self.resolver.find_label_for_input(element)).strip()
        options = await self.page.all_text_contents(element, 'option, [role="option"]')
        options = [option.strip() for option in options]
        logger.debug(f"Dropdown {selector} has {len(options)} options")

        return DiscoveredFeature(
            name=label or "Dropdown",
            type=FeatureType.DROPDOWN,
            selector=selector,
            attributes={"options": ", ".join(options)[: self.MAX_SUMMARY_LENGTH]},
            actions=[Capability.SELECT, Capability.CLICK],
        )

    async def _extract_tabs(self, element: Any, selector: str) -> DiscoveredFeature:
        tab_texts = await self.page.all_text_contents(element, '[role="tab"], li, a')
        tab_texts = [text.strip() for text in tab_texts]

        return DiscoveredFeature(
            name="Tab Navigation",
            type=FeatureType.TAB,
            selector=selector,
            attributes={"tabs": ", ".join(tab_texts)[: self.MAX_SUMMARY_LENGTH]},
            actions=[Capability.CLICK],
        )
