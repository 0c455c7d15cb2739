"""Panel, chart, modal, table and custom component discovery."""

import logging
from typing import Any, List, Optional, Set

from uiscout.discovery.scanners.base import ElementScanner, FeatureCategory
from uiscout.errors import PageUnavailableError
from uiscout.models.feature_models import Capability, DiscoveredFeature, FeatureType

logger = logging.getLogger(__name__)


class ComponentScanner(ElementScanner):
    """Discover composite UI components.

    Every component starts from the same generic record (named by id, with
    ``screenshot`` and ``hover``). Category extractors then enrich it with
    headings, table structure or test ids.
    """

    CATEGORIES = (
        FeatureCategory.PANELS,
        FeatureCategory.CHARTS,
        FeatureCategory.MODALS,
        FeatureCategory.TABLES,
        FeatureCategory.CUSTOM_COMPONENTS,
    )

    CHART_PATTERNS = [
        "canvas",
        "svg.chart",
        '[class*="chart"]',
        '[class*="graph"]',
        '[id*="chart"]',
        '[id*="graph"]',
        ".tradingview-widget-container",
        'iframe[src*="tradingview"]',
        "[data-chart]",
        ".highcharts-container",
    ]

    PANEL_PATTERNS = [
        '[role="region"]',
        ".panel",
        ".card",
        ".widget",
        '[class*="panel"]',
        '[class*="card"]',
        '[class*="widget"]',
        "aside",
        "section",
        '[class*="sidebar"]',
        '[class*="drawer"]',
    ]

    MODAL_PATTERNS = [
        '[role="dialog"]',
        ".modal",
        ".dialog",
        '[class*="modal"]',
        '[class*="dialog"]',
        ".popup",
        '[class*="popup"]',
        ".overlay",
        '[aria-modal="true"]',
    ]

    TABLE_PATTERNS = [
        "table",
        '[role="table"]',
        '[role="grid"]',
        ".table",
        '[class*="table"]',
        ".grid",
        '[class*="grid"]',
        ".data-table",
        ".list-view",
    ]

    CUSTOM_PATTERNS = [
        "[data-testid]",
        "[data-test]",
        "[data-cy]",
        "[data-component]",
        "[data-widget]",
        '*[class*="component"]',
        '*[class*="widget"]',
        '*[id*="component"]',
        '*[id*="widget"]',
    ]

    PANEL_HEADING_SELECTOR = 'h1, h2, h3, h4, h5, h6, [class*="title"], [class*="header"]'
    MODAL_HEADING_SELECTOR = 'h1, h2, h3, h4, h5, h6, [class*="title"]'

    MAX_NAME_LENGTH = 50

    async def discover_category(
        self, category: FeatureCategory, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        if category == FeatureCategory.PANELS:
            return await self.discover_panels(visited)
        if category == FeatureCategory.CHARTS:
            return await self.discover_charts(visited)
        if category == FeatureCategory.MODALS:
            return await self.discover_modals(visited)
        if category == FeatureCategory.TABLES:
            return await self.discover_tables(visited)
        if category == FeatureCategory.CUSTOM_COMPONENTS:
            return await self.discover_custom_components(visited)
        raise ValueError(f"ComponentScanner does not produce {category.value}")

    async def discover_charts(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover canvases, SVG charts and embedded chart widgets."""

        async def extract(element: Any, selector: str) -> DiscoveredFeature:
            return await self._component(
                element, selector, FeatureType.CHART, "Chart Component"
            )

        return await self._scan_patterns(self.CHART_PATTERNS, extract, visited, "charts")

    async def discover_panels(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover regions, cards and sidebars, named by their first heading."""

        async def extract(element: Any, selector: str) -> DiscoveredFeature:
            feature = await self._component(element, selector, FeatureType.PANEL, "Panel")
            await self._apply_heading(feature, element, self.PANEL_HEADING_SELECTOR)
            return feature

        return await self._scan_patterns(self.PANEL_PATTERNS, extract, visited, "panels")

    async def discover_modals(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover dialogs and overlays, named by their first heading."""

        async def extract(element: Any, selector: str) -> DiscoveredFeature:
            feature = await self._component(element, selector, FeatureType.MODAL, "Modal")
            await self._apply_heading(feature, element, self.MODAL_HEADING_SELECTOR)
            feature.actions = [Capability.SCREENSHOT.value, Capability.CLOSE.value]
            return feature

        return await self._scan_patterns(self.MODAL_PATTERNS, extract, visited, "modals")

    async def discover_tables(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover tables and grids with their headers and row counts."""

        async def extract(element: Any, selector: str) -> DiscoveredFeature:
            feature = await self._component(element, selector, FeatureType.TABLE, "Table")
            try:
                headers = await self.page.all_text_contents(
                    element, 'th, [role="columnheader"]'
                )
                headers = [header.strip() for header in headers]
                rows = await self.page.locate_within(element, 'tr, [role="row"]')

                joined = ", ".join(headers)
                feature.name = joined[: self.MAX_NAME_LENGTH] or "Table"
                feature.attributes["headers"] = joined
                feature.attributes["rows"] = str(len(rows))
            except PageUnavailableError:
                raise
            except Exception as e:
                logger.debug(f"Keeping default table metadata for {selector}: {e}")
            return feature

        return await self._scan_patterns(self.TABLE_PATTERNS, extract, visited, "tables")

    async def discover_custom_components(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover elements tagged with test ids or component markers."""

        async def extract(element: Any, selector: str) -> DiscoveredFeature:
            feature = await self._component(
                element, selector, FeatureType.OTHER, "Custom Component"
            )
            testid = await self._attribute(element, "data-testid")
            feature.name = testid or feature.attributes["id"] or feature.name
            feature.actions = [
                Capability.CLICK.value,
                Capability.HOVER.value,
                Capability.SCREENSHOT.value,
            ]
            return feature

        return await self._scan_patterns(
            self.CUSTOM_PATTERNS, extract, visited, "custom components"
        )

    async def _component(
        self, element: Any, selector: str, feature_type: FeatureType, default_name: str
    ) -> DiscoveredFeature:
        element_id = await self._attribute(element, "id")
        class_name = await self._attribute(element, "class")

        return DiscoveredFeature(
            name=element_id or default_name,
            type=feature_type,
            selector=selector,
            attributes={"id": element_id, "class": class_name},
            actions=[Capability.SCREENSHOT, Capability.HOVER],
        )

    async def _apply_heading(
        self, feature: DiscoveredFeature, element: Any, heading_selector: str
    ) -> None:
        try:
            headings = await self.page.locate_within(element, heading_selector)
            if not headings:
                return
            heading = await self._text(headings[0])
        except PageUnavailableError:
            raise
        except Exception as e:
            logger.debug(f"No heading for {feature.selector}: {e}")
            return

        if heading:
            feature.name = heading
            feature.text = heading
