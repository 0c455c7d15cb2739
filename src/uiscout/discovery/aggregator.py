"""Discovery fan-out, merge and secondary discovery passes.

This module provides the DiscoveryAggregator class which runs the four
category scanners concurrently, merges their output in a fixed category
precedence order and deduplicates it by selector.

PATTERN: Fan out with asyncio.gather, merge strictly sequentially
CRITICAL: The merge order decides which category keeps a contested selector.
Completion order of the scanners never affects the result.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Set, Tuple

from uiscout.browser.page_capability import PageCapability
from uiscout.config.settings import ScoutConfig
from uiscout.discovery.scanners import (
    CATEGORY_PRECEDENCE,
    ButtonScanner,
    ComponentScanner,
    ElementScanner,
    FeatureCategory,
    InputScanner,
    NavigationScanner,
)
from uiscout.discovery.selector_resolver import SelectorResolver
from uiscout.errors import PageUnavailableError
from uiscout.models.feature_models import Capability, DiscoveredFeature, FeatureType

logger = logging.getLogger(__name__)


class DiscoveryAggregator:
    """Run all scanners and produce one deduplicated feature catalogue.

    Example:
        >>> aggregator = DiscoveryAggregator(page)
        >>> features = await aggregator.discover_all()
        >>> features += await aggregator.discover_dynamic(features)
    """

    # Hover-revealed containers probed after hovering a navigation element
    REVEAL_SELECTORS = [
        ".dropdown-menu:visible",
        ".submenu:visible",
        '[class*="popup"]:visible',
        '[class*="overlay"]:visible',
        '[class*="modal"]:visible',
    ]

    NAV_KEYWORD = "nav"

    # (selector, feature type) pairs for the latency-bounded essentials pass
    ESSENTIAL_SELECTORS: List[Tuple[str, FeatureType]] = [
        ("button", FeatureType.BUTTON),
        ("input", FeatureType.INPUT),
        ("select", FeatureType.DROPDOWN),
        ("textarea", FeatureType.INPUT),
        ("a[href]", FeatureType.OTHER),
        ('[role="button"]', FeatureType.BUTTON),
    ]

    ESSENTIAL_ACTIONS = {
        FeatureType.BUTTON: [Capability.CLICK, Capability.HOVER, Capability.FOCUS],
        FeatureType.INPUT: [Capability.FILL, Capability.CLEAR, Capability.FOCUS, Capability.BLUR],
        FeatureType.DROPDOWN: [Capability.SELECT, Capability.CLICK],
        FeatureType.OTHER: [Capability.CLICK],
    }

    MAX_NAME_LENGTH = 50

    def __init__(
        self,
        page: PageCapability,
        config: Optional[ScoutConfig] = None,
        scanners: Optional[List[ElementScanner]] = None,
    ):
        """Initialize the aggregator.

        Args:
            page: Page capability shared by all scanners
            config: Scout configuration
            scanners: Override the default four scanners
        """
        self.page = page
        self.config = config or ScoutConfig()
        self.resolver = SelectorResolver(page)

        if scanners is None:
            self.button_scanner = ButtonScanner(page, self.config, self.resolver)
            scanners = [
                self.button_scanner,
                InputScanner(page, self.config, self.resolver),
                NavigationScanner(page, self.config, self.resolver),
                ComponentScanner(page, self.config, self.resolver),
            ]
        else:
            self.button_scanner = next(
                (s for s in scanners if isinstance(s, ButtonScanner)),
                ButtonScanner(page, self.config, self.resolver),
            )
        self.scanners = scanners

    async def discover_all(self) -> List[DiscoveredFeature]:
        """Discover every feature category and merge the results.

        Returns:
            Features in category precedence order, unique by selector

        Raises:
            PageUnavailableError: If a scanner failed because the page went away
            Exception: The first scanner failure, unless
                ``config.isolate_scanner_failures`` is set
        """
        logger.info("Starting comprehensive feature discovery")

        if self.config.isolate_scanner_failures:
            outcomes = await asyncio.gather(
                *(scanner.scan() for scanner in self.scanners), return_exceptions=True
            )
            scan_results = []
            for scanner, outcome in zip(self.scanners, outcomes):
                if isinstance(outcome, BaseException):
                    if not isinstance(outcome, Exception):
                        raise outcome
                    logger.warning(
                        f"{type(scanner).__name__} failed, continuing without it: {outcome}"
                    )
                    continue
                scan_results.append(outcome)
        else:
            scan_results = await asyncio.gather(
                *(scanner.scan() for scanner in self.scanners)
            )

        by_category: Dict[FeatureCategory, List[DiscoveredFeature]] = {}
        for result in scan_results:
            for category, features in result.items():
                by_category.setdefault(category, []).extend(features)

        features = self.merge(by_category)
        logger.info(f"Discovery complete: {len(features)} features")
        return features

    @staticmethod
    def merge(
        by_category: Dict[FeatureCategory, List[DiscoveredFeature]],
    ) -> List[DiscoveredFeature]:
        """Merge category results in precedence order.

        Features missing a name, type or selector are dropped, as is any
        feature whose selector was already accepted from an earlier category.

        Args:
            by_category: Scanner output keyed by category

        Returns:
            Merged features
        """
        merged: List[DiscoveredFeature] = []
        seen_selectors: Set[str] = set()

        for category in CATEGORY_PRECEDENCE:
            for feature in by_category.get(category, []):
                if not feature.name or not feature.type or not feature.selector:
                    logger.debug(f"Dropping incomplete {category.value} feature")
                    continue
                if feature.selector in seen_selectors:
                    logger.debug(
                        f"Dropping duplicate selector from {category.value}: "
                        f"{feature.selector}"
                    )
                    continue
                seen_selectors.add(feature.selector)
                merged.append(feature)

        return merged

    async def discover_dynamic(
        self, features: List[DiscoveredFeature]
    ) -> List[DiscoveredFeature]:
        """Reveal features that only appear after interaction.

        Probes tooltips on the button features (mutating them in place), then
        hovers up to ``config.dynamic_hover_limit`` navigation-like features
        and probes the reveal selectors for newly visible containers.

        Args:
            features: Already discovered features

        Returns:
            New ``other`` features, none sharing a selector with the input

        Raises:
            PageUnavailableError: If the page went away
        """
        logger.info("Discovering dynamic features through interaction")

        buttons = [f for f in features if f.type == FeatureType.BUTTON]
        await self.button_scanner.discover_tooltips(buttons)

        seen_selectors: Set[str] = {f.selector for f in features}
        dynamic: List[DiscoveredFeature] = []

        nav_items = [f for f in features if self._is_navigation(f)]
        for nav in nav_items[: self.config.dynamic_hover_limit]:
            try:
                element = await self.page.first(nav.selector)
                if element is None or not await self.page.is_visible(element, 0):
                    continue

                await self.page.hover(element)
                await self.page.wait_for_timeout(self.config.dynamic_settle_ms)

                for feature in await self._probe_revealed():
                    if feature.selector in seen_selectors:
                        continue
                    seen_selectors.add(feature.selector)
                    dynamic.append(feature)
            except PageUnavailableError:
                raise
            except Exception as e:
                logger.debug(f"Dynamic probe failed for {nav.selector}: {e}")

        logger.info(f"Dynamic discovery found {len(dynamic)} features")
        return dynamic

    def _is_navigation(self, feature: DiscoveredFeature) -> bool:
        return (
            feature.type == FeatureType.MENU
            or self.NAV_KEYWORD in feature.selector
            or self.NAV_KEYWORD in feature.attributes.get("class", "")
        )

    async def _probe_revealed(self) -> List[DiscoveredFeature]:
        discovered: List[DiscoveredFeature] = []

        for probe in self.REVEAL_SELECTORS:
            try:
                element = await self.page.first_visible(
                    probe, self.config.tooltip_timeout_ms
                )
                if element is None:
                    continue

                text = (await self.page.text_content(element) or "").strip()
                selector = await self.resolver.resolve(element)
                logger.info(f"Discovered dynamic element: {text[: self.MAX_NAME_LENGTH]}")
                discovered.append(
                    DiscoveredFeature(
                        name=text[: self.MAX_NAME_LENGTH] or "Dynamic Element",
                        type=FeatureType.OTHER,
                        selector=selector,
                        text=text,
                        attributes={"revealed_by": probe},
                        actions=[Capability.CLICK, Capability.SCREENSHOT],
                    )
                )
            except PageUnavailableError:
                raise
            except Exception as e:
                logger.debug(f"Reveal probe {probe} failed: {e}")

        return discovered

    async def discover_essentials(self) -> List[DiscoveredFeature]:
        """Latency-bounded discovery of the most common interactive elements.

        Processes at most ``config.essentials_per_selector`` elements per
        selector and scores each feature: 1.0 when backed by data-testid, 0.9
        by id, 0.7 otherwise.

        Returns:
            Features sorted by descending confidence (stable)
        """
        logger.info("Starting essentials discovery")
        features: List[DiscoveredFeature] = []
        seen_selectors: Set[str] = set()

        for pattern, feature_type in self.ESSENTIAL_SELECTORS:
            try:
                elements = await self.page.locate_all(pattern)
            except PageUnavailableError:
                raise
            except Exception as e:
                logger.debug(f"Skipping essentials pattern {pattern}: {e}")
                continue

            for element in elements[: self.config.essentials_per_selector]:
                try:
                    feature = await self._essential_feature(element, feature_type)
                except PageUnavailableError:
                    raise
                except Exception as e:
                    logger.debug(f"Skipping essential element: {e}")
                    continue

                if feature is None or feature.selector in seen_selectors:
                    continue
                seen_selectors.add(feature.selector)
                features.append(feature)

        features.sort(key=lambda f: f.confidence or 0.0, reverse=True)
        logger.info(f"Essentials discovery found {len(features)} features")
        return features

    async def _essential_feature(
        self, element, feature_type: FeatureType
    ) -> Optional[DiscoveredFeature]:
        if not await self.page.is_visible(element, self.config.visibility_timeout_ms):
            return None

        selector = await self.resolver.resolve(element)
        testid = await self.page.get_attribute(element, "data-testid")
        element_id = await self.page.get_attribute(element, "id")
        aria_label = await self.page.get_attribute(element, "aria-label")
        text = (await self.page.text_content(element) or "").strip()
        input_type = None
        if feature_type == FeatureType.INPUT:
            input_type = await self.page.get_attribute(element, "type") or "text"

        if testid:
            confidence = 1.0
        elif element_id:
            confidence = 0.9
        else:
            confidence = 0.7

        attributes = {"id": element_id or ""}
        actions = self.ESSENTIAL_ACTIONS[feature_type]
        if input_type:
            attributes["type"] = input_type
            actions = InputScanner.actions_for(input_type)

        return DiscoveredFeature(
            name=text[: self.MAX_NAME_LENGTH]
            or aria_label
            or testid
            or element_id
            or f"{feature_type.value.title()} Element",
            type=feature_type,
            selector=selector,
            text=text or None,
            input_type=input_type,
            attributes=attributes,
            actions=actions,
            confidence=confidence,
        )
