"""Base class for category element scanners.

A scanner applies an ordered list of candidate selector patterns for its
categories, keeps only visible elements, and turns each into a feature record.

CRITICAL: Pattern iteration and element analysis are sequential awaits. The
visited set passed between them is mutated without synchronization.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Set

from uiscout.browser.page_capability import PageCapability
from uiscout.config.settings import ScoutConfig
from uiscout.discovery.selector_resolver import SelectorResolver
from uiscout.errors import PageUnavailableError
from uiscout.models.feature_models import DiscoveredFeature

logger = logging.getLogger(__name__)

Extractor = Callable[[Any, str], Awaitable[Optional[DiscoveredFeature]]]


class FeatureCategory(str, Enum):
    """Scanner output categories in merge precedence order.

    The first category in this order wins a selector collision.
    """

    BUTTONS = "buttons"
    INPUTS = "inputs"
    MENUS = "menus"
    PANELS = "panels"
    CHARTS = "charts"
    MODALS = "modals"
    TABLES = "tables"
    CUSTOM_COMPONENTS = "custom_components"
    DROPDOWNS = "dropdowns"
    TABS = "tabs"


CATEGORY_PRECEDENCE: List[FeatureCategory] = list(FeatureCategory)


class ElementScanner(ABC):
    """Abstract base class for category scanners.

    Subclasses declare the categories they produce and implement one
    ``discover_*`` method per category. ``scan()`` runs those methods in
    precedence order against one fresh visited set.
    """

    # Categories this scanner produces
    CATEGORIES: Sequence[FeatureCategory] = ()

    def __init__(
        self,
        page: PageCapability,
        config: Optional[ScoutConfig] = None,
        resolver: Optional[SelectorResolver] = None,
    ):
        """Initialize the scanner.

        Args:
            page: Page capability to query
            config: Scout configuration (bounded waits)
            resolver: Selector resolver, created from page if omitted
        """
        self.page = page
        self.config = config or ScoutConfig()
        self.resolver = resolver or SelectorResolver(page)

    async def scan(self) -> Dict[FeatureCategory, List[DiscoveredFeature]]:
        """Run every category of this scanner.

        Returns:
            Features keyed by category

        Raises:
            PageUnavailableError: If the page went away during the scan
        """
        visited: Set[str] = set()
        results: Dict[FeatureCategory, List[DiscoveredFeature]] = {}

        for category in sorted(self.CATEGORIES, key=CATEGORY_PRECEDENCE.index):
            results[category] = await self.discover_category(category, visited)

        return results

    @abstractmethod
    async def discover_category(
        self, category: FeatureCategory, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Dispatch to the ``discover_*`` method of a category."""
        pass

    async def _scan_patterns(
        self,
        patterns: Sequence[str],
        extract: Extractor,
        visited: Optional[Set[str]],
        label: str,
    ) -> List[DiscoveredFeature]:
        """Apply candidate patterns in order and collect features.

        Args:
            patterns: Candidate selector patterns
            extract: Builds a feature from (element, selector), None to skip
            visited: Selectors already emitted in this session
            label: Category label for logging

        Returns:
            Features in pattern order
        """
        if visited is None:
            visited = set()

        logger.info(f"Discovering {label}...")
        features: List[DiscoveredFeature] = []

        for pattern in patterns:
            try:
                elements = await self.page.locate_all(pattern)
            except PageUnavailableError:
                raise
            except Exception as e:
                logger.debug(f"Skipping pattern {pattern}: {e}")
                continue

            for element in elements:
                feature = await self._analyze_element(element, extract, visited)
                if feature:
                    features.append(feature)

        logger.info(f"Found {len(features)} {label}")
        return features

    async def _analyze_element(
        self, element: Any, extract: Extractor, visited: Set[str]
    ) -> Optional[DiscoveredFeature]:
        try:
            selector = await self.resolver.resolve(element)
            if selector in visited:
                return None

            if not await self.page.is_visible(element, self.config.visibility_timeout_ms):
                logger.debug(f"Skipping hidden element: {selector}")
                return None

            feature = await extract(element, selector)
            if feature is None:
                return None

            visited.add(selector)
            logger.debug(f"Found {feature.type.value}: {feature.name}")
            return feature

        except PageUnavailableError:
            raise
        except Exception as e:
            logger.debug(f"Skipping element after analysis error: {e}")
            return None

    async def _text(self, element: Any) -> str:
        return (await self.page.text_content(element) or "").strip()

    async def _attribute(self, element: Any, name: str) -> str:
        return await self.page.get_attribute(element, name) or ""
