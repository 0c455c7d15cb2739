"""Form control discovery."""

import logging
from typing import Any, List, Optional, Set

from uiscout.discovery.scanners.base import ElementScanner, FeatureCategory
from uiscout.models.feature_models import Capability, DiscoveredFeature, FeatureType

logger = logging.getLogger(__name__)


class InputScanner(ElementScanner):
    """Discover text fields, toggles, ranges and other form controls."""

    CATEGORIES = (FeatureCategory.INPUTS,)

    INPUT_PATTERNS = [
        'input[type="text"]',
        'input[type="email"]',
        'input[type="password"]',
        'input[type="number"]',
        'input[type="search"]',
        'input[type="tel"]',
        'input[type="url"]',
        'input[type="date"]',
        'input[type="time"]',
        'input[type="datetime-local"]',
        'input[type="checkbox"]',
        'input[type="radio"]',
        'input[type="range"]',
        "textarea",
        "select",
        '[contenteditable="true"]',
    ]

    async def discover_category(
        self, category: FeatureCategory, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        if category != FeatureCategory.INPUTS:
            raise ValueError(f"InputScanner does not produce {category.value}")
        return await self.discover_inputs(visited)

    async def discover_inputs(
        self, visited: Optional[Set[str]] = None
    ) -> List[DiscoveredFeature]:
        """Discover visible form controls.

        Args:
            visited: Selectors already emitted in this session

        Returns:
            Input features in pattern order
        """
        return await self._scan_patterns(
            self.INPUT_PATTERNS, self._extract_input, visited, "inputs"
        )

    async def _extract_input(self, element: Any, selector: str) -> DiscoveredFeature:
        placeholder = await self._attribute(element, "placeholder")
        label = (await self.resolver.find_label_for_input(element)).strip()
        input_type = await self._attribute(element, "type") or "text"
        name = await self._attribute(element, "name")
        element_id = await self._attribute(element, "id")

        return DiscoveredFeature(
            name=label or placeholder or name or element_id or f"Input ({input_type})",
            type=FeatureType.INPUT,
            selector=selector,
            input_type=input_type,
            attributes={
                "type": input_type,
                "placeholder": placeholder,
                "name": name,
                "id": element_id,
            },
            actions=self.actions_for(input_type),
        )

    @staticmethod
    def actions_for(input_type: str) -> List[Capability]:
        """Capabilities of a form control of the given type."""
        if input_type in ("checkbox", "radio"):
            return [Capability.CHECK, Capability.UNCHECK, Capability.CLICK]
        if input_type == "range":
            return [Capability.FILL, Capability.DRAG]
        return [Capability.FILL, Capability.CLEAR, Capability.FOCUS, Capability.BLUR]
