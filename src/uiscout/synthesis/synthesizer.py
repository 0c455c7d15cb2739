"""Test case synthesis from discovered features."""

import logging
from typing import Dict, List, Optional

from uiscout.models.feature_models import (
    Assertion,
    AssertionType,
    Capability,
    DiscoveredFeature,
    FeatureType,
    StepAction,
    TestCase,
    TestStep,
)

logger = logging.getLogger(__name__)


class TestCaseSynthesizer:
    """
    Map a feature's declared capabilities to ordered steps and assertions.

    PATTERN: Each recognised capability adds its own steps and assertions,
    always in the order click, fill, hover, screenshot, select, check
    CRITICAL: A feature that yields no steps yields no test case
    GOTCHA: Capabilities without a rule (clear, blur, focus, press, drag, close)
    are ignored
    """

    # Literal fill values keyed by input type
    TEST_VALUES: Dict[str, str] = {
        "email": "test@example.com",
        "password": "TestPassword123!",
        "number": "42",
        "tel": "+1234567890",
        "url": "https://example.com",
        "date": "2024-01-01",
        "time": "12:00",
        "search": "test search query",
    }
    DEFAULT_TEST_VALUE = "Test Value"
    DEFAULT_OPTION = "first-option"

    # Types whose element should survive a click
    CLICK_PERSISTENT_TYPES = (FeatureType.BUTTON, FeatureType.MENU)

    def __init__(self):
        """Initialize test case synthesizer."""
        self.logger = logger

    @classmethod
    def test_value_for(cls, input_type: Optional[str]) -> str:
        """Literal fill value for an input type."""
        return cls.TEST_VALUES.get(input_type or "text", cls.DEFAULT_TEST_VALUE)

    def synthesize_all(self, features: List[DiscoveredFeature]) -> List[TestCase]:
        """
        Synthesize test cases for every feature that yields steps.

        Args:
            features: Discovered features

        Returns:
            Test cases in feature order
        """
        self.logger.info("Generating test cases")
        test_cases = []
        for feature in features:
            test_case = self.synthesize(feature)
            if test_case:
                test_cases.append(test_case)

        self.logger.info(f"Generated {len(test_cases)} test cases")
        return test_cases

    def synthesize(self, feature: DiscoveredFeature) -> Optional[TestCase]:
        """
        Synthesize one test case from a feature.

        Args:
            feature: Discovered feature

        Returns:
            TestCase, or None when the feature yields no steps

        Example:
            >>> feature = DiscoveredFeature(
            ...     name="Email", type="input", selector="#email",
            ...     attributes={"type": "email"}, actions=["fill"],
            ... )
            >>> synthesizer.synthesize(feature).steps[0].value
            'test@example.com'
        """
        if not feature.actions:
            return None

        steps: List[TestStep] = []
        assertions: List[Assertion] = [
            Assertion(
                type=AssertionType.VISIBLE.value,
                selector=feature.selector,
                description=f"{feature.name} should be visible",
            )
        ]

        if feature.has_action(Capability.CLICK):
            self._add_click(feature, steps, assertions)
        if feature.has_action(Capability.FILL) and feature.type == FeatureType.INPUT:
            self._add_fill(feature, steps, assertions)
        if feature.has_action(Capability.HOVER):
            steps.append(
                TestStep(
                    action=StepAction.HOVER.value,
                    selector=feature.selector,
                    description=f"Hover over {feature.name}",
                )
            )
        if feature.has_action(Capability.SCREENSHOT):
            steps.append(
                TestStep(
                    action=StepAction.SCREENSHOT.value,
                    selector=feature.selector,
                    description=f"Take screenshot of {feature.name}",
                )
            )
        if feature.has_action(Capability.SELECT) and feature.type == FeatureType.DROPDOWN:
            self._add_select(feature, steps, assertions)
        if feature.has_action(Capability.CHECK) or feature.has_action(Capability.UNCHECK):
            self._add_check(feature, steps, assertions)

        if not steps:
            self.logger.debug(f"No steps for {feature.name}, skipping")
            return None

        return TestCase(feature=feature, steps=steps, assertions=assertions)

    def _add_click(
        self,
        feature: DiscoveredFeature,
        steps: List[TestStep],
        assertions: List[Assertion],
    ) -> None:
        steps.append(
            TestStep(
                action=StepAction.CLICK.value,
                selector=feature.selector,
                description=f"Click on {feature.name}",
            )
        )
        if feature.type in self.CLICK_PERSISTENT_TYPES:
            assertions.append(
                Assertion(
                    type=AssertionType.VISIBLE.value,
                    selector=feature.selector,
                    description=f"{feature.name} should remain visible after click",
                )
            )

    def _add_fill(
        self,
        feature: DiscoveredFeature,
        steps: List[TestStep],
        assertions: List[Assertion],
    ) -> None:
        value = self.test_value_for(feature.attributes.get("type"))
        steps.append(
            TestStep(
                action=StepAction.FILL.value,
                selector=feature.selector,
                value=value,
                description=f"Fill {feature.name} with test value",
            )
        )
        assertions.append(
            Assertion(
                type=AssertionType.ATTRIBUTE.value,
                selector=feature.selector,
                expected=value,
                description=f"{feature.name} should contain the test value",
            )
        )

    def _add_select(
        self,
        feature: DiscoveredFeature,
        steps: List[TestStep],
        assertions: List[Assertion],
    ) -> None:
        options = [o.strip() for o in feature.attributes.get("options", "").split(",")]
        option = next((o for o in options if o), self.DEFAULT_OPTION)
        steps.append(
            TestStep(
                action=StepAction.SELECT.value,
                selector=feature.selector,
                value=option,
                description=f"Select option in {feature.name}",
            )
        )
        assertions.append(
            Assertion(
                type=AssertionType.ATTRIBUTE.value,
                selector=feature.selector,
                expected=option,
                description=f"{feature.name} should have selected option",
            )
        )

    def _add_check(
        self,
        feature: DiscoveredFeature,
        steps: List[TestStep],
        assertions: List[Assertion],
    ) -> None:
        input_type = feature.attributes.get("type")
        if input_type == "checkbox":
            action = StepAction.CHECK.value
            step_description = f"Check {feature.name}"
            assertion_description = f"{feature.name} should be checked"
        elif input_type == "radio":
            action = StepAction.CLICK.value
            step_description = f"Select {feature.name} radio button"
            assertion_description = f"{feature.name} should be selected"
        else:
            return

        steps.append(
            TestStep(action=action, selector=feature.selector, description=step_description)
        )
        assertions.append(
            Assertion(
                type=AssertionType.ATTRIBUTE.value,
                selector=feature.selector,
                expected=True,
                description=assertion_description,
            )
        )
