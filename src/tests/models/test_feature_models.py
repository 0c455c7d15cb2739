"""Tests for feature, test case and run models."""

import pytest
from pydantic import ValidationError

from uiscout.models import (
    Capability,
    DiscoveredFeature,
    DiscoveryResult,
    ExecutionSummary,
    FeatureType,
    TestCase,
    TestExecutionResult,
    TestStep,
)


@pytest.fixture
def step():
    """Create a click step."""
    return TestStep(action="click", selector="#go", description="Click Go")


@pytest.fixture
def case(step):
    """Create a minimal test case."""
    feature = DiscoveredFeature(name="Go", type="button", selector="#go", actions=["click"])
    return TestCase(feature=feature, steps=[step])


class TestDiscoveredFeature:
    """Tests for DiscoveredFeature validation."""

    def test_unknown_type_becomes_other(self):
        feature = DiscoveredFeature(name="Widget", type="carousel", selector="#w")

        assert feature.type == FeatureType.OTHER

    def test_actions_deduplicated_in_order(self):
        feature = DiscoveredFeature(
            name="Save",
            type=FeatureType.BUTTON,
            selector="#save",
            actions=[Capability.CLICK, "hover", "click", Capability.HOVER, "focus"],
        )

        assert feature.actions == ["click", "hover", "focus"]
        assert feature.has_action(Capability.FOCUS)
        assert not feature.has_action("fill")

    def test_input_type_alias(self):
        feature = DiscoveredFeature(
            name="Email", type="input", selector="#email", inputType="email"
        )

        assert feature.input_type == "email"
        assert feature.model_dump(by_alias=True)["inputType"] == "email"

    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            DiscoveredFeature(name="X", type="button", selector="#x", confidence=1.5)

    def test_children(self):
        child = DiscoveredFeature(name="Home", type="other", selector="a:has-text(\"Home\")")
        menu = DiscoveredFeature(name="Menu", type="menu", selector="nav", children=[child])

        assert menu.children[0].name == "Home"


class TestTestCaseModels:
    """Tests for test case and step models."""

    def test_steps_required(self):
        feature = DiscoveredFeature(name="Go", type="button", selector="#go")

        with pytest.raises(ValidationError):
            TestCase(feature=feature, steps=[])

    def test_step_is_immutable(self, step):
        with pytest.raises(ValidationError):
            step.value = "changed"


class TestExecutionResultModel:
    """Tests for result outcome invariants."""

    def test_success_without_error(self, case):
        result = TestExecutionResult(test_case=case, success=True, duration=5)

        assert result.error is None
        assert result.model_dump(by_alias=True)["testCase"]["feature"]["name"] == "Go"

    def test_success_with_error_rejected(self, case):
        with pytest.raises(ValidationError):
            TestExecutionResult(test_case=case, success=True, duration=5, error="boom")

    def test_failure_requires_error(self, case):
        with pytest.raises(ValidationError):
            TestExecutionResult(test_case=case, success=False, duration=5)

    def test_negative_duration_rejected(self, case):
        with pytest.raises(ValidationError):
            TestExecutionResult(test_case=case, success=True, duration=-1)


class TestAggregates:
    """Tests for summary and discovery aggregates."""

    def test_execution_summary(self, case):
        results = [
            TestExecutionResult(test_case=case, success=True, duration=1),
            TestExecutionResult(test_case=case, success=False, duration=1, error="x"),
            TestExecutionResult(test_case=case, success=False, duration=1, error="y"),
        ]

        summary = ExecutionSummary.from_results(results)

        assert (summary.total, summary.passed, summary.failed) == (3, 1, 2)
        assert summary.success_rate == 33.3

    def test_discovery_result_by_type(self):
        features = [
            DiscoveredFeature(name="A", type="button", selector="#a"),
            DiscoveredFeature(name="B", type="button", selector="#b"),
            DiscoveredFeature(name="C", type="tab", selector="#c"),
        ]

        result = DiscoveryResult.from_features(features)

        assert result.count == 3
        assert result.by_type == {"button": 2, "tab": 1}
