"""Data models for discovered features, synthesized test cases and their results.

These models are the artifacts handed to report generation and coverage
tooling, so every model must stay JSON-serializable through
``model_dump(mode="json", by_alias=True)``.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class FeatureType(str, Enum):
    """Closed set of feature categories.

    Unknown type strings are coerced to OTHER so dedup and precedence logic
    stays total.
    """

    BUTTON = "button"
    INPUT = "input"
    MENU = "menu"
    DROPDOWN = "dropdown"
    TAB = "tab"
    PANEL = "panel"
    CHART = "chart"
    MODAL = "modal"
    TABLE = "table"
    OTHER = "other"


class Capability(str, Enum):
    """Interaction capability tokens a feature can declare."""

    CLICK = "click"
    FILL = "fill"
    CLEAR = "clear"
    FOCUS = "focus"
    BLUR = "blur"
    HOVER = "hover"
    SELECT = "select"
    CHECK = "check"
    UNCHECK = "uncheck"
    SCREENSHOT = "screenshot"
    PRESS = "press"
    DRAG = "drag"  # Range inputs, no step generated
    CLOSE = "close"  # Modals, no step generated


class StepAction(str, Enum):
    """Actions the executor knows how to dispatch."""

    CLICK = "click"
    FILL = "fill"
    HOVER = "hover"
    FOCUS = "focus"
    SELECT = "select"
    CHECK = "check"
    UNCHECK = "uncheck"
    PRESS = "press"
    SCREENSHOT = "screenshot"


class AssertionType(str, Enum):
    """Assertion kinds the executor knows how to verify."""

    VISIBLE = "visible"
    HIDDEN = "hidden"
    ENABLED = "enabled"
    DISABLED = "disabled"
    TEXT = "text"
    COUNT = "count"
    ATTRIBUTE = "attribute"
    CLASS = "class"


class DiscoveredFeature(BaseModel):
    """A discovered UI element with its inferred capabilities.

    Created by a scanner. Later passes may mutate ``attributes`` (tooltips)
    or ``name``/``text`` (panel headings), but a feature is never removed
    mid-session.
    """

    model_config = {"populate_by_name": True}

    name: str = Field(description="Human readable feature name")
    type: FeatureType = Field(description="Feature category")
    selector: str = Field(description="Locator resolving to exactly this element")
    text: Optional[str] = Field(default=None, description="Text content")
    input_type: Optional[str] = Field(
        default=None, alias="inputType", description="Input type for input features"
    )
    attributes: Dict[str, str] = Field(
        default_factory=dict, description="Extracted element attributes"
    )
    actions: List[str] = Field(
        default_factory=list, description="Ordered, duplicate-free capability tokens"
    )
    children: List["DiscoveredFeature"] = Field(
        default_factory=list, description="Nested features such as menu items"
    )
    confidence: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, description="Selector confidence (essentials only)"
    )

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        if isinstance(value, FeatureType):
            return value
        try:
            return FeatureType(value)
        except ValueError:
            return FeatureType.OTHER

    @field_validator("actions", mode="before")
    @classmethod
    def _dedupe_actions(cls, value: Any) -> Any:
        if value is None:
            return []
        seen: List[str] = []
        for action in value:
            token = action.value if isinstance(action, Enum) else str(action)
            if token not in seen:
                seen.append(token)
        return seen

    def has_action(self, action: str) -> bool:
        """Check whether the feature declares a capability."""
        return str(action.value if isinstance(action, Enum) else action) in self.actions


class TestStep(BaseModel):
    """A single interaction replayed by the executor."""

    model_config = {"frozen": True}

    action: str = Field(description="Action token (see StepAction)")
    selector: str = Field(description="Target selector")
    value: Optional[str] = Field(default=None, description="Value for fill/select/press")
    description: str = Field(description="Human readable description")


class Assertion(BaseModel):
    """A post-condition verified after all steps succeed."""

    model_config = {"frozen": True}

    type: str = Field(description="Assertion token (see AssertionType)")
    selector: str = Field(description="Target selector")
    expected: Optional[Any] = Field(default=None, description="Expected value")
    description: str = Field(description="Human readable description")


class TestCase(BaseModel):
    """Ordered steps and assertions derived from one feature.

    CRITICAL: Only constructed when at least one step exists.
    """

    feature: DiscoveredFeature
    steps: List[TestStep] = Field(min_length=1, description="Steps in replay order")
    assertions: List[Assertion] = Field(default_factory=list)


class TestExecutionResult(BaseModel):
    """Outcome of replaying one test case."""

    model_config = {"populate_by_name": True}

    test_case: TestCase = Field(alias="testCase")
    success: bool
    duration: float = Field(ge=0, description="Wall-clock duration in milliseconds")
    error: Optional[str] = Field(default=None)
    screenshot: Optional[str] = Field(default=None, description="Failure screenshot path")

    @model_validator(mode="after")
    def _check_outcome(self) -> "TestExecutionResult":
        if self.success and (self.error is not None or self.screenshot is not None):
            raise ValueError("successful results carry no error or screenshot")
        if not self.success and self.error is None:
            raise ValueError("failed results must carry an error message")
        return self


class ExecutionSummary(BaseModel):
    """Aggregate pass/fail counts for a batch."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    success_rate: float = Field(default=0.0, description="Percentage of passed cases")

    @classmethod
    def from_results(cls, results: List[TestExecutionResult]) -> "ExecutionSummary":
        passed = sum(1 for r in results if r.success)
        total = len(results)
        return cls(
            total=total,
            passed=passed,
            failed=total - passed,
            success_rate=round(passed / total * 100, 1) if total else 0.0,
        )


class DiscoveryStatistics(BaseModel):
    """Counts describing a feature catalogue."""

    by_type: Dict[str, int] = Field(default_factory=dict)
    interactive: int = 0
    with_text: int = 0
    with_attributes: int = 0


DiscoveredFeature.model_rebuild()
