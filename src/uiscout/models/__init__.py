"""Models package for uiscout."""

from .feature_models import (
    FeatureType,
    Capability,
    StepAction,
    AssertionType,
    DiscoveredFeature,
    TestStep,
    Assertion,
    TestCase,
    TestExecutionResult,
    ExecutionSummary,
    DiscoveryStatistics,
)
from .run_models import (
    PageStructure,
    DiscoveryResult,
    CompleteRunResult,
)

__all__ = [
    "FeatureType",
    "Capability",
    "StepAction",
    "AssertionType",
    "DiscoveredFeature",
    "TestStep",
    "Assertion",
    "TestCase",
    "TestExecutionResult",
    "ExecutionSummary",
    "DiscoveryStatistics",
    "PageStructure",
    "DiscoveryResult",
    "CompleteRunResult",
]
