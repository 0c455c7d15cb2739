"""Models describing whole discovery and run outcomes."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from uiscout.models.feature_models import (
    DiscoveredFeature,
    DiscoveryStatistics,
    ExecutionSummary,
    TestCase,
    TestExecutionResult,
)


class PageStructure(BaseModel):
    """Layout and interactive element counts for a page."""

    title: str = Field(default="Unknown", description="Page title")
    url: str = Field(default="", description="Page URL")
    headers: int = Field(default=0, description="Header/banner regions")
    navs: int = Field(default=0, description="Navigation regions")
    main_areas: int = Field(default=0, description="Main content regions")
    asides: int = Field(default=0, description="Complementary regions")
    footers: int = Field(default=0, description="Footer regions")
    forms: int = Field(default=0)
    buttons: int = Field(default=0)
    links: int = Field(default=0)
    inputs: int = Field(default=0)


class DiscoveryResult(BaseModel):
    """Merged feature catalogue with per-type counts."""

    features: List[DiscoveredFeature] = Field(default_factory=list)
    count: int = Field(default=0, description="Number of features")
    by_type: Dict[str, int] = Field(default_factory=dict, description="Counts per type")

    @classmethod
    def from_features(cls, features: List[DiscoveredFeature]) -> "DiscoveryResult":
        by_type: Dict[str, int] = {}
        for feature in features:
            by_type[feature.type.value] = by_type.get(feature.type.value, 0) + 1
        return cls(features=features, count=len(features), by_type=by_type)


class CompleteRunResult(BaseModel):
    """Everything produced by a full discover/synthesize/execute run."""

    url: str = Field(default="")
    started_at: datetime = Field(default_factory=datetime.now)
    discovery: DiscoveryResult
    structure: Optional[PageStructure] = Field(default=None)
    test_cases: List[TestCase] = Field(default_factory=list)
    results: List[TestExecutionResult] = Field(default_factory=list)
    executed: bool = Field(default=False, description="Whether test cases were replayed")
    summary: ExecutionSummary = Field(default_factory=ExecutionSummary)
    statistics: DiscoveryStatistics = Field(default_factory=DiscoveryStatistics)
