"""JSON discovery report generator.

Produces the machine-readable discovery report consumed by coverage tooling.
Field names on the wire are camelCase.
"""

import logging
import json
from typing import Any, Dict, List, Optional
from datetime import datetime

from uiscout.models.feature_models import (
    DiscoveredFeature,
    ExecutionSummary,
    TestCase,
    TestExecutionResult,
)
from uiscout.reporting.statistics import calculate_statistics

logger = logging.getLogger(__name__)


class JsonReporter:
    """
    Generate JSON discovery reports.

    PATTERN: Structured JSON output for programmatic access
    GOTCHA: Models are dumped by alias so inputType/testCase keep their names
    """

    def __init__(self, pretty: bool = True):
        """
        Initialize JSON reporter.

        Args:
            pretty: Whether to pretty-print JSON output
        """
        self.pretty = pretty
        self.logger = logger

    def generate_report(
        self,
        url: str,
        features: List[DiscoveredFeature],
        test_cases: List[TestCase],
        results: Optional[List[TestExecutionResult]] = None,
        timestamp: Optional[datetime] = None,
    ) -> str:
        """
        Generate a JSON discovery report.

        Args:
            url: Page URL the features were discovered on
            features: Discovered features
            test_cases: Synthesized test cases
            results: Execution results, if tests were run
            timestamp: Report timestamp (defaults to now)

        Returns:
            JSON string
        """
        self.logger.info(f"Generating JSON report for {url}")

        report_dict = self._report_to_dict(
            url, features, test_cases, results or [], timestamp or datetime.now()
        )

        if self.pretty:
            json_str = json.dumps(report_dict, indent=2, default=str)
        else:
            json_str = json.dumps(report_dict, default=str)

        self.logger.info(f"JSON report generated ({len(json_str)} bytes)")
        return json_str

    def _report_to_dict(
        self,
        url: str,
        features: List[DiscoveredFeature],
        test_cases: List[TestCase],
        results: List[TestExecutionResult],
        timestamp: datetime,
    ) -> Dict[str, Any]:
        statistics = calculate_statistics(features)
        summary = ExecutionSummary.from_results(results)

        return {
            "timestamp": timestamp.isoformat(),
            "url": url,
            "featuresDiscovered": len(features),
            "features": [self._dump(f) for f in features],
            "testCases": [self._dump(t) for t in test_cases],
            "results": [self._dump(r) for r in results],
            "statistics": {
                "byType": statistics.by_type,
                "interactive": statistics.interactive,
                "withText": statistics.with_text,
                "withAttributes": statistics.with_attributes,
            },
            "summary": {
                "total": summary.total,
                "passed": summary.passed,
                "failed": summary.failed,
                "successRate": summary.success_rate,
            },
        }

    def _dump(self, model: Any) -> Dict[str, Any]:
        return model.model_dump(mode="json", by_alias=True)
