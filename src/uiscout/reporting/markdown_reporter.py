"""Markdown test report generator.

Renders a developer-friendly summary of a discovery and execution run.
"""

import logging
from typing import List, Optional
from datetime import datetime

from uiscout.models.feature_models import (
    DiscoveredFeature,
    ExecutionSummary,
    TestCase,
    TestExecutionResult,
)
from uiscout.reporting.statistics import calculate_statistics

logger = logging.getLogger(__name__)


class MarkdownReporter:
    """
    Generate Markdown run reports.

    PATTERN: GitHub-flavored markdown with tables
    GOTCHA: Escapes pipes in feature names so table rows stay intact
    """

    def __init__(self, max_listed: int = 10):
        """
        Initialize Markdown reporter.

        Args:
            max_listed: Maximum passed/failed tests listed per section
        """
        self.max_listed = max_listed
        self.logger = logger

    def generate_report(
        self,
        features: List[DiscoveredFeature],
        test_cases: List[TestCase],
        results: List[TestExecutionResult],
        timestamp: Optional[datetime] = None,
    ) -> str:
        """
        Generate a Markdown report.

        Args:
            features: Discovered features
            test_cases: Synthesized test cases
            results: Execution results
            timestamp: Report timestamp (defaults to now)

        Returns:
            Markdown string
        """
        self.logger.info("Generating Markdown report")

        sections = [
            self._generate_header(timestamp or datetime.now()),
            self._generate_summary(features, test_cases, results),
            self._generate_feature_types(features),
            self._generate_results(results),
        ]

        markdown = "\n\n".join(filter(None, sections)) + "\n"

        self.logger.info(f"Markdown report generated ({len(markdown)} chars)")
        return markdown

    def _generate_header(self, timestamp: datetime) -> str:
        return f"# Feature Discovery Report\n\nGenerated: {timestamp.isoformat()}"

    def _generate_summary(
        self,
        features: List[DiscoveredFeature],
        test_cases: List[TestCase],
        results: List[TestExecutionResult],
    ) -> str:
        summary = ExecutionSummary.from_results(results)
        lines = [
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Features Discovered | {len(features)} |",
            f"| Test Cases Generated | {len(test_cases)} |",
            f"| Tests Passed | {summary.passed} |",
            f"| Tests Failed | {summary.failed} |",
            f"| Success Rate | {summary.success_rate:.1f}% |",
        ]
        return "\n".join(lines)

    def _generate_feature_types(self, features: List[DiscoveredFeature]) -> str:
        statistics = calculate_statistics(features)
        if not statistics.by_type:
            return ""

        lines = ["## Feature Types", ""]
        for feature_type, count in statistics.by_type.items():
            lines.append(f"- **{feature_type.capitalize()}**: {count}")
        return "\n".join(lines)

    def _generate_results(self, results: List[TestExecutionResult]) -> str:
        if not results:
            return ""

        passed = [r for r in results if r.success]
        failed = [r for r in results if not r.success]

        lines = ["## Test Results", "", "### Passed Tests", ""]
        lines.extend(
            f"- {self._escape(r.test_case.feature.name)}"
            for r in passed[: self.max_listed]
        )
        if not passed:
            lines.append("_None_")

        lines.extend(["", "### Failed Tests", ""])
        if failed:
            lines.extend(["| Feature | Error | Screenshot |", "|---------|-------|------------|"])
            for r in failed[: self.max_listed]:
                lines.append(
                    f"| {self._escape(r.test_case.feature.name)} "
                    f"| {self._escape(r.error or '')} "
                    f"| {r.screenshot or '-'} |"
                )
        else:
            lines.append("_None_")

        return "\n".join(lines)

    def _escape(self, text: str) -> str:
        return text.replace("|", "\\|").replace("\n", " ")
