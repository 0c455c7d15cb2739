"""HTML report generator for discovery runs.

Renders a standalone dashboard page: headline numbers, features by type,
the first test results and the first discovered features.
"""

import html
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


class HtmlReporter:
    """
    Generate HTML run reports with a dashboard.

    PATTERN: Template-based HTML generation
    GOTCHA: Every page-derived string is escaped; names and selectors carry
    quotes and angle brackets
    """

    def __init__(self, max_results: int = 10, max_features: int = 20):
        """
        Initialize HTML reporter.

        Args:
            max_results: Maximum test results rendered
            max_features: Maximum feature cards rendered
        """
        self.max_results = max_results
        self.max_features = max_features
        self.logger = logger

    def generate_report(
        self,
        features: List[DiscoveredFeature],
        test_cases: List[TestCase],
        results: List[TestExecutionResult],
        timestamp: Optional[datetime] = None,
    ) -> str:
        """
        Generate an HTML report.

        Args:
            features: Discovered features
            test_cases: Synthesized test cases
            results: Execution results
            timestamp: Report timestamp (defaults to now)

        Returns:
            HTML string
        """
        self.logger.info("Generating HTML report")

        document = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Feature Discovery Report</title>
    {self._generate_styles()}
</head>
<body>
    {self._generate_header(timestamp or datetime.now())}
    {self._generate_dashboard(features, test_cases, results)}
    {self._generate_feature_types(features)}
    {self._generate_results(results)}
    {self._generate_features(features)}
</body>
</html>
"""

        self.logger.info(f"HTML report generated ({len(document)} bytes)")
        return document

    def _generate_styles(self) -> str:
        return """<style>
        body { font-family: Arial, sans-serif; margin: 20px; }
        .header { background: #f5f5f5; padding: 20px; border-radius: 8px; }
        .stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 15px; margin: 20px 0; }
        .stat-card { background: #fff; border: 1px solid #ddd; padding: 15px; border-radius: 8px; text-align: center; }
        .stat-number { font-size: 2em; font-weight: bold; color: #007cba; }
        .features-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(300px, 1fr)); gap: 15px; }
        .feature-card { border: 1px solid #ddd; padding: 15px; border-radius: 8px; background: #fff; }
        .feature-type { display: inline-block; padding: 4px 8px; background: #007cba; color: white; border-radius: 4px; font-size: 0.8em; }
        .passed { color: #28a745; }
        .failed { color: #dc3545; }
    </style>"""

    def _generate_header(self, timestamp: datetime) -> str:
        return f"""<div class="header">
        <h1>Feature Discovery Report</h1>
        <p>Generated: {timestamp.isoformat()}</p>
    </div>"""

    def _stat_card(self, value: str, label: str) -> str:
        return (
            f'<div class="stat-card"><div class="stat-number">{value}</div>'
            f"<div>{label}</div></div>"
        )

    def _generate_dashboard(
        self,
        features: List[DiscoveredFeature],
        test_cases: List[TestCase],
        results: List[TestExecutionResult],
    ) -> str:
        statistics = calculate_statistics(features)
        summary = ExecutionSummary.from_results(results)
        cards = [
            self._stat_card(str(len(features)), "Features Discovered"),
            self._stat_card(str(len(test_cases)), "Test Cases Generated"),
            self._stat_card(f"{summary.success_rate:.1f}%", "Success Rate"),
            self._stat_card(str(statistics.interactive), "Interactive Elements"),
        ]
        return f'<div class="stats">{"".join(cards)}</div>'

    def _generate_feature_types(self, features: List[DiscoveredFeature]) -> str:
        statistics = calculate_statistics(features)
        if not statistics.by_type:
            return ""

        cards = [
            self._stat_card(str(count), html.escape(feature_type.capitalize()))
            for feature_type, count in statistics.by_type.items()
        ]
        return f'<h2>Feature Types</h2>\n    <div class="stats">{"".join(cards)}</div>'

    def _generate_results(self, results: List[TestExecutionResult]) -> str:
        if not results:
            return ""

        summary = ExecutionSummary.from_results(results)
        cards = []
        for result in results[: self.max_results]:
            name = html.escape(result.test_case.feature.name)
            if result.success:
                cards.append(
                    f'<div class="feature-card"><h4 class="passed">PASS {name}</h4></div>'
                )
            else:
                cards.append(
                    f'<div class="feature-card"><h4 class="failed">FAIL {name}</h4>'
                    f'<p class="failed">Error: {html.escape(result.error or "")}</p></div>'
                )

        return (
            "<h2>Test Results</h2>\n"
            f'    <p><span class="passed">Passed: {summary.passed}</span> | '
            f'<span class="failed">Failed: {summary.failed}</span></p>\n'
            f'    <div class="test-results">{"".join(cards)}</div>'
        )

    def _generate_features(self, features: List[DiscoveredFeature]) -> str:
        if not features:
            return ""

        cards = []
        for feature in features[: self.max_features]:
            text = (
                f"<p><strong>Text:</strong> {html.escape(feature.text)}</p>"
                if feature.text
                else ""
            )
            cards.append(
                '<div class="feature-card">'
                f'<span class="feature-type">{feature.type.value}</span>'
                f"<h4>{html.escape(feature.name)}</h4>"
                f"<p><strong>Selector:</strong> <code>{html.escape(feature.selector)}</code></p>"
                f"{text}"
                f"<p><strong>Actions:</strong> {html.escape(', '.join(feature.actions))}</p>"
                "</div>"
            )
        return f'<h2>Discovered Features</h2>\n    <div class="features-grid">{"".join(cards)}</div>'
