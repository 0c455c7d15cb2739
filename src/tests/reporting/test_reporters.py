"""Tests for report generation and statistics."""

import json
from datetime import datetime

import pytest

from uiscout.models.feature_models import (
    DiscoveredFeature,
    FeatureType,
    TestCase,
    TestExecutionResult,
    TestStep,
)
from uiscout.reporting.html_reporter import HtmlReporter
from uiscout.reporting.json_reporter import JsonReporter
from uiscout.reporting.markdown_reporter import MarkdownReporter
from uiscout.reporting.statistics import calculate_statistics


TIMESTAMP = datetime(2024, 5, 1, 12, 30, 0)


@pytest.fixture
def features():
    """Create a small feature catalogue."""
    return [
        DiscoveredFeature(
            name="Submit",
            type=FeatureType.BUTTON,
            selector="#submit",
            text="Submit",
            attributes={"title": ""},
            actions=["click"],
        ),
        DiscoveredFeature(
            name="Email",
            type=FeatureType.INPUT,
            selector="#email",
            input_type="email",
            attributes={"type": "email"},
            actions=["fill"],
        ),
        DiscoveredFeature(name="Revenue", type=FeatureType.PANEL, selector="#revenue"),
    ]


@pytest.fixture
def cases(features):
    """Create one test case per interactive feature."""
    return [
        TestCase(
            feature=feature,
            steps=[TestStep(action="click", selector=feature.selector, description="Click")],
        )
        for feature in features[:2]
    ]


@pytest.fixture
def results(cases):
    """Create one passing and one failing result."""
    return [
        TestExecutionResult(test_case=cases[0], success=True, duration=12.5),
        TestExecutionResult(
            test_case=cases[1],
            success=False,
            duration=40.0,
            error="Step 'Click' failed: a | b",
            screenshot="test-screenshots/Email_1.png",
        ),
    ]


class TestStatistics:
    """Tests for calculate_statistics."""

    def test_counts(self, features):
        statistics = calculate_statistics(features)

        assert statistics.by_type == {"button": 1, "input": 1, "panel": 1}
        assert statistics.interactive == 2
        assert statistics.with_text == 1
        assert statistics.with_attributes == 2

    def test_empty(self):
        statistics = calculate_statistics([])

        assert statistics.by_type == {}
        assert statistics.interactive == 0


class TestJsonReporter:
    """Tests for JsonReporter."""

    def test_report_structure(self, features, cases, results):
        report = json.loads(
            JsonReporter().generate_report(
                "https://example.com", features, cases, results, timestamp=TIMESTAMP
            )
        )

        assert report["timestamp"] == "2024-05-01T12:30:00"
        assert report["url"] == "https://example.com"
        assert report["featuresDiscovered"] == 3
        assert report["features"][1]["inputType"] == "email"
        assert report["features"][0]["type"] == "button"
        assert len(report["testCases"]) == 2
        assert report["results"][1]["testCase"]["feature"]["name"] == "Email"
        assert report["statistics"]["byType"]["panel"] == 1
        assert report["statistics"]["withAttributes"] == 2
        assert report["summary"] == {"total": 2, "passed": 1, "failed": 1, "successRate": 50.0}

    def test_without_results(self, features):
        reporter = JsonReporter(pretty=False)

        report = json.loads(reporter.generate_report("https://example.com", features, []))

        assert report["results"] == []
        assert report["summary"]["successRate"] == 0.0


class TestMarkdownReporter:
    """Tests for MarkdownReporter."""

    def test_sections(self, features, cases, results):
        markdown = MarkdownReporter().generate_report(
            features, cases, results, timestamp=TIMESTAMP
        )

        assert markdown.startswith("# Feature Discovery Report")
        assert "Generated: 2024-05-01T12:30:00" in markdown
        assert "| Features Discovered | 3 |" in markdown
        assert "| Success Rate | 50.0% |" in markdown
        assert "- **Button**: 1" in markdown
        assert "### Passed Tests\n\n- Submit" in markdown

    def test_failed_table_escapes_pipes(self, features, cases, results):
        markdown = MarkdownReporter().generate_report(features, cases, results)

        assert "| Email | Step 'Click' failed: a \\| b | test-screenshots/Email_1.png |" in markdown

    def test_no_results_omits_results_section(self, features, cases):
        markdown = MarkdownReporter().generate_report(features, cases, [])

        assert "## Test Results" not in markdown
        assert "| Tests Passed | 0 |" in markdown

    def test_listing_is_capped(self, features):
        case = TestCase(
            feature=features[0],
            steps=[TestStep(action="click", selector="#submit", description="Click")],
        )
        results = [
            TestExecutionResult(test_case=case, success=True, duration=1.0) for _ in range(5)
        ]

        markdown = MarkdownReporter(max_listed=2).generate_report(features, [case], results)

        assert markdown.count("- Submit") == 2
        assert "### Failed Tests\n\n_None_" in markdown


class TestHtmlReporter:
    """Tests for HtmlReporter."""

    def test_dashboard(self, features, cases, results):
        document = HtmlReporter().generate_report(
            features, cases, results, timestamp=TIMESTAMP
        )

        assert document.startswith("<!DOCTYPE html>")
        assert "Generated: 2024-05-01T12:30:00" in document
        assert '<div class="stat-number">3</div><div>Features Discovered</div>' in document
        assert '<div class="stat-number">50.0%</div><div>Success Rate</div>' in document
        assert "Passed: 1</span>" in document
        assert "Error: Step &#x27;Click&#x27; failed: a | b" in document

    def test_page_strings_are_escaped(self, features):
        link = DiscoveredFeature(
            name="<b>Home</b>",
            type=FeatureType.OTHER,
            selector='a:has-text("Home")',
            actions=["click"],
        )

        document = HtmlReporter().generate_report([link], [], [])

        assert "<h4>&lt;b&gt;Home&lt;/b&gt;</h4>" in document
        assert "<code>a:has-text(&quot;Home&quot;)</code>" in document
        assert "Test Results" not in document

    def test_feature_cards_are_capped(self, features):
        document = HtmlReporter(max_features=2).generate_report(features, [], [])

        assert document.count('<span class="feature-type">') == 2
