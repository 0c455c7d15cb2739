"""Feature discovery coordinator service.

This module provides the FeatureDiscoveryCoordinator class which acts as the
facade over discovery, page analysis, test synthesis and test execution for
one page.

PATTERN: Facade pattern - each phase is callable on its own, run_complete
chains them
CRITICAL: The coordinator never opens or closes the browser; the caller owns
the page lifecycle
"""

import logging
from datetime import datetime
from typing import List, Optional

from uiscout.analysis.page_structure import PageStructureAnalyzer
from uiscout.browser.page_capability import PageCapability
from uiscout.config.settings import ScoutConfig
from uiscout.discovery.aggregator import DiscoveryAggregator
from uiscout.execution.executor import TestExecutor
from uiscout.models.feature_models import (
    DiscoveredFeature,
    ExecutionSummary,
    TestCase,
    TestExecutionResult,
)
from uiscout.models.run_models import CompleteRunResult, DiscoveryResult, PageStructure
from uiscout.reporting.statistics import calculate_statistics
from uiscout.synthesis.synthesizer import TestCaseSynthesizer

logger = logging.getLogger(__name__)


class FeatureDiscoveryCoordinator:
    """Coordinate discovery, analysis, synthesis and execution on one page.

    Example:
        coordinator = FeatureDiscoveryCoordinator(PlaywrightPage(page), config)
        run = await coordinator.run_complete()
        print(run.summary.success_rate)
    """

    def __init__(self, page: PageCapability, config: Optional[ScoutConfig] = None):
        """Initialize the coordinator.

        Args:
            page: Page capability for the page under test
            config: Scout configuration
        """
        self.page = page
        self.config = config or ScoutConfig()

        self.aggregator = DiscoveryAggregator(page, self.config)
        self.analyzer = PageStructureAnalyzer(page)
        self.synthesizer = TestCaseSynthesizer()
        self.executor = TestExecutor(page, self.config)

        logger.info("FeatureDiscoveryCoordinator initialized")

    async def discover_features(self) -> DiscoveryResult:
        """Discover features, including dynamic ones when enabled.

        Returns:
            Discovery result with per-type counts

        Raises:
            PageUnavailableError: If the page went away during discovery
        """
        features = await self.aggregator.discover_all()

        if self.config.include_dynamic:
            features = features + await self.aggregator.discover_dynamic(features)

        return DiscoveryResult.from_features(features)

    async def generate_tests(self, features: List[DiscoveredFeature]) -> List[TestCase]:
        """Synthesize test cases without executing them."""
        return self.synthesizer.synthesize_all(features)

    async def execute_tests(self, test_cases: List[TestCase]) -> List[TestExecutionResult]:
        """Replay test cases; failures are recorded, never raised."""
        return await self.executor.execute_test_cases(test_cases)

    async def analyze_page(self) -> PageStructure:
        """Analyze page structure."""
        return await self.analyzer.analyze()

    async def run_complete(self) -> CompleteRunResult:
        """Run discovery, analysis, synthesis and (optionally) execution.

        Returns:
            Complete run result with summary and statistics

        Raises:
            PageUnavailableError: If the page went away before execution
        """
        started_at = datetime.now()
        url = await self.page.url()
        logger.info(f"Starting complete run for {url}")

        discovery = await self.discover_features()
        structure = await self.analyze_page()
        test_cases = await self.generate_tests(discovery.features)

        results: List[TestExecutionResult] = []
        if self.config.execute_tests:
            results = await self.execute_tests(test_cases)
        else:
            logger.info("Test execution disabled, skipping")

        run = CompleteRunResult(
            url=url,
            started_at=started_at,
            discovery=discovery,
            structure=structure,
            test_cases=test_cases,
            results=results,
            executed=self.config.execute_tests,
            summary=ExecutionSummary.from_results(results),
            statistics=calculate_statistics(discovery.features),
        )

        logger.info(
            f"Complete run finished: {discovery.count} features, "
            f"{len(test_cases)} test cases, {run.summary.passed}/{run.summary.total} passed"
        )
        return run
