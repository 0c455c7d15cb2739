"""Replay of synthesized test cases against a live page.

This module provides the TestExecutor class which runs each test case's steps
and then its assertions, classifying the case as passed or failed.

PATTERN: Every case runs in its own try/except so one failure never aborts
the batch
CRITICAL: The failure screenshot is best effort; its own failure is swallowed
"""

import logging
import re
import time
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from uiscout.browser.page_capability import PageCapability
from uiscout.config.settings import ScoutConfig
from uiscout.errors import (
    AssertionFailedError,
    StepExecutionError,
    UnknownActionError,
    UnknownAssertionError,
)
from uiscout.models.feature_models import (
    Assertion,
    AssertionType,
    ExecutionSummary,
    StepAction,
    TestCase,
    TestExecutionResult,
    TestStep,
)

logger = logging.getLogger(__name__)


class TestExecutor:
    """Execute test cases step by step and record their outcomes.

    State per case: pending, running steps, verifying assertions, then passed
    or failed.
    """

    DEFAULT_PRESS_KEY = "Enter"

    def __init__(self, page: PageCapability, config: Optional[ScoutConfig] = None):
        """Initialize the executor.

        Args:
            page: Page capability to drive
            config: Scout configuration (settle delay, screenshot directory)
        """
        self.page = page
        self.config = config or ScoutConfig()
        self.screenshot_dir = Path(self.config.screenshot_dir)

    async def execute_test_cases(
        self, test_cases: List[TestCase]
    ) -> List[TestExecutionResult]:
        """Execute a batch of test cases in order.

        Args:
            test_cases: Test cases to replay

        Returns:
            One result per test case, in the same order
        """
        logger.info(f"Executing {len(test_cases)} test cases")
        results: List[TestExecutionResult] = []

        for test_case in test_cases:
            result = await self.execute_test_case(test_case)
            results.append(result)
            if result.success:
                logger.info(f"Test PASSED: {test_case.feature.name}")
            else:
                logger.info(f"Test FAILED: {test_case.feature.name} - {result.error}")

        self.summarize(results)
        return results

    async def execute_test_case(self, test_case: TestCase) -> TestExecutionResult:
        """Execute one test case.

        Args:
            test_case: Test case to replay

        Returns:
            Result with error and screenshot set only on failure
        """
        start_time = datetime.now()
        logger.debug(f"Testing: {test_case.feature.name}")

        try:
            for step in test_case.steps:
                await self.execute_step(step)

            for assertion in test_case.assertions:
                await self.verify_assertion(assertion)

            return TestExecutionResult(
                test_case=test_case,
                success=True,
                duration=self._elapsed_ms(start_time),
            )

        except Exception as e:
            screenshot = await self._failure_screenshot(test_case.feature.name)
            return TestExecutionResult(
                test_case=test_case,
                success=False,
                duration=self._elapsed_ms(start_time),
                error=str(e) or type(e).__name__,
                screenshot=screenshot,
            )

    async def execute_step(self, step: TestStep) -> None:
        """Dispatch one step and wait for the UI to settle.

        Raises:
            UnknownActionError: If the action has no handler
            StepExecutionError: If the interaction fails
        """
        try:
            action = StepAction(step.action)
        except ValueError:
            raise UnknownActionError(step.action)

        try:
            element = await self._locate(step.selector)

            if action == StepAction.CLICK:
                await self.page.click(element)
            elif action == StepAction.FILL:
                await self.page.fill(element, step.value or "")
            elif action == StepAction.HOVER:
                await self.page.hover(element)
            elif action == StepAction.FOCUS:
                await self.page.focus(element)
            elif action == StepAction.SELECT:
                await self.page.select(element, step.value or "")
            elif action == StepAction.CHECK:
                await self.page.check(element)
            elif action == StepAction.UNCHECK:
                await self.page.uncheck(element)
            elif action == StepAction.PRESS:
                await self.page.press(element, step.value or self.DEFAULT_PRESS_KEY)
            elif action == StepAction.SCREENSHOT:
                await self._element_screenshot(element)
        except Exception as e:
            raise StepExecutionError(step, e) from e

        await self.page.wait_for_timeout(self.config.step_settle_ms)

    async def verify_assertion(self, assertion: Assertion) -> None:
        """Verify one assertion.

        Raises:
            UnknownAssertionError: If the assertion type has no verifier
            AssertionFailedError: If the assertion does not hold
        """
        try:
            assertion_type = AssertionType(assertion.type)
        except ValueError:
            raise UnknownAssertionError(assertion.type)

        timeout_ms = self.config.visibility_timeout_ms

        if assertion_type == AssertionType.VISIBLE:
            if await self.page.first_visible(assertion.selector, timeout_ms) is None:
                raise AssertionFailedError(assertion, message="element is not visible")

        elif assertion_type == AssertionType.HIDDEN:
            element = await self.page.first(assertion.selector)
            if element is not None and await self.page.is_visible(element, 0):
                raise AssertionFailedError(assertion, message="element is visible")

        elif assertion_type == AssertionType.ENABLED:
            element = await self._locate(assertion.selector)
            if not await self.page.is_enabled(element, timeout_ms):
                raise AssertionFailedError(assertion, message="element is disabled")

        elif assertion_type == AssertionType.DISABLED:
            element = await self._locate(assertion.selector)
            if await self.page.is_enabled(element, timeout_ms):
                raise AssertionFailedError(assertion, message="element is enabled")

        elif assertion_type == AssertionType.TEXT:
            element = await self._locate(assertion.selector)
            actual = (await self.page.text_content(element) or "").strip()
            if actual != str(assertion.expected).strip():
                raise AssertionFailedError(assertion, actual)

        elif assertion_type == AssertionType.COUNT:
            actual = await self.page.count(assertion.selector)
            if actual != int(assertion.expected):
                raise AssertionFailedError(assertion, actual)

        elif assertion_type == AssertionType.ATTRIBUTE:
            element = await self._locate(assertion.selector)
            # Boolean expectations verify checked state of checkboxes and radios
            if isinstance(assertion.expected, bool):
                actual = await self.page.is_checked(element)
                matched = actual == assertion.expected
            else:
                actual = await self.page.value_of(element)
                matched = actual == str(assertion.expected)
            if not matched:
                raise AssertionFailedError(assertion, actual)

        elif assertion_type == AssertionType.CLASS:
            element = await self._locate(assertion.selector)
            class_name = await self.page.get_attribute(element, "class") or ""
            if str(assertion.expected) not in class_name.split():
                raise AssertionFailedError(assertion, class_name)

    def summarize(self, results: List[TestExecutionResult]) -> ExecutionSummary:
        """Aggregate pass/fail counts and log them.

        Args:
            results: Results of a batch

        Returns:
            Execution summary
        """
        summary = ExecutionSummary.from_results(results)
        logger.info(
            f"Test execution summary: {summary.passed}/{summary.total} passed, "
            f"{summary.failed} failed ({summary.success_rate:.1f}%)"
        )
        return summary

    async def _locate(self, selector: str) -> Any:
        element = await self.page.first(selector)
        if element is None:
            raise LookupError(f"No element matches {selector}")
        return element

    async def _element_screenshot(self, element: Any) -> None:
        try:
            self.screenshot_dir.mkdir(parents=True, exist_ok=True)
            path = self.screenshot_dir / f"element-{int(time.time() * 1000)}.png"
            await self.page.screenshot(element, str(path))
        except Exception as e:
            logger.warning(f"Element screenshot failed: {e}")

    async def _failure_screenshot(self, test_name: str) -> Optional[str]:
        try:
            self.screenshot_dir.mkdir(parents=True, exist_ok=True)
            filename = f"{re.sub(r'[^a-zA-Z0-9]', '_', test_name)}_{int(time.time() * 1000)}.png"
            path = self.screenshot_dir / filename
            await self.page.take_screenshot(str(path))
            return str(path)
        except Exception as e:
            logger.warning(f"Failure screenshot for {test_name} failed: {e}")
            return None

    def _elapsed_ms(self, start_time: datetime) -> float:
        return max(0.0, (datetime.now() - start_time).total_seconds() * 1000)
