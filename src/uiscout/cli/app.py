"""Main CLI application entry point."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from uiscout.browser.playwright_integration import PlaywrightManager
from uiscout.browser.playwright_page import PlaywrightPage
from uiscout.config.settings import ScoutConfig, load_config
from uiscout.models.run_models import CompleteRunResult
from uiscout.reporting.html_reporter import HtmlReporter
from uiscout.reporting.json_reporter import JsonReporter
from uiscout.reporting.markdown_reporter import MarkdownReporter
from uiscout.services.discovery_coordinator import FeatureDiscoveryCoordinator

logger = logging.getLogger(__name__)

JSON_REPORT_NAME = "feature-discovery-report.json"
MARKDOWN_REPORT_NAME = "test-report.md"
HTML_REPORT_NAME = "test-report.html"


@click.command()
@click.argument("url")
@click.option(
    "--config", "config_path",
    type=click.Path(),
    help="Config file path",
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    help="Directory for the JSON, Markdown and HTML reports",
)
@click.option(
    "--no-execute",
    is_flag=True,
    help="Synthesize test cases without replaying them",
)
@click.option(
    "--no-dynamic",
    is_flag=True,
    help="Skip hover-triggered dynamic discovery",
)
@click.option(
    "--headful",
    is_flag=True,
    help="Show the browser window",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose logging",
)
def main(
    url: str,
    config_path: Optional[str],
    output_dir: str,
    no_execute: bool,
    no_dynamic: bool,
    headful: bool,
    verbose: bool,
) -> None:
    """
    Discover the interactive features of a web page and test them.

    Full run:
        uiscout https://example.com

    Discovery and synthesis only:
        uiscout https://example.com --no-execute -o reports
    """
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = load_config(config_path)
    if no_execute:
        config.execute_tests = False
    if no_dynamic:
        config.include_dynamic = False
    if headful:
        config.headless = False

    console = Console()

    try:
        run = asyncio.run(run_discovery(url, config))
        json_path, markdown_path, html_path = write_reports(run, Path(output_dir))
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        if verbose:
            logger.exception("Discovery run failed")
        else:
            click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    render_summary(console, run)
    console.print(f"[dim]JSON report:[/dim] {json_path}")
    console.print(f"[dim]Markdown report:[/dim] {markdown_path}")
    console.print(f"[dim]HTML report:[/dim] {html_path}")


async def run_discovery(url: str, config: ScoutConfig) -> CompleteRunResult:
    """
    Open url in a fresh browser and run the complete pipeline.

    Args:
        url: Page to analyze
        config: Scout configuration

    Returns:
        Complete run result
    """
    async with PlaywrightManager(headless=config.headless) as manager:
        page = await manager.open_page(url, timeout=config.navigation_timeout_ms)
        coordinator = FeatureDiscoveryCoordinator(PlaywrightPage(page), config)
        return await coordinator.run_complete()


def write_reports(
    run: CompleteRunResult, output_dir: Path
) -> Tuple[Path, Path, Path]:
    """Write the JSON, Markdown and HTML reports of a run into output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)
    features = run.discovery.features

    json_path = output_dir / JSON_REPORT_NAME
    json_path.write_text(
        JsonReporter().generate_report(
            run.url,
            features,
            run.test_cases,
            run.results,
            timestamp=run.started_at,
        ),
        encoding="utf-8",
    )

    markdown_path = output_dir / MARKDOWN_REPORT_NAME
    markdown_path.write_text(
        MarkdownReporter().generate_report(
            features, run.test_cases, run.results, timestamp=run.started_at
        ),
        encoding="utf-8",
    )

    html_path = output_dir / HTML_REPORT_NAME
    html_path.write_text(
        HtmlReporter().generate_report(
            features, run.test_cases, run.results, timestamp=run.started_at
        ),
        encoding="utf-8",
    )

    logger.info(f"Reports written to {output_dir}")
    return json_path, markdown_path, html_path


def render_summary(console: Console, run: CompleteRunResult) -> None:
    """Print a summary table of a run."""
    table = Table(title=f"Feature Discovery: {run.url}", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    table.add_row("Features discovered", str(run.discovery.count))
    for feature_type, count in sorted(run.discovery.by_type.items()):
        table.add_row(f"  {feature_type}", str(count))
    table.add_row("Test cases", str(len(run.test_cases)))

    if run.executed:
        summary = run.summary
        table.add_row("Passed", f"[green]{summary.passed}[/green]")
        table.add_row("Failed", f"[red]{summary.failed}[/red]" if summary.failed else "0")
        table.add_row("Success rate", f"{summary.success_rate:.1f}%")
    else:
        table.add_row("Execution", "[yellow]skipped[/yellow]")

    console.print(table)
