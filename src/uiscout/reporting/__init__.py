"""Report generation: pure functions from run artifacts to text."""

from .statistics import calculate_statistics
from .json_reporter import JsonReporter
from .markdown_reporter import MarkdownReporter
from .html_reporter import HtmlReporter

__all__ = ["calculate_statistics", "JsonReporter", "MarkdownReporter", "HtmlReporter"]
