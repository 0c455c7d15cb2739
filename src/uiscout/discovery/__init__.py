"""Feature discovery: selector resolution, category scanners and aggregation."""

from .selector_resolver import SelectorResolver
from .aggregator import DiscoveryAggregator

__all__ = ["SelectorResolver", "DiscoveryAggregator"]
