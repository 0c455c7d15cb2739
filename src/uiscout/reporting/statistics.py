"""Feature catalogue statistics."""

from typing import Dict, List

from uiscout.models.feature_models import DiscoveredFeature, DiscoveryStatistics


def calculate_statistics(features: List[DiscoveredFeature]) -> DiscoveryStatistics:
    """
    Count features by type and by the kind of metadata they carry.

    Args:
        features: Discovered features

    Returns:
        DiscoveryStatistics with per-type counts, interactive features (any
        declared action), features with text, and features with attributes
    """
    by_type: Dict[str, int] = {}
    for feature in features:
        by_type[feature.type.value] = by_type.get(feature.type.value, 0) + 1

    return DiscoveryStatistics(
        by_type=by_type,
        interactive=sum(1 for f in features if f.actions),
        with_text=sum(1 for f in features if f.text),
        with_attributes=sum(1 for f in features if f.attributes),
    )
