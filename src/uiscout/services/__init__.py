"""Service facades."""

from .discovery_coordinator import FeatureDiscoveryCoordinator

__all__ = ["FeatureDiscoveryCoordinator"]
