"""Browser layer: page capability and its Playwright backend."""

from .page_capability import PageCapability

__all__ = ["PageCapability"]
