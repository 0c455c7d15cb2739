"""Page structure analysis."""

from .page_structure import PageStructureAnalyzer

__all__ = ["PageStructureAnalyzer"]
