"""Test case replay."""

from .executor import TestExecutor

__all__ = ["TestExecutor"]
