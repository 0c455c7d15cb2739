"""Test case synthesis."""

from .synthesizer import TestCaseSynthesizer

__all__ = ["TestCaseSynthesizer"]
