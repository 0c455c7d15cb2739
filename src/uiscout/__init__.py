"""uiscout: discover interactive UI features on a live page and synthesize tests for them."""

__version__ = "0.1.0"
