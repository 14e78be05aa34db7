"""Travel content aggregation: places, guides, summaries and climate for a destination."""

__version__ = "0.1.0"
