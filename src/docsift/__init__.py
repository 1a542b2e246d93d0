"""docsift: search relevance and term highlighting for documentation sites."""

__version__ = "0.1.0"
