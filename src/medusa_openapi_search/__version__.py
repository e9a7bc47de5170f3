"""Version information for medusa-openapi-search."""

__version__ = "0.3.0"
