"""OpenAPI operation search and ranking for the Medusa admin assistant."""

from .__version__ import __version__

__all__ = ["__version__"]
