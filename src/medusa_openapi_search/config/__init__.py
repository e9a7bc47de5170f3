"""Configuration package for the operation search engine."""

from .settings import (
    LoggingConfig,
    ScoringConfig,
    SearchConfig,
    ServerConfig,
    Settings,
)

__all__ = [
    "LoggingConfig",
    "ScoringConfig",
    "SearchConfig",
    "ServerConfig",
    "Settings",
]
