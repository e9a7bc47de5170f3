"""Application configuration settings."""

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_STOPWORDS = [
    "a",
    "about",
    "an",
    "and",
    "for",
    "from",
    "get",
    "gets",
    "give",
    "list",
    "lists",
    "me",
    "of",
    "or",
    "show",
    "shows",
    "tell",
    "the",
    "to",
    "what",
    "when",
    "where",
    "which",
    "with",
]


class LoggingConfig(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Log level")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    json_format: bool = Field(default=True, description="Use JSON log format")
    enable_performance: bool = Field(
        default=True, description="Enable performance logging"
    )

    class Config:
        env_prefix = "LOG_"


class ScoringConfig(BaseSettings):
    """Ranking constants for the operation scorer.

    The defaults are empirically tuned; they are kept as configuration so
    they can be adjusted without touching the scorer.
    """

    operation_id_weight: float = Field(default=3.0, description="operationId weight")
    summary_weight: float = Field(default=2.5, description="Summary weight")
    tags_weight: float = Field(default=2.0, description="Tags weight")
    description_weight: float = Field(default=1.0, description="Description weight")
    path_weight: float = Field(default=1.0, description="Path weight")

    stopword_token_weight: float = Field(
        default=0.25, description="Weight of a matching stopword token"
    )
    proximity_min_tokens: int = Field(
        default=2, description="Non-stopword tokens needed for proximity bonus"
    )
    proximity_window_factor: int = Field(
        default=2, description="Allowed span per non-stopword token"
    )
    proximity_boost: float = Field(default=1.2, description="Proximity multiplier")
    prefix_boost: float = Field(
        default=1.15, description="operationId prefix multiplier"
    )
    description_length_threshold: int = Field(
        default=30, description="Description tokens before penalty applies"
    )
    description_length_penalty_step: float = Field(
        default=0.01, description="Penalty per token over the threshold"
    )
    description_length_penalty_cap: float = Field(
        default=0.3, description="Maximum description length penalty"
    )

    class Config:
        env_prefix = "SEARCH_SCORING_"

    def field_weight(self, field_name: str) -> float:
        """Get the base weight for a searchable field name."""
        weights = {
            "operationId": self.operation_id_weight,
            "summary": self.summary_weight,
            "tags": self.tags_weight,
            "description": self.description_weight,
            "path": self.path_weight,
        }
        return weights.get(field_name, 1.0)


class SearchConfig(BaseSettings):
    """Search configuration settings."""

    default_limit: int = Field(default=10, description="Default result limit")
    max_tool_limit: int = Field(
        default=50, description="Largest limit accepted by the search tool"
    )
    debug: bool = Field(
        default=False, description="Log query tokens and top scored entries"
    )
    debug_max_lines: int = Field(
        default=5, description="Scored entries logged per debug search"
    )
    stopwords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_STOPWORDS),
        description="Low-information words discounted during scoring",
    )

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)

    class Config:
        env_prefix = "SEARCH_"


class ServerConfig(BaseSettings):
    """MCP tool server configuration settings."""

    name: str = Field(default="medusa-openapi-search", description="Server name")
    version: str = Field(default="0.3.0", description="Server version")
    openapi_path: Optional[str] = Field(
        default=None, description="OpenAPI document served by the tools"
    )

    class Config:
        env_prefix = "SERVER_"


class Settings(BaseSettings):
    """Main application settings."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    debug: bool = Field(default=False, description="Enable debug mode")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def get_log_file_path(self) -> Optional[Path]:
        """Get the log file path if configured."""
        if self.logging.file_path:
            return Path(self.logging.file_path)
        return None

    def get_openapi_path(self) -> Optional[Path]:
        """Get the configured OpenAPI document path."""
        if self.server.openapi_path:
            return Path(self.server.openapi_path)
        return None
