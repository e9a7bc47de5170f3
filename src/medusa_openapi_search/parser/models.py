"""Typed models for operations parsed from an OpenAPI document."""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field


class HttpMethod(str, Enum):
    """HTTP methods indexed from OpenAPI path items."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"

    @classmethod
    def from_value(cls, value: Any) -> Optional["HttpMethod"]:
        """Return the method for a case-insensitive name, or None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Order in which methods are read from a path item
INDEXED_METHODS: Tuple[HttpMethod, ...] = tuple(HttpMethod)


class ParameterLocation(str, Enum):
    """Parameter locations in OpenAPI."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class Parameter(BaseModel):
    """A single operation parameter."""

    name: str = Field(..., description="Parameter name")
    location: ParameterLocation = Field(
        ..., alias="in", description="Parameter location"
    )
    required: Optional[bool] = Field(None, description="Whether parameter is required")
    description: Optional[str] = Field(None, description="Parameter description")
    schema_: Optional[Dict[str, Any]] = Field(
        None, alias="schema", description="Parameter schema"
    )

    class Config:
        frozen = True
        populate_by_name = True

    @property
    def schema_type(self) -> Optional[str]:
        """Declared schema type, if any."""
        if self.schema_ and isinstance(self.schema_.get("type"), str):
            return self.schema_["type"]
        return None


class Operation(BaseModel):
    """One REST endpoint definition (method + path) from the catalog."""

    operation_id: str = Field(..., alias="operationId")
    method: HttpMethod = Field(..., description="HTTP method")
    path: str = Field(..., description="URL template")
    summary: Optional[str] = Field(None, description="Brief operation summary")
    description: Optional[str] = Field(None, description="Detailed description")
    tags: Tuple[str, ...] = Field(default=(), description="Operation tags")
    parameters: Tuple[Parameter, ...] = Field(
        default=(), description="Path-level then operation-level parameters"
    )
    request_body: Optional[Any] = Field(
        None, alias="requestBody", description="Raw requestBody fragment"
    )

    class Config:
        frozen = True
        populate_by_name = True

    def parameters_in(self, location: ParameterLocation) -> Tuple[Parameter, ...]:
        """Parameters declared at the given location, in declaration order."""
        return tuple(p for p in self.parameters if p.location == location)
