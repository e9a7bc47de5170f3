"""OpenAPI document parsing into typed operations."""

from .models import HttpMethod, Operation, Parameter, ParameterLocation
from .openapi_parser import (
    OpenApiDocumentError,
    load_openapi_document,
    parse_document,
    parse_operations,
    parse_path_item,
)

__all__ = [
    "HttpMethod",
    "Operation",
    "Parameter",
    "ParameterLocation",
    "OpenApiDocumentError",
    "load_openapi_document",
    "parse_document",
    "parse_operations",
    "parse_path_item",
]
