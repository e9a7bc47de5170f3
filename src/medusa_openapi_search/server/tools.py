"""Agent-facing tools over the operation registry.

``openapi.search`` returns a compact projection of the best matching
operations; ``openapi.schema`` returns everything an agent needs to build a
request for one operation.
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from mcp import types

from ..config.settings import SearchConfig
from ..parser.models import HttpMethod, Operation, Parameter, ParameterLocation
from ..parser.schema_utils import collect_body_metadata
from ..search.registry import OpenApiRegistry
from .exceptions import ResourceNotFoundError, ValidationError

SEARCH_TOOL = "openapi.search"
SCHEMA_TOOL = "openapi.schema"

_PATH_TEMPLATE = re.compile(r"\{(.*?)\}")


def summarize_params(params: Sequence[Parameter]) -> List[Dict[str, Any]]:
    """Reduce parameters to name, location, required flag, type and description."""
    summaries = []
    for param in params:
        summary = {
            "name": param.name,
            "in": param.location.value,
            "required": param.required,
            "type": param.schema_type,
            "description": param.description,
        }
        summaries.append({k: v for k, v in summary.items() if v is not None})
    return summaries


def build_query_param_hints(operation: Operation) -> List[Dict[str, Any]]:
    """Describe filter operators accepted by object-typed query parameters.

    Medusa list endpoints take filters such as ``created_at[$gte]=...``; the
    operator keys are the ``$``-prefixed properties of the parameter schema.
    """
    hints = []
    for param in operation.parameters_in(ParameterLocation.QUERY):
        schema = param.schema_ or {}
        properties = schema.get("properties") if schema.get("type") == "object" else None
        if not isinstance(properties, Mapping):
            continue

        operators = [key for key in properties if key.startswith("$")]
        hint: Dict[str, Any] = {"name": param.name, "operators": operators}
        if "$gte" in operators or "$lte" in operators:
            hint["example"] = (
                f"{param.name}[$gte]=2025-01-01T00:00:00Z"
                f"&{param.name}[$lte]=2025-12-31T23:59:59Z"
            )
        elif "$eq" in operators:
            hint["example"] = f"{param.name}[$eq]=value"
        hints.append(hint)
    return hints


class OpenApiTools:
    """Validates tool arguments and shapes registry results for agents."""

    def __init__(self, registry: OpenApiRegistry, config: Optional[SearchConfig] = None):
        """Initialize the tools.

        Args:
            registry: Registry serving the current operation catalog
            config: Search configuration for default and maximum limits
        """
        self.registry = registry
        self.config = config or SearchConfig()
        self.handlers: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            SEARCH_TOOL: self.search_operations,
            SCHEMA_TOOL: self.get_operation_schema,
        }

    def tool_definitions(self) -> List[types.Tool]:
        """MCP tool definitions for the registered handlers."""
        return [
            types.Tool(
                name=SEARCH_TOOL,
                description=(
                    "Search Medusa admin OpenAPI operations by natural language. "
                    "Filters: tags, methods. Returns operation candidates."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "What the operation should do",
                            "minLength": 1,
                        },
                        "tags": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Only operations with one of these tags",
                        },
                        "methods": {
                            "type": "array",
                            "items": {
                                "type": "string",
                                "enum": [m.value for m in HttpMethod],
                            },
                            "description": "Only operations using these HTTP methods",
                        },
                        "limit": {
                            "type": "integer",
                            "minimum": 1,
                            "maximum": self.config.max_tool_limit,
                            "default": self.config.default_limit,
                        },
                    },
                    "required": ["query"],
                },
            ),
            types.Tool(
                name=SCHEMA_TOOL,
                description="Return parameter and body schemas for an operationId.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "operationId": {"type": "string", "minLength": 1},
                    },
                    "required": ["operationId"],
                },
            ),
        ]

    def search_operations(self, arguments: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Handle ``openapi.search``."""
        query = _require_string(arguments, "query")
        tags = _optional_string_list(arguments, "tags")
        methods = self._parse_methods(arguments.get("methods"))
        limit = self._parse_limit(arguments.get("limit"))

        results = self.registry.search(query, tags=tags, methods=methods, limit=limit)
        return [
            {
                "operationId": operation.operation_id,
                "method": operation.method.value,
                "path": operation.path,
                "summary": operation.summary,
                "tags": list(operation.tags),
                "pathParams": summarize_params(
                    operation.parameters_in(ParameterLocation.PATH)
                ),
                "queryParams": summarize_params(
                    operation.parameters_in(ParameterLocation.QUERY)
                ),
            }
            for operation in results
        ]

    def get_operation_schema(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Handle ``openapi.schema``."""
        operation_id = _require_string(arguments, "operationId")
        operation = self.registry.get_by_operation_id(operation_id)
        schemas = self.registry.get_schemas(operation_id)
        if operation is None or schemas is None:
            suggestions = [
                candidate.operation_id
                for candidate in self.registry.search(operation_id, limit=3)
            ]
            raise ResourceNotFoundError("operationId", operation_id, suggestions)

        example_path = _PATH_TEMPLATE.sub(r":\1", operation.path)
        query_param_hints = build_query_param_hints(operation)
        example_query = "&".join(
            hint["example"] for hint in query_param_hints if hint.get("example")
        )

        body_meta = None
        if schemas.request_body_schema:
            body_meta = collect_body_metadata(
                self.registry.document, schemas.request_body_schema
            )

        return {
            "operationId": operation.operation_id,
            "method": operation.method.value,
            "path": operation.path,
            "examplePath": example_path,
            "exampleUrl": f"{example_path}?{example_query}" if example_query else None,
            "summary": operation.summary,
            "description": operation.description,
            "tags": list(operation.tags),
            "pathParams": summarize_params(schemas.path_params),
            "queryParams": summarize_params(schemas.query_params),
            "headerParams": summarize_params(schemas.header_params),
            "requestBodySchema": schemas.request_body_schema,
            "queryParamHints": query_param_hints,
            "bodyFieldExamples": body_meta.examples if body_meta else {},
            "bodyFieldEnums": body_meta.enums if body_meta else {},
            "requiredBodyFields": body_meta.required if body_meta else [],
        }

    def _parse_methods(self, value: Any) -> Optional[List[HttpMethod]]:
        if value is None:
            return None
        if not isinstance(value, list):
            raise ValidationError("methods", "must be a list of HTTP methods", value)

        methods = []
        for raw in value:
            method = HttpMethod.from_value(raw)
            if method is None:
                raise ValidationError(
                    "methods",
                    "Invalid method",
                    raw,
                    suggestions=[m.value for m in HttpMethod],
                )
            methods.append(method)
        return methods

    def _parse_limit(self, value: Any) -> int:
        if value is None:
            return self.config.default_limit
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("limit", "must be an integer", value)
        if not 1 <= value <= self.config.max_tool_limit:
            raise ValidationError(
                "limit",
                f"must be between 1 and {self.config.max_tool_limit}",
                value,
            )
        return value


def _require_string(arguments: Mapping[str, Any], name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(name, "must be a non-empty string", value)
    return value


def _optional_string_list(arguments: Mapping[str, Any], name: str) -> Optional[List[str]]:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(name, "must be a list of strings", value)
    return value
