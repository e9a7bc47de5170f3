"""Parsing of OpenAPI documents into typed operations.

All structural checks on the loosely-shaped document happen here. Anything
that does not look like a path item, an operation object or a parameter
object is dropped, so the rest of the package only ever sees ``Operation``
and ``Parameter`` models.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from medusa_openapi_search.config.logging import get_logger
from medusa_openapi_search.parser.models import (
    INDEXED_METHODS,
    HttpMethod,
    Operation,
    Parameter,
    ParameterLocation,
)

logger = get_logger(__name__)

_PARAMETER_REF_PREFIX = "#/components/parameters/"


class OpenApiDocumentError(Exception):
    """Raised when an OpenAPI document cannot be loaded at all."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.source = source
        self.suggestion = suggestion

    def __str__(self) -> str:
        if self.source:
            return f"{self.message} ({self.source})"
        return self.message


@dataclass
class PathItemParseResult:
    """Operations produced by one path item plus the entries that were dropped."""

    operations: List[Operation] = field(default_factory=list)
    skipped: int = 0


@dataclass
class DocumentParseResult:
    """Operations produced by a whole document, in document order."""

    operations: List[Operation] = field(default_factory=list)
    skipped: int = 0


def load_openapi_document(file_path: Union[str, Path]) -> Dict[str, Any]:
    """Load an OpenAPI document from a JSON or YAML file.

    Args:
        file_path: Path to a ``.json``, ``.yaml`` or ``.yml`` document

    Returns:
        The parsed document as a dictionary

    Raises:
        OpenApiDocumentError: If the file is missing, unparsable or not an object
    """
    path = Path(file_path)
    if not path.is_file():
        raise OpenApiDocumentError(
            "OpenAPI document not found",
            source=str(path),
            suggestion="Check the file path",
        )

    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()

    try:
        if suffix == ".json":
            document = json.loads(text)
        elif suffix in (".yaml", ".yml"):
            document = yaml.safe_load(text)
        else:
            try:
                document = json.loads(text)
            except json.JSONDecodeError:
                document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise OpenApiDocumentError(
            f"Failed to parse OpenAPI document: {e}",
            source=str(path),
            suggestion="Validate the JSON/YAML syntax",
        ) from e

    if not isinstance(document, dict):
        raise OpenApiDocumentError(
            "OpenAPI document must be an object at the top level",
            source=str(path),
        )

    logger.debug(
        "Loaded OpenAPI document",
        file_path=str(path),
        openapi=document.get("openapi"),
        path_count=len(document.get("paths") or {}),
    )
    return document


def parse_operations(document: Mapping[str, Any]) -> List[Operation]:
    """Parse every operation in ``document["paths"]`` in document order."""
    return parse_document(document).operations


def parse_document(document: Mapping[str, Any]) -> DocumentParseResult:
    """Parse a document's paths, counting the entries that had to be dropped."""
    result = DocumentParseResult()
    paths = document.get("paths") if isinstance(document, Mapping) else None
    if not isinstance(paths, Mapping):
        return result

    components = document.get("components")
    shared_parameters = (
        components.get("parameters") if isinstance(components, Mapping) else None
    )

    for path, path_item in paths.items():
        item_result = parse_path_item(str(path), path_item, shared_parameters)
        result.operations.extend(item_result.operations)
        result.skipped += item_result.skipped

    return result


def parse_path_item(
    path: str,
    path_item: Any,
    shared_parameters: Optional[Mapping[str, Any]] = None,
) -> PathItemParseResult:
    """Build operations for every HTTP method present on a path item.

    Path-level parameters come first, followed by the operation's own
    parameters. Parameters with the same name are not merged.

    Args:
        path: URL template the item is keyed by
        path_item: Raw path item value
        shared_parameters: ``components.parameters`` used to resolve ``$ref``

    Returns:
        PathItemParseResult with the operations and a count of dropped entries
    """
    result = PathItemParseResult()
    if not isinstance(path_item, Mapping):
        logger.debug("Skipping malformed path item", path=path)
        result.skipped += 1
        return result

    path_parameters = _parse_parameters(path_item.get("parameters"), shared_parameters)

    for method in INDEXED_METHODS:
        if method.value not in path_item:
            continue
        raw_operation = path_item[method.value]
        if not isinstance(raw_operation, Mapping):
            logger.debug(
                "Skipping malformed operation", path=path, method=method.value
            )
            result.skipped += 1
            continue

        parameters = path_parameters + _parse_parameters(
            raw_operation.get("parameters"), shared_parameters
        )
        result.operations.append(
            Operation(
                operation_id=_operation_id(raw_operation, method, path),
                method=method,
                path=path,
                summary=_text_or_none(raw_operation.get("summary")),
                description=_text_or_none(raw_operation.get("description")),
                tags=_parse_tags(raw_operation.get("tags")),
                parameters=parameters,
                request_body=raw_operation.get("requestBody"),
            )
        )

    return result


def _operation_id(raw_operation: Mapping[str, Any], method: HttpMethod, path: str) -> str:
    operation_id = raw_operation.get("operationId")
    if operation_id is None:
        return f"{method.value.upper()}_{path}"
    return str(operation_id)


def _text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _parse_tags(value: Any) -> tuple:
    if not isinstance(value, list):
        return ()
    return tuple(str(tag) for tag in value if tag is not None)


def _parse_parameters(
    value: Any, shared_parameters: Optional[Mapping[str, Any]]
) -> List[Parameter]:
    if not isinstance(value, list):
        return []

    parameters = []
    for raw in value:
        parameter = _parse_parameter(_resolve_parameter_ref(raw, shared_parameters))
        if parameter is not None:
            parameters.append(parameter)
    return parameters


def _resolve_parameter_ref(
    raw: Any, shared_parameters: Optional[Mapping[str, Any]]
) -> Any:
    if not isinstance(raw, Mapping) or not shared_parameters:
        return raw
    ref = raw.get("$ref")
    if isinstance(ref, str) and ref.startswith(_PARAMETER_REF_PREFIX):
        return shared_parameters.get(ref[len(_PARAMETER_REF_PREFIX):], raw)
    return raw


def _parse_parameter(raw: Any) -> Optional[Parameter]:
    if not isinstance(raw, Mapping):
        return None

    name = raw.get("name")
    location = raw.get("in")
    if not isinstance(name, str) or location not in {loc.value for loc in ParameterLocation}:
        logger.debug("Dropping malformed parameter", parameter=str(raw)[:200])
        return None

    required = raw.get("required")
    schema = raw.get("schema")
    return Parameter(
        name=name,
        location=ParameterLocation(location),
        required=required if isinstance(required, bool) else None,
        description=_text_or_none(raw.get("description")),
        schema_=schema if isinstance(schema, dict) else None,
    )
