"""Request body schema helpers used by the schema tool."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set

_SCHEMA_REF = re.compile(r"^#/components/schemas/(.+)$")


@dataclass
class BodyMetadata:
    """Field-level hints collected from a request body schema."""

    examples: Dict[str, Any] = field(default_factory=dict)
    enums: Dict[str, List[Any]] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    read_only_fields: List[str] = field(default_factory=list)


def resolve_schema(document: Mapping[str, Any], node: Any) -> Any:
    """Resolve a single ``#/components/schemas/<Name>`` reference.

    Anything that is not such a reference, or points at a missing component,
    is returned unchanged.
    """
    if not isinstance(node, Mapping):
        return node
    ref = node.get("$ref")
    if not isinstance(ref, str):
        return node
    match = _SCHEMA_REF.match(ref)
    if not match:
        return node

    components = document.get("components")
    schemas = components.get("schemas") if isinstance(components, Mapping) else None
    if not isinstance(schemas, Mapping):
        return node
    return schemas.get(match.group(1), node)


def collect_body_metadata(document: Mapping[str, Any], schema: Any) -> BodyMetadata:
    """Collect examples, enums, required and read-only field paths from a schema.

    Field paths are dotted (``address.city``); array items append ``[]``.

    Args:
        document: OpenAPI document used for ``$ref`` resolution
        schema: Request body schema (possibly a reference)

    Returns:
        BodyMetadata keyed by field path
    """
    collector = _BodyMetadataCollector(document)
    collector.walk(schema, "", None, frozenset())
    return BodyMetadata(
        examples=collector.examples,
        enums=collector.enums,
        required=list(collector.required),
        read_only_fields=list(collector.read_only),
    )


class _BodyMetadataCollector:
    def __init__(self, document: Mapping[str, Any]):
        self.document = document
        self.examples: Dict[str, Any] = {}
        self.enums: Dict[str, List[Any]] = {}
        # dicts keep first-seen order
        self.required: Dict[str, None] = {}
        self.read_only: Dict[str, None] = {}

    def walk(
        self,
        schema: Any,
        path: str,
        parent_required: Optional[Set[str]],
        seen_refs: frozenset,
    ) -> None:
        ref = schema.get("$ref") if isinstance(schema, Mapping) else None
        if isinstance(ref, str):
            if ref in seen_refs:
                return
            seen_refs = seen_refs | {ref}

        node = resolve_schema(self.document, schema)
        if not isinstance(node, Mapping):
            return

        declared = node.get("required")
        current_required = set(parent_required or ())
        if isinstance(declared, list):
            current_required.update(name for name in declared if isinstance(name, str))

        properties = node.get("properties")
        if isinstance(properties, Mapping):
            for key, value in properties.items():
                next_path = f"{path}.{key}" if path else str(key)
                resolved = resolve_schema(self.document, value)
                if key in current_required:
                    self.required[next_path] = None
                self._record(resolved, next_path)
                self.walk(value, next_path, current_required, seen_refs)

        items = node.get("items")
        if node.get("type") == "array" and items:
            array_path = f"{path}[]" if path else "[]"
            self._record(node, array_path)
            self.walk(items, array_path, parent_required, seen_refs)

        for child in _as_list(node.get("allOf")):
            self.walk(child, path, current_required, seen_refs)
        for combinator in ("oneOf", "anyOf"):
            for child in _as_list(node.get(combinator)):
                self.walk(child, path, parent_required, seen_refs)

    def _record(self, node: Any, path: str) -> None:
        if not isinstance(node, Mapping):
            return

        if "example" in node:
            self.examples[path] = node["example"]
        elif isinstance(node.get("examples"), list) and node["examples"]:
            self.examples[path] = node["examples"][0]

        enum = node.get("enum")
        if isinstance(enum, list) and enum:
            merged = self.enums.setdefault(path, [])
            for value in enum:
                if value not in merged:
                    merged.append(value)

        if node.get("readOnly") is True:
            self.read_only[path] = None


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []
