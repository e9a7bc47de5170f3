"""Pre-tokenized search state for catalog operations."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..parser.models import HttpMethod, Operation
from .tokenizer import tokenize


class SearchField(str, Enum):
    """Operation fields that take part in scoring."""

    OPERATION_ID = "operationId"
    SUMMARY = "summary"
    DESCRIPTION = "description"
    PATH = "path"
    TAGS = "tags"


@dataclass(frozen=True)
class TokenizedField:
    """One searchable field with its tokens and first-occurrence positions."""

    field: SearchField
    original: str
    tokens: Tuple[str, ...]
    token_set: frozenset
    first_index: Mapping[str, int]

    @classmethod
    def build(cls, field: SearchField, value: Union[str, Sequence[str]]) -> "TokenizedField":
        original = value if isinstance(value, str) else " ".join(value)
        tokens = tuple(tokenize(original, preserve_stopwords=True))
        first_index = {}
        for position, token in enumerate(tokens):
            first_index.setdefault(token, position)
        return cls(
            field=field,
            original=original,
            tokens=tokens,
            token_set=frozenset(tokens),
            first_index=MappingProxyType(first_index),
        )


@dataclass(frozen=True)
class IndexedOperation:
    """An operation together with the search state derived from it."""

    operation: Operation
    fields: Tuple[TokenizedField, ...]
    normalized_operation_id: str

    @property
    def operation_id(self) -> str:
        return self.operation.operation_id

    @property
    def method(self) -> HttpMethod:
        return self.operation.method

    @property
    def tags(self) -> Tuple[str, ...]:
        return self.operation.tags

    def get_field(self, field: SearchField) -> Optional[TokenizedField]:
        for entry in self.fields:
            if entry.field == field:
                return entry
        return None


def build_indexed_operation(operation: Operation) -> IndexedOperation:
    """Tokenize an operation's searchable fields.

    Stopwords are kept in every field; they are discounted at scoring time.
    Empty fields are left out.
    """
    candidates = (
        (SearchField.OPERATION_ID, operation.operation_id),
        (SearchField.SUMMARY, operation.summary),
        (SearchField.DESCRIPTION, operation.description),
        (SearchField.PATH, operation.path),
        (SearchField.TAGS, operation.tags),
    )
    fields = tuple(
        TokenizedField.build(field, value) for field, value in candidates if value
    )

    operation_id_field = next(
        (entry for entry in fields if entry.field == SearchField.OPERATION_ID), None
    )
    normalized_operation_id = (
        "".join(operation_id_field.tokens) if operation_id_field else ""
    )

    return IndexedOperation(
        operation=operation,
        fields=fields,
        normalized_operation_id=normalized_operation_id,
    )


def build_index(operations: Iterable[Operation]) -> List[IndexedOperation]:
    """Index operations, preserving their order."""
    return [build_indexed_operation(operation) for operation in operations]
