"""Operation catalog and the registry handle that serves it.

``OperationCatalog`` is an immutable snapshot of an indexed OpenAPI
document. ``OpenApiRegistry`` owns the current snapshot; reloading builds a
complete new catalog before swapping the reference, so concurrent readers
always see either the old or the new catalog in full.
"""

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..config.logging import get_logger, log_indexing_summary, log_performance
from ..config.settings import SearchConfig
from ..parser.models import HttpMethod, Operation, Parameter, ParameterLocation
from ..parser.openapi_parser import load_openapi_document, parse_document
from .debug import log_search_invocation, log_search_results
from .indexing import IndexedOperation, build_indexed_operation
from .query_processor import build_query_context
from .relevance import OperationScore, RelevanceScorer, ScoreDetail

logger = get_logger(__name__)

MethodFilter = Union[HttpMethod, str]


@dataclass
class SearchOptions:
    """Filters and limit for a search call. Empty filters mean no filtering."""

    tags: Optional[Sequence[str]] = None
    methods: Optional[Sequence[MethodFilter]] = None
    limit: Optional[int] = None


@dataclass
class ScoredOperation:
    """A search hit with its score breakdown."""

    operation: Operation
    score: float
    details: List[ScoreDetail] = field(default_factory=list)


@dataclass
class OperationSchemas:
    """Parameters of an operation partitioned by location, plus its JSON body schema."""

    path_params: List[Parameter]
    query_params: List[Parameter]
    header_params: List[Parameter]
    request_body_schema: Optional[Any] = None


class OperationCatalog:
    """Immutable, searchable set of indexed operations."""

    def __init__(
        self,
        indexed_operations: Iterable[IndexedOperation],
        config: Optional[SearchConfig] = None,
        document: Optional[Mapping[str, Any]] = None,
        skipped_entries: int = 0,
    ):
        """Initialize the catalog.

        Args:
            indexed_operations: Operations in document order
            config: Search configuration, defaults to ``SearchConfig()``
            document: Source document, kept for ``$ref`` resolution by callers
            skipped_entries: Malformed entries dropped while parsing
        """
        self.config = config or SearchConfig()
        self.document: Mapping[str, Any] = document or {}
        self.skipped_entries = skipped_entries
        self._operations: Tuple[IndexedOperation, ...] = tuple(indexed_operations)
        self._stopwords = frozenset(self.config.stopwords)
        self._scorer = RelevanceScorer(self.config.scoring, self._stopwords)

        by_id: Dict[str, IndexedOperation] = {}
        for entry in self._operations:
            by_id.setdefault(entry.operation_id, entry)
        self._by_id = by_id

    @classmethod
    def from_document(
        cls, document: Mapping[str, Any], config: Optional[SearchConfig] = None
    ) -> "OperationCatalog":
        """Parse and index an in-memory OpenAPI document."""
        start_time = time.perf_counter()
        parsed = parse_document(document)
        catalog = cls(
            (build_indexed_operation(op) for op in parsed.operations),
            config=config,
            document=document,
            skipped_entries=parsed.skipped,
        )
        log_indexing_summary(
            logger,
            operations_indexed=len(catalog),
            entries_skipped=parsed.skipped,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 3),
        )
        return catalog

    @classmethod
    def from_operations(
        cls, operations: Iterable[Operation], config: Optional[SearchConfig] = None
    ) -> "OperationCatalog":
        """Index already-parsed operations."""
        return cls((build_indexed_operation(op) for op in operations), config=config)

    def __len__(self) -> int:
        return len(self._operations)

    @property
    def indexed_operations(self) -> Tuple[IndexedOperation, ...]:
        return self._operations

    def list(self) -> List[Operation]:
        """All operations in document order."""
        return [entry.operation for entry in self._operations]

    def get_by_operation_id(self, operation_id: str) -> Optional[Operation]:
        """Return the operation with exactly this id, or None."""
        entry = self._by_id.get(operation_id)
        return entry.operation if entry else None

    def search(
        self,
        query: str,
        tags: Optional[Sequence[str]] = None,
        methods: Optional[Sequence[MethodFilter]] = None,
        limit: Optional[int] = None,
    ) -> List[Operation]:
        """Rank operations against a natural-language query.

        Args:
            query: Free-text query
            tags: Keep operations with at least one of these tags (case-insensitive)
            methods: Keep operations using one of these HTTP methods
            limit: Maximum results, ``config.default_limit`` when None

        Returns:
            Matching operations, best first; equal scores ordered by operationId
        """
        return [
            hit.operation
            for hit in self.search_scored(query, tags=tags, methods=methods, limit=limit)
        ]

    def search_scored(
        self,
        query: str,
        tags: Optional[Sequence[str]] = None,
        methods: Optional[Sequence[MethodFilter]] = None,
        limit: Optional[int] = None,
    ) -> List[ScoredOperation]:
        """Same as ``search`` but keeps scores and per-field details."""
        options = SearchOptions(tags=tags, methods=methods, limit=limit)
        context = build_query_context(query, self._stopwords)

        if self.config.debug:
            log_search_invocation(query, context.tokens, options)

        tag_filter = {tag.lower() for tag in (tags or ()) if isinstance(tag, str)}
        method_filter = {_method_name(method) for method in (methods or ())}

        hits: List[ScoredOperation] = []
        for entry in self._operations:
            if tag_filter and not any(tag.lower() in tag_filter for tag in entry.tags):
                continue
            if method_filter and entry.method.value not in method_filter:
                continue

            result = self._scorer.score(entry, context)
            if context.token_count and not result.matched:
                continue
            hits.append(
                ScoredOperation(
                    operation=entry.operation,
                    score=result.score,
                    details=result.details,
                )
            )

        hits.sort(key=lambda hit: (-hit.score, hit.operation.operation_id))

        if self.config.debug:
            log_search_results(hits, self.config.debug_max_lines)

        effective_limit = self.config.default_limit if limit is None else max(0, limit)
        return hits[:effective_limit]

    def explain(self, query: str, operation_id: str) -> Optional[OperationScore]:
        """Score a single operation against a query, ignoring filters."""
        entry = self._by_id.get(operation_id)
        if entry is None:
            return None
        return self._scorer.score(entry, build_query_context(query, self._stopwords))

    def get_schemas(self, operation_id: str) -> Optional[OperationSchemas]:
        """Partition an operation's parameters by location.

        Path-level and operation-level parameters are not de-duplicated, so a
        name declared at both levels appears twice.
        """
        operation = self.get_by_operation_id(operation_id)
        if operation is None:
            return None

        return OperationSchemas(
            path_params=list(operation.parameters_in(ParameterLocation.PATH)),
            query_params=list(operation.parameters_in(ParameterLocation.QUERY)),
            header_params=list(operation.parameters_in(ParameterLocation.HEADER)),
            request_body_schema=_json_body_schema(operation.request_body),
        )


class OpenApiRegistry:
    """Handle to the current operation catalog.

    Reads go to whichever catalog is current when the call starts. ``reload``
    replaces the catalog as a whole.
    """

    def __init__(self, catalog: OperationCatalog):
        self._catalog = catalog
        self._lock = threading.Lock()

    @classmethod
    def from_document(
        cls, document: Mapping[str, Any], config: Optional[SearchConfig] = None
    ) -> "OpenApiRegistry":
        return cls(OperationCatalog.from_document(document, config))

    @classmethod
    def from_file(
        cls, file_path: Union[str, Path], config: Optional[SearchConfig] = None
    ) -> "OpenApiRegistry":
        return cls.from_document(load_openapi_document(file_path), config)

    @property
    def catalog(self) -> OperationCatalog:
        return self._catalog

    @property
    def document(self) -> Mapping[str, Any]:
        return self._catalog.document

    def reload(
        self, document: Mapping[str, Any], config: Optional[SearchConfig] = None
    ) -> OperationCatalog:
        """Index a new document and make it the current catalog.

        Args:
            document: Replacement OpenAPI document
            config: Search configuration, defaults to the current catalog's

        Returns:
            The newly published catalog
        """
        start_time = time.perf_counter()
        catalog = OperationCatalog.from_document(
            document, config or self._catalog.config
        )
        with self._lock:
            previous = self._catalog
            self._catalog = catalog
        log_performance(
            logger,
            "catalog_reload",
            round((time.perf_counter() - start_time) * 1000, 3),
            previous_operations=len(previous),
            operations=len(catalog),
        )
        return catalog

    def list(self) -> List[Operation]:
        return self._catalog.list()

    def get_by_operation_id(self, operation_id: str) -> Optional[Operation]:
        return self._catalog.get_by_operation_id(operation_id)

    def search(
        self,
        query: str,
        tags: Optional[Sequence[str]] = None,
        methods: Optional[Sequence[MethodFilter]] = None,
        limit: Optional[int] = None,
    ) -> List[Operation]:
        return self._catalog.search(query, tags=tags, methods=methods, limit=limit)

    def search_scored(
        self,
        query: str,
        tags: Optional[Sequence[str]] = None,
        methods: Optional[Sequence[MethodFilter]] = None,
        limit: Optional[int] = None,
    ) -> List[ScoredOperation]:
        return self._catalog.search_scored(query, tags=tags, methods=methods, limit=limit)

    def explain(self, query: str, operation_id: str) -> Optional[OperationScore]:
        return self._catalog.explain(query, operation_id)

    def get_schemas(self, operation_id: str) -> Optional[OperationSchemas]:
        return self._catalog.get_schemas(operation_id)


def _method_name(method: MethodFilter) -> str:
    if isinstance(method, HttpMethod):
        return method.value
    return str(method).strip().lower()


def _json_body_schema(request_body: Any) -> Optional[Any]:
    if not isinstance(request_body, Mapping):
        return None
    content = request_body.get("content")
    if not isinstance(content, Mapping):
        return None
    media = content.get("application/json")
    if not isinstance(media, Mapping):
        return None
    return media.get("schema")
