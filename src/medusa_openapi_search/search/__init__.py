"""Operation search for the OpenAPI catalog.

Main components:
- tokenizer: normalization of metadata and queries into word tokens
- indexing: pre-tokenized operation fields
- relevance: field-weighted scoring with proximity, prefix and length adjustments
- registry: the searchable catalog and the handle that serves it
"""

from .indexing import (
    IndexedOperation,
    SearchField,
    TokenizedField,
    build_index,
    build_indexed_operation,
)
from .query_processor import QueryContext, build_query_context, expand_identifier_words
from .registry import (
    OpenApiRegistry,
    OperationCatalog,
    OperationSchemas,
    ScoredOperation,
    SearchOptions,
)
from .relevance import OperationScore, RelevanceScorer, ScoreDetail
from .tokenizer import STOPWORDS, normalize_token, tokenize, tokenize_query

__all__ = [
    "IndexedOperation",
    "SearchField",
    "TokenizedField",
    "build_index",
    "build_indexed_operation",
    "QueryContext",
    "build_query_context",
    "expand_identifier_words",
    "OpenApiRegistry",
    "OperationCatalog",
    "OperationSchemas",
    "ScoredOperation",
    "SearchOptions",
    "OperationScore",
    "RelevanceScorer",
    "ScoreDetail",
    "STOPWORDS",
    "normalize_token",
    "tokenize",
    "tokenize_query",
]
