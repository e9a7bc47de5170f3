"""Per-search query context."""

import re
from dataclasses import dataclass
from typing import AbstractSet, List, Tuple

from .tokenizer import STOPWORDS, normalize_token, tokenize, tokenize_query

_IDENTIFIER_WORD = re.compile(r"[a-z0-9][A-Z]")


@dataclass(frozen=True)
class QueryContext:
    """Query representation shared by every operation scored in one search.

    Attributes:
        tokens: Normalized query tokens, stopwords included
        non_stop_tokens: ``tokens`` without stopwords; may be empty
        compact_query: The whole raw query reduced to ``[a-z0-9]`` characters,
            compared against normalized operation ids
    """

    tokens: Tuple[str, ...]
    non_stop_tokens: Tuple[str, ...]
    compact_query: str

    @property
    def token_count(self) -> int:
        return len(self.tokens)


def expand_identifier_words(query: str) -> List[str]:
    """Query tokens with camelCase words split the way operation ids are.

    A query such as ``"AdminGetPromotions"`` is an operation id typed
    verbatim; splitting it lets it match the tokenized operationId field.
    Queries without camelCase words tokenize exactly as ``tokenize_query``.
    """
    base = tokenize_query(query).tokens
    words = query.split()
    if not any(_IDENTIFIER_WORD.search(word) for word in words):
        return base

    tokens: List[str] = []
    for word in words:
        if _IDENTIFIER_WORD.search(word):
            tokens.extend(tokenize(word, preserve_stopwords=True))
        else:
            token = normalize_token(word)
            if token:
                tokens.append(token)
    return tokens or base


def build_query_context(
    query: str, stopwords: AbstractSet[str] = STOPWORDS
) -> QueryContext:
    """Build the context for a raw query string."""
    tokens = tuple(expand_identifier_words(query))
    return QueryContext(
        tokens=tokens,
        non_stop_tokens=tuple(token for token in tokens if token not in stopwords),
        compact_query=normalize_token(query),
    )
