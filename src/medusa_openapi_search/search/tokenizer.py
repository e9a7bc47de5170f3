"""Tokenization of operation metadata and free-text queries."""

import re
from dataclasses import dataclass
from typing import AbstractSet, Any, List

from ..config.settings import DEFAULT_STOPWORDS

STOPWORDS: frozenset = frozenset(DEFAULT_STOPWORDS)

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUMERIC_RUN = re.compile(r"[^a-zA-Z0-9]+")
_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class TokenizedQuery:
    """A query split into normalized tokens."""

    tokens: List[str]
    normalized: str
    original: str


def normalize_token(token: str) -> str:
    """Lowercase ``token`` and strip everything outside ``[a-z0-9]``."""
    return _NON_TOKEN_CHARS.sub("", token.lower())


def tokenize(
    value: Any,
    preserve_stopwords: bool = False,
    stopwords: AbstractSet[str] = STOPWORDS,
) -> List[str]:
    """Split a text-bearing value into normalized word tokens.

    camelCase boundaries and runs of punctuation both separate tokens, so
    ``"AdminGetPromotions"`` and ``"/admin/promotions"`` tokenize the way a
    reader would split them.

    Args:
        value: Any value; ``None`` yields no tokens
        preserve_stopwords: Keep stopwords in the result
        stopwords: Stopword set to filter with

    Returns:
        Tokens in order of appearance. When filtering would remove every
        token, the unfiltered tokens are returned instead.
    """
    if value is None:
        return []

    text = _CAMEL_BOUNDARY.sub(r"\1 \2", str(value))
    text = _NON_ALPHANUMERIC_RUN.sub(" ", text).lower()
    tokens = [token for token in (normalize_token(s) for s in text.split()) if token]

    if preserve_stopwords:
        return tokens

    filtered = [token for token in tokens if token not in stopwords]
    return filtered if filtered else tokens


def tokenize_query(query: str) -> TokenizedQuery:
    """Tokenize a free-text query.

    Whitespace-separated words are normalized individually; camelCase is not
    split. An empty result falls back to a single token built from the whole
    query, so the token list is never empty.
    """
    normalized = query.lower().strip()
    tokens = [token for token in (normalize_token(s) for s in normalized.split()) if token]
    return TokenizedQuery(
        tokens=tokens if tokens else [normalize_token(query)],
        normalized=normalized,
        original=query,
    )
