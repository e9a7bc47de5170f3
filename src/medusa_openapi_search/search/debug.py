"""Search diagnostics logging."""

from typing import TYPE_CHECKING, Any, Dict, Sequence

from ..config.logging import get_logger
from .relevance import ScoreDetail

if TYPE_CHECKING:
    from .registry import ScoredOperation, SearchOptions

logger = get_logger(__name__)


def format_detail(detail: ScoreDetail) -> str:
    """Render a detail as ``field:matches/tokens@weight (flags)``.

    Flags: ``P`` proximity boost, ``X`` prefix boost, ``L-<penalty>`` length
    penalty.
    """
    extras = []
    if detail.proximity_boost:
        extras.append("P")
    if detail.prefix_boost:
        extras.append("X")
    if detail.length_penalty:
        extras.append(f"L-{detail.length_penalty:.2f}")

    weight = f"{detail.weighted_score:.2f}"
    if weight.endswith(".00"):
        weight = weight[:-3]
    suffix = f" ({','.join(extras)})" if extras else ""
    return f"{detail.field.value}:{detail.matches}/{detail.token_count}@{weight}{suffix}"


def log_search_invocation(
    query: str, tokens: Sequence[str], options: "SearchOptions"
) -> None:
    """Log a query with its tokens and active filters."""
    filters: Dict[str, Any] = {}
    if options.tags:
        filters["tags"] = list(options.tags)
    if options.methods:
        filters["methods"] = [
            str(getattr(m, "value", m)).upper() for m in options.methods
        ]
    if options.limit:
        filters["limit"] = options.limit

    logger.info(
        "openapi.search",
        query=query,
        tokens=list(tokens) if tokens else "<empty>",
        **filters,
    )


def log_search_results(entries: Sequence["ScoredOperation"], max_lines: int = 5) -> None:
    """Log the top scored entries with their field breakdown."""
    shown = min(len(entries), max_lines)
    for rank, entry in enumerate(entries[:shown], start=1):
        operation = entry.operation
        logger.info(
            "openapi.search.result",
            rank=rank,
            score=round(entry.score, 2),
            operation_id=operation.operation_id,
            endpoint=f"{operation.method.value.upper()} {operation.path}",
            summary=operation.summary or operation.description or "",
            details=" | ".join(format_detail(detail) for detail in entry.details),
        )
    if len(entries) > shown:
        logger.info("openapi.search.more", remaining=len(entries) - shown)
