"""Relevance scoring of indexed operations against a query.

Each searchable field contributes the weighted count of query tokens it
contains, times the field weight. Three adjustments are applied per field:

- proximity: all non-stopword query tokens occur close together
- prefix: the operationId starts with the compacted query
- length: long descriptions are damped

The field total is divided by the number of query tokens. Scoring one
operation never looks at any other operation.
"""

from dataclasses import dataclass, field
from typing import AbstractSet, List, Optional

from ..config.settings import ScoringConfig
from .indexing import IndexedOperation, SearchField, TokenizedField
from .query_processor import QueryContext
from .tokenizer import STOPWORDS


@dataclass
class ScoreDetail:
    """Diagnostic breakdown for one matching field."""

    field: SearchField
    matches: int
    token_count: int
    weighted_score: float
    proximity_boost: bool = False
    prefix_boost: bool = False
    length_penalty: Optional[float] = None


@dataclass
class OperationScore:
    """Aggregate score for one operation with its per-field details."""

    score: float
    details: List[ScoreDetail] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return bool(self.details)


class RelevanceScorer:
    """Scores indexed operations using the configured ranking constants."""

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        stopwords: AbstractSet[str] = STOPWORDS,
    ):
        """Initialize the scorer.

        Args:
            config: Ranking constants, defaults to ``ScoringConfig()``
            stopwords: Tokens weighted with ``stopword_token_weight``
        """
        self.config = config or ScoringConfig()
        self.stopwords = stopwords

    def score(self, operation: IndexedOperation, context: QueryContext) -> OperationScore:
        """Score one operation.

        Returns:
            OperationScore; ``score`` is exactly 0 with no details when no field
            shares a token with the query
        """
        total = 0.0
        details: List[ScoreDetail] = []

        for entry in operation.fields:
            detail = self._score_field(operation, entry, context)
            if detail is None:
                continue
            total += detail.weighted_score
            details.append(detail)

        if not details:
            return OperationScore(score=0.0)

        return OperationScore(
            score=total / max(1, context.token_count),
            details=details,
        )

    def _score_field(
        self,
        operation: IndexedOperation,
        entry: TokenizedField,
        context: QueryContext,
    ) -> Optional[ScoreDetail]:
        if not entry.tokens:
            return None

        matches = 0
        weighted_matches = 0.0
        for token in context.tokens:
            if token not in entry.token_set:
                continue
            matches += 1
            if token in self.stopwords:
                weighted_matches += self.config.stopword_token_weight
            else:
                weighted_matches += 1.0

        if not matches:
            return None

        field_score = weighted_matches * self.config.field_weight(entry.field.value)
        detail = ScoreDetail(
            field=entry.field,
            matches=matches,
            token_count=len(entry.tokens),
            weighted_score=0.0,
        )

        if self._within_proximity(entry, context):
            field_score *= self.config.proximity_boost
            detail.proximity_boost = True

        if (
            entry.field == SearchField.OPERATION_ID
            and context.compact_query
            and operation.normalized_operation_id.startswith(context.compact_query)
        ):
            field_score *= self.config.prefix_boost
            detail.prefix_boost = True

        if entry.field == SearchField.DESCRIPTION:
            penalty = self._description_penalty(len(entry.tokens))
            if penalty > 0:
                field_score *= 1 - penalty
                detail.length_penalty = penalty

        detail.weighted_score = field_score
        return detail

    def _within_proximity(self, entry: TokenizedField, context: QueryContext) -> bool:
        key_tokens = context.non_stop_tokens
        if len(key_tokens) < self.config.proximity_min_tokens:
            return False

        positions = [entry.first_index.get(token) for token in key_tokens]
        if any(position is None for position in positions):
            return False

        span = max(positions) - min(positions)
        return span <= len(key_tokens) * self.config.proximity_window_factor

    def _description_penalty(self, token_count: int) -> float:
        over = token_count - self.config.description_length_threshold
        if over <= 0:
            return 0.0
        return min(
            self.config.description_length_penalty_cap,
            over * self.config.description_length_penalty_step,
        )
