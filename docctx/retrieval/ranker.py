"""
Fuzzy ranking of candidate records against a free-text query.
"""

import re
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from rapidfuzz import fuzz, process

from ..extraction.models import RankedResult
from ..utils.logging import get_logger

FieldAccessor = Union[str, Callable[[Any], Any]]
FieldSpec = Union[FieldAccessor, Tuple[FieldAccessor, float]]

WORD = re.compile(r'\w+')

# rapidfuzz similarity (0-100) a candidate needs to count as a match
SCORE_CUTOFF = 70.0

# Substring alignments rank just under whole-word matches
PARTIAL_WEIGHT = 0.9


class FuzzyRanker:
    """Ranks candidates by approximate matching of query terms against their fields.

    Each whitespace-separated term is scored against every field with
    rapidfuzz: the best ``fuzz.ratio`` against a single word of the field,
    or a slightly discounted ``fuzz.partial_ratio`` alignment when the field
    is at least as long as the term. Field scores are weighted and the best
    one is kept per term. Term scores are averaged and candidates below
    ``score_cutoff`` are dropped.
    """

    def __init__(self, score_cutoff: float = SCORE_CUTOFF):
        """Initialize ranker with the minimum similarity for a match."""
        self.score_cutoff = score_cutoff
        self.logger = get_logger(__name__)

    @staticmethod
    def _normalize_fields(fields: Sequence[FieldSpec]) -> List[Tuple[FieldAccessor, float]]:
        normalized = []
        for field_spec in fields:
            if isinstance(field_spec, tuple):
                accessor, weight = field_spec
            else:
                accessor, weight = field_spec, 1.0
            normalized.append((accessor, float(weight)))
        return normalized

    @staticmethod
    def field_text(candidate: Any, accessor: FieldAccessor) -> str:
        """Read a field from a candidate as lowercase text."""
        if callable(accessor):
            value = accessor(candidate)
        elif isinstance(candidate, dict):
            value = candidate.get(accessor)
        else:
            value = getattr(candidate, accessor, None)

        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        return str(value).lower()

    @staticmethod
    def score_term(term: str, text: str) -> float:
        """Similarity (0-100) of a single lowercase term to text."""
        if not term or not text:
            return 0.0

        best = 0.0
        match = process.extractOne(term, WORD.findall(text), scorer=fuzz.ratio)
        if match is not None:
            best = match[1]

        # A short field would otherwise "contain" any longer term
        if len(text) >= len(term):
            best = max(best, PARTIAL_WEIGHT * fuzz.partial_ratio(term, text))

        return best

    def score(self, query: str, candidate: Any, fields: Sequence[FieldSpec]) -> float:
        """Score one candidate against a query on a 0-100 scale."""
        terms = query.lower().split()
        if not terms:
            return 0.0

        texts = [(self.field_text(candidate, accessor), weight)
                 for accessor, weight in self._normalize_fields(fields)]

        total = 0.0
        for term in terms:
            total += max((weight * self.score_term(term, text) for text, weight in texts),
                         default=0.0)
        return total / len(terms)

    def rank(self, query: str, candidates: Sequence[Any], fields: Sequence[FieldSpec],
             limit: Optional[int] = None) -> List[RankedResult]:
        """Return candidates matching query, best first, stable on ties.

        An empty query matches everything with a score of zero.
        """
        if not query or not query.strip():
            results = [RankedResult(item=c, score=0.0, index=i) for i, c in enumerate(candidates)]
            return results[:limit] if limit is not None else results

        results = []
        for index, candidate in enumerate(candidates):
            score = self.score(query, candidate, fields)
            if score > 0.0 and score >= self.score_cutoff:
                results.append(RankedResult(item=candidate, score=score, index=index))

        results.sort(key=lambda r: (-r.score, r.index))

        self.logger.debug(f"Ranked {len(results)} of {len(candidates)} candidates for '{query}'")

        if limit is not None:
            results = results[:limit]
        return results
