"""Fuzzy resolution of a typed performer name against known performers"""

from typing import Iterable, List, NamedTuple, Optional

import structlog

logger = structlog.get_logger(__name__)

EXACT_SCORE = 2000
CANDIDATE_PREFIX_SCORE = 1500
FILTER_PREFIX_SCORE = 1400
CONTAINS_SCORE = 1200
TOKEN_SCORE = 1100
COMMON_PREFIX_SCORE = 900
MIN_COMMON_PREFIX = 3
OVERLAP_CAP = 50
AMBIGUITY_GAP = 10
SHORT_FILTER_LENGTH = 4


class ScoredCandidate(NamedTuple):
    value: str
    score: int


def common_prefix_length(a: str, b: str) -> int:
    length = 0
    for left, right in zip(a, b):
        if left != right:
            break
        length += 1
    return length


class PerformerMatcher:
    """Picks the performer a short or partial name most likely refers to.

    Returns None instead of guessing when a short filter (4 chars or less)
    scores nearly the same against the two best candidates.
    """

    def score(self, filter_text: str, candidate: Optional[str]) -> int:
        if candidate is None:
            return 0
        f = filter_text.strip().lower()
        p = candidate.strip().lower()
        if not f or not p:
            return 0

        if p == f:
            return EXACT_SCORE
        if p.startswith(f):
            return CANDIDATE_PREFIX_SCORE + min(len(f), OVERLAP_CAP)
        if f.startswith(p):
            return FILTER_PREFIX_SCORE + min(len(p), OVERLAP_CAP)
        if f in p:
            return CONTAINS_SCORE + min(len(f), OVERLAP_CAP)
        if f in p.split():
            return TOKEN_SCORE + min(len(f), OVERLAP_CAP)

        prefix = common_prefix_length(f, p)
        if prefix >= MIN_COMMON_PREFIX:
            return COMMON_PREFIX_SCORE + prefix

        return 0

    def rank(self, filter_text: str, candidates: Iterable[Optional[str]]) -> List[ScoredCandidate]:
        scored = [
            ScoredCandidate(candidate, self.score(filter_text, candidate))
            for candidate in candidates
            if candidate is not None and candidate.strip()
        ]
        scored = [entry for entry in scored if entry.score > 0]
        scored.sort(key=lambda entry: (entry.score, len(entry.value)), reverse=True)
        return scored

    def resolve(self, filter_text: Optional[str], candidates: Optional[Iterable[Optional[str]]]) -> Optional[str]:
        if filter_text is None or not filter_text.strip() or not candidates:
            return None

        f = filter_text.strip().lower()
        ranked = self.rank(f, candidates)
        if not ranked:
            return None

        best = ranked[0]
        if len(ranked) > 1:
            runner_up = ranked[1]
            if abs(best.score - runner_up.score) <= AMBIGUITY_GAP and len(f) <= SHORT_FILTER_LENGTH:
                logger.info(
                    "Ambiguous performer filter",
                    filter=filter_text, best=best.value, runner_up=runner_up.value,
                )
                return None

        return best.value
