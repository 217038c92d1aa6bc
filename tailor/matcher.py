"""
Locates a model-produced excerpt in a sequence of paragraph texts.

Two tiers, first success wins:
  1. Exact: the normalized excerpt is a substring of a normalized paragraph.
  2. Partial: the first 70% of the normalized excerpt is a substring.

Only prefixes are fuzzed (never suffixes or infixes) to keep false positives
down. When several paragraphs qualify the first one in document order wins.
"""

import math
from typing import Optional, Sequence

import structlog

from tailor.models import Match, MatchTier
from tailor.normalize import normalize

logger = structlog.get_logger(__name__)

EXPORT_MIN_EXCERPT_LENGTH = 8
PREVIEW_MIN_EXCERPT_LENGTH = 5
PARTIAL_MATCH_RATIO = 0.7


class Matcher:
    def __init__(self, min_length: int = EXPORT_MIN_EXCERPT_LENGTH, partial_ratio: float = PARTIAL_MATCH_RATIO):
        self.min_length = min_length
        self.partial_ratio = partial_ratio

    def is_eligible(self, excerpt: str) -> bool:
        return bool(excerpt) and len(excerpt) >= self.min_length

    def find(self, excerpt: str, paragraphs: Sequence[str]) -> Optional[Match]:
        if not self.is_eligible(excerpt):
            return None

        needle = normalize(excerpt)
        haystack = [normalize(text) for text in paragraphs]

        for i, text in enumerate(haystack):
            if needle in text:
                return Match(position=i, tier=MatchTier.EXACT)

        prefix = needle[: math.floor(len(needle) * self.partial_ratio)]
        if not prefix:
            return None

        for i, text in enumerate(haystack):
            if prefix in text:
                logger.debug(f"Partial match for '{excerpt[:30]}' in paragraph {i}")
                return Match(position=i, tier=MatchTier.PARTIAL)

        return None
