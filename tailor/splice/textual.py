"""
Preview-mode splicer: turns plain text plus modifications into tagged
segments for an on-screen diff. Nothing structural is touched.

Matching here is stricter than on export: exact substring
only, against text that has not been replaced yet. A modification tags its
excerpt in every unreplaced segment that still contains it.
"""

from typing import List, Optional, Sequence, Tuple

from tailor.applier import SequentialApplier
from tailor.matcher import PREVIEW_MIN_EXCERPT_LENGTH
from tailor.models import ApplyResult, Match, MatchTier, Modification, Segment, SegmentKind
from tailor.splice.base import Splicer


class TextualSplicer(Splicer):
    min_excerpt_length = PREVIEW_MIN_EXCERPT_LENGTH

    def __init__(self, base_text: str):
        self.segments: List[Segment] = [Segment(text=base_text, kind=SegmentKind.NORMAL)]

    def prepare_replacement(self, modification: Modification) -> str:
        # The preview shows exactly what the model proposed.
        return modification.new_content

    def locate(self, excerpt: str) -> Optional[Match]:
        if not excerpt or len(excerpt) < self.min_excerpt_length:
            return None

        for i, segment in enumerate(self.segments):
            if segment.kind is not SegmentKind.NORMAL:
                continue
            idx = segment.text.find(excerpt)
            if idx != -1:
                return Match(position=i, tier=MatchTier.EXACT, start=idx, length=len(excerpt))
        return None

    def apply(self, match: Match, replacement: str, modification: Modification) -> None:
        """
        Splits every normal segment that contains the excerpt, each at its
        first occurrence. Pieces produced by this call are not revisited.
        """
        located = self.segments[match.position]
        excerpt = located.text[match.start : match.start + match.length]

        updated: List[Segment] = self.segments[: match.position]
        for segment in self.segments[match.position :]:
            if segment.kind is SegmentKind.NORMAL and excerpt in segment.text:
                updated.extend(_split(segment, excerpt, replacement, modification.reason))
            else:
                updated.append(segment)
        self.segments = updated


def _split(segment: Segment, excerpt: str, replacement: str, reason: str) -> List[Segment]:
    start = segment.text.find(excerpt)
    end = start + len(excerpt)

    # The leading normal piece is kept even when empty so every removal
    # is anchored by a normal segment; a trailing empty piece is dropped.
    pieces = [
        Segment(text=segment.text[:start], kind=SegmentKind.NORMAL),
        Segment(text=excerpt, kind=SegmentKind.REMOVED, reason=reason),
        Segment(text=replacement, kind=SegmentKind.ADDED, reason=reason),
    ]
    after = segment.text[end:]
    if after:
        pieces.append(Segment(text=after, kind=SegmentKind.NORMAL))
    return pieces


def render_preview(base_text: str, modifications: Sequence[Modification]) -> Tuple[List[Segment], ApplyResult]:
    """Segments plus the per-item outcome of the preview pass."""
    splicer = TextualSplicer(base_text)
    result = SequentialApplier(splicer).apply(modifications)
    if not base_text:
        return [], result
    return splicer.segments, result


def diff_segments(base_text: str, modifications: Sequence[Modification]) -> List[Segment]:
    segments, _ = render_preview(base_text, modifications)
    return segments
