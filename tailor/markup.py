"""
Renders preview segments as CriticMarkup for text-only surfaces.
"""

from typing import List, Sequence

from tailor.models import Segment, SegmentKind


def segments_to_markup(segments: Sequence[Segment], include_reason: bool = True) -> str:
    """
    normal  -> text as-is
    removed -> {--text--}
    added   -> {++text++}{>>reason<<}

    The reason is written once per change, after the added span.
    """
    parts: List[str] = []

    for segment in segments:
        if segment.kind is SegmentKind.REMOVED:
            parts.append(f"{{--{segment.text}--}}")
        elif segment.kind is SegmentKind.ADDED:
            parts.append(f"{{++{segment.text}++}}")
            if include_reason and segment.reason:
                parts.append(f"{{>>{segment.reason}<<}}")
        else:
            parts.append(segment.text)

    return "".join(parts)
