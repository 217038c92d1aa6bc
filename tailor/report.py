from typing import Sequence

from tailor.models import ApplyResult, LengthStats, Modification, OutcomeStatus


def length_stats(modifications: Sequence[Modification]) -> LengthStats:
    """Sums excerpt and replacement lengths so callers can flag pagination risk."""
    return LengthStats(
        original_length=sum(len(m.original_excerpt or "") for m in modifications),
        new_length=sum(len(m.new_content or "") for m in modifications),
    )


def format_summary(result: ApplyResult) -> str:
    lines = [f"Applied {result.applied_count} / {result.total} changes"]
    for outcome in result.outcomes:
        if outcome.status is OutcomeStatus.TOO_SHORT:
            lines.append(f"  [{outcome.index}] skipped (too short): '{outcome.excerpt[:50]}'")
        elif outcome.status is OutcomeStatus.UNMATCHED:
            lines.append(f"  [{outcome.index}] not matched: '{outcome.excerpt[:50]}'")
    if result.zero_applied:
        lines.append("Warning: No changes could be applied.")
    return "\n".join(lines)


def format_length_stats(stats: LengthStats) -> str:
    if stats.diff > 0:
        verdict = f"Slightly longer (+{stats.diff} chars). May affect pagination."
    else:
        verdict = f"Layout preserved ({stats.diff} chars)."
    return f"Original text: {stats.original_length} chars -> New content: {stats.new_length} chars. {verdict}"
