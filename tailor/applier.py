from typing import Sequence

import structlog

from tailor.models import ApplyResult, ItemOutcome, Modification, OutcomeStatus
from tailor.splice.base import Splicer

logger = structlog.get_logger(__name__)


class SequentialApplier:
    """
    Applies a batch of modifications through one splicer, one at a time,
    always matching against the state left by the previous splice.

    Modifications are applied longest excerpt first. When a short excerpt is
    nested in a longer one, this keeps the short splice from destroying the
    context the long one still needs. It does not resolve partial overlaps:
    those remain first-applied-wins.
    """

    def __init__(self, splicer: Splicer, sort_by_length: bool = True):
        self.splicer = splicer
        self.sort_by_length = sort_by_length

    def apply(self, modifications: Sequence[Modification]) -> ApplyResult:
        result = ApplyResult(total=len(modifications))
        outcomes = {}

        order = list(enumerate(modifications))
        if self.sort_by_length:
            # Stable: equal lengths keep their input order.
            order.sort(key=lambda x: len(x[1].original_excerpt), reverse=True)

        for idx, mod in order:
            outcomes[idx] = self._apply_one(idx, mod)
            if outcomes[idx].applied:
                result.applied_count += 1

        result.outcomes = [outcomes[i] for i in range(len(modifications))]

        logger.info(f"Applied {result.applied_count} / {result.total} changes")
        if result.zero_applied:
            logger.warning("No changes could be applied", total=result.total)
        return result

    def _apply_one(self, idx: int, mod: Modification) -> ItemOutcome:
        excerpt = mod.original_excerpt.strip()
        preview = excerpt[:80].replace("\n", " ")

        if len(excerpt) < self.splicer.min_excerpt_length:
            logger.warning(f"[{idx}] Skipped (too short): '{preview}'")
            return ItemOutcome(index=idx, status=OutcomeStatus.TOO_SHORT, excerpt=excerpt)

        match = self.splicer.locate(excerpt)
        if match is None:
            logger.warning(f"[{idx}] Could not match: '{preview}'")
            return ItemOutcome(index=idx, status=OutcomeStatus.UNMATCHED, excerpt=excerpt)

        replacement = self.splicer.prepare_replacement(mod)
        self.splicer.apply(match, replacement, mod)
        logger.info(f"[{idx}] Applied ({match.tier.value} match): '{preview}'")
        return ItemOutcome(
            index=idx,
            status=OutcomeStatus.APPLIED,
            excerpt=excerpt,
            tier=match.tier,
            position=match.position,
        )
