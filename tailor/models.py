import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from tailor.errors import UnmatchedModificationWarning, ZeroAppliedWarning


class Modification(BaseModel):
    """
    A single replacement proposed by the orchestration loop.
    The engine treats it as "find this excerpt, replace its paragraph/span".
    """

    model_config = ConfigDict(frozen=True)

    original_excerpt: str = Field(
        ...,
        description="Text to find in the base document. Matched after whitespace/quote/case normalization.",
    )
    new_content: str = Field(..., description="Replacement text. Leading bullets and dashes are stripped on export.")
    reason: str = Field("", description="Why the change was made. Shown next to the change in the preview.")
    section: str = Field("", description="Document section the excerpt belongs to, e.g. 'Experience'.")

    @field_validator("original_excerpt", "new_content", "reason", "section", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        # Model output regularly carries null for fields it had nothing to say about.
        return "" if value is None else value


class SegmentKind(str, Enum):
    NORMAL = "normal"
    REMOVED = "removed"
    ADDED = "added"


class Segment(BaseModel):
    """One tagged span of the preview diff."""

    text: str
    kind: SegmentKind = SegmentKind.NORMAL
    reason: Optional[str] = None


class MatchTier(str, Enum):
    EXACT = "exact"
    PARTIAL = "partial"


@dataclass(frozen=True)
class Match:
    """
    Where a splicer located an excerpt.

    position is a paragraph index for the structural backend and a segment
    index for the textual one. start/length locate the excerpt inside the
    segment and are unused by the structural backend, which replaces the
    whole paragraph.
    """

    position: int
    tier: MatchTier = MatchTier.EXACT
    start: int = 0
    length: int = 0


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    UNMATCHED = "unmatched"
    TOO_SHORT = "too_short"


@dataclass
class ItemOutcome:
    index: int
    status: OutcomeStatus
    excerpt: str
    tier: Optional[MatchTier] = None
    position: Optional[int] = None

    @property
    def applied(self) -> bool:
        return self.status is OutcomeStatus.APPLIED


@dataclass
class ApplyResult:
    """Aggregate outcome of one pass. outcomes are kept in input order."""

    total: int
    applied_count: int = 0
    outcomes: List[ItemOutcome] = field(default_factory=list)

    @property
    def unmatched(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if not o.applied]

    @property
    def zero_applied(self) -> bool:
        return self.total > 0 and self.applied_count == 0

    @property
    def ratio(self) -> float:
        if not self.total:
            return 0.0
        return self.applied_count / self.total

    @property
    def warnings(self) -> List[Warning]:
        found: List[Warning] = [UnmatchedModificationWarning(o.index, o.excerpt) for o in self.unmatched]
        if self.zero_applied:
            found.append(ZeroAppliedWarning(self.total))
        return found


@dataclass(frozen=True)
class LengthStats:
    """Character totals of excerpts vs. replacements, used to warn about page overflow."""

    original_length: int
    new_length: int

    @property
    def diff(self) -> int:
        return self.new_length - self.original_length


_MODIFICATION_LIST = TypeAdapter(List[Modification])


def parse_modifications(payload: Union[str, bytes, list, dict]) -> List[Modification]:
    """
    Validates modifications coming from the orchestration loop.

    Accepts a JSON document or already-decoded data, either a bare list or an
    object carrying a "modifications" list (the full tailoring response).
    """
    if isinstance(payload, (str, bytes)):
        payload = json.loads(payload)

    if isinstance(payload, dict):
        if "modifications" not in payload:
            raise ValueError("Payload has no 'modifications' list.")
        payload = payload["modifications"] or []

    return _MODIFICATION_LIST.validate_python(payload)
