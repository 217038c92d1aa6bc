from abc import ABC, abstractmethod
from typing import Optional

from tailor.models import Match, Modification
from tailor.normalize import clean_new_content


class Splicer(ABC):
    """
    One capability, two backends: locate an excerpt in the splicer's current
    state, then replace it. The applier drives either backend the same way.
    """

    min_excerpt_length: int = 0

    def prepare_replacement(self, modification: Modification) -> str:
        return clean_new_content(modification.new_content)

    @abstractmethod
    def locate(self, excerpt: str) -> Optional[Match]:
        """Returns where the (trimmed) excerpt sits in the current state, or None."""

    @abstractmethod
    def apply(self, match: Match, replacement: str, modification: Modification) -> None:
        """Splices replacement at match. Never called with a stale match."""
