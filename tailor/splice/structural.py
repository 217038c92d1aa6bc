from copy import deepcopy
from typing import Optional

import structlog

from tailor.container import DocxContainer
from tailor.matcher import EXPORT_MIN_EXCERPT_LENGTH, Matcher
from tailor.models import Match, Modification
from tailor.paragraphs import ParagraphModel
from tailor.splice.base import Splicer
from tailor.utils.docx import create_text_run, get_run_properties, iter_runs

logger = structlog.get_logger(__name__)


def replace_paragraph_runs(paragraph, text: str):
    """
    Replaces every run of the paragraph with a single run holding text.

    The new run inherits the first original run's w:rPr, so the paragraph ends
    up uniformly styled. Paragraph properties (w:pPr) are untouched.
    """
    old_runs = list(iter_runs(paragraph))

    run_properties = None
    if old_runs:
        first_rpr = get_run_properties(old_runs[0])
        if first_rpr is not None:
            run_properties = deepcopy(first_rpr)

    for run in old_runs:
        parent = run.getparent()
        if parent is not None:
            parent.remove(run)

    paragraph.append(create_text_run(text, run_properties))


class StructuralSplicer(Splicer):
    """
    Rewrites paragraphs of a live document tree for export.

    When built from a container, the splicer claims the body markup so no
    second writer can touch it until release().
    """

    min_excerpt_length = EXPORT_MIN_EXCERPT_LENGTH

    def __init__(
        self,
        model: ParagraphModel,
        matcher: Optional[Matcher] = None,
        container: Optional[DocxContainer] = None,
    ):
        self.model = model
        self.matcher = matcher or Matcher(min_length=self.min_excerpt_length)
        self._container = container
        if container is not None:
            container.claim(self)

    @classmethod
    def for_container(cls, container: DocxContainer, matcher: Optional[Matcher] = None) -> "StructuralSplicer":
        return cls(ParagraphModel.from_root(container.root), matcher, container)

    def release(self):
        if self._container is not None:
            self._container.release(self)
            self._container = None

    def locate(self, excerpt: str) -> Optional[Match]:
        return self.matcher.find(excerpt, self.model.texts())

    def apply(self, match: Match, replacement: str, modification: Modification) -> None:
        block = self.model[match.position]
        replace_paragraph_runs(block.element, replacement)
        logger.debug(f"Rewrote paragraph {block.index}")
