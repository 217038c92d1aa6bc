from dataclasses import dataclass
from typing import Iterator, List

import structlog
from lxml import etree

from tailor.container import BODY_ENTRY, DocxContainer
from tailor.errors import MalformedContainerError
from tailor.utils.docx import get_body, get_paragraph_text, iter_body_paragraphs

logger = structlog.get_logger(__name__)


@dataclass
class ParagraphBlock:
    index: int
    element: etree._Element

    @property
    def text(self) -> str:
        # Re-derived on every access: splices earlier in the pass must be visible.
        return get_paragraph_text(self.element)


class ParagraphModel:
    """
    Arena of the body paragraphs of one document, indexed by position.
    Positions are stable for the lifetime of the model; splices rewrite a
    paragraph's runs but never add or remove paragraphs.
    """

    def __init__(self, blocks: List[ParagraphBlock]):
        self._blocks = blocks

    @classmethod
    def from_root(cls, root: etree._Element) -> "ParagraphModel":
        body = get_body(root)
        if body is None:
            raise MalformedContainerError(f"{BODY_ENTRY} has no w:body element")
        blocks = [ParagraphBlock(i, p) for i, p in enumerate(iter_body_paragraphs(body))]
        logger.debug(f"Extracted {len(blocks)} body paragraphs")
        return cls(blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __getitem__(self, index: int) -> ParagraphBlock:
        return self._blocks[index]

    def __iter__(self) -> Iterator[ParagraphBlock]:
        return iter(self._blocks)

    def texts(self) -> List[str]:
        return [block.text for block in self._blocks]


def extract_paragraphs(container: DocxContainer) -> ParagraphModel:
    return ParagraphModel.from_root(container.root)
