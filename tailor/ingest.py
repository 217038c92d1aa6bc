import io
from typing import List

import structlog
from docx import Document
from docx.oxml.ns import qn
from docx.table import Table, _Cell

from tailor.errors import MalformedContainerError
from tailor.utils.docx import get_paragraph_text

logger = structlog.get_logger(__name__)


def extract_text_from_stream(file_stream: io.BytesIO) -> str:
    """
    Extracts the raw text of a DOCX: body paragraphs and table-cell paragraphs
    in document order, separated by blank lines.

    Paragraph text is derived exactly as the export matcher derives it, so an
    excerpt copied from this text is locatable on export.
    """
    try:
        file_stream.seek(0)
        doc = Document(file_stream)
    except Exception as e:
        logger.error(f"Text extraction failed: {e}", exc_info=True)
        raise MalformedContainerError(f"Could not read document content: {e}") from e

    blocks = _extract_blocks(doc.element.body, doc)
    return "\n\n".join(blocks)


def _extract_blocks(parent_elm, parent) -> List[str]:
    blocks = []
    for child in parent_elm.iterchildren():
        if child.tag == qn("w:p"):
            blocks.append(get_paragraph_text(child))
        elif child.tag == qn("w:tbl"):
            blocks.extend(_extract_table(Table(child, parent)))
    return blocks


def _extract_table(table: Table) -> List[str]:
    blocks = []
    for row in table.rows:
        # Merged cells come back once per grid column.
        seen_cells = set()
        for cell in row.cells:
            if cell._tc in seen_cells:
                continue
            seen_cells.add(cell._tc)
            blocks.extend(_extract_cell(cell))
    return blocks


def _extract_cell(cell: _Cell) -> List[str]:
    return _extract_blocks(cell._tc, cell)
