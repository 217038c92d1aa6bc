"""
Entry points used by the outer surfaces (CLI, MCP server, UI bridge).

Export: DOCX bytes + modifications -> new DOCX bytes.
Preview: plain text + modifications -> tagged segments.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import structlog

from tailor.applier import SequentialApplier
from tailor.container import DocxContainer
from tailor.models import ApplyResult, Modification, Segment
from tailor.splice.structural import StructuralSplicer
from tailor.splice.textual import render_preview

logger = structlog.get_logger(__name__)

DEFAULT_FILENAME = "Tailored_Resume.docx"


@dataclass
class ExportResult:
    doc_bytes: bytes
    filename: str
    result: ApplyResult


def modify_docx(
    docx_bytes: bytes,
    modifications: Sequence[Modification],
    filename: str = DEFAULT_FILENAME,
) -> ExportResult:
    """
    Splices modifications into the document and returns the new archive.

    Partial success still produces a file; callers should surface
    result.applied_count / result.total. MalformedContainerError propagates.
    """
    logger.info(f"Starting document update with {len(modifications)} modifications")

    container = DocxContainer.load(docx_bytes)
    splicer = StructuralSplicer.for_container(container)
    try:
        result = SequentialApplier(splicer).apply(modifications)
    finally:
        splicer.release()

    doc_bytes = container.save()
    logger.info(f"Document ready: {filename}", applied=result.applied_count, total=result.total)
    return ExportResult(doc_bytes=doc_bytes, filename=filename, result=result)


def preview(base_text: str, modifications: Sequence[Modification]) -> Tuple[List[Segment], ApplyResult]:
    return render_preview(base_text, modifications)
