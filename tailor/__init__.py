from importlib.metadata import PackageNotFoundError, version

from tailor.applier import SequentialApplier
from tailor.container import DocxContainer
from tailor.errors import (
    MalformedContainerError,
    MissingBodyEntryError,
    UnmatchedModificationWarning,
    ZeroAppliedWarning,
)
from tailor.export import modify_docx, preview
from tailor.ingest import extract_text_from_stream
from tailor.models import ApplyResult, Modification, Segment, SegmentKind, parse_modifications
from tailor.normalize import normalize
from tailor.splice.textual import diff_segments

try:
    __version__ = version("tailor-docx")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "ApplyResult",
    "DocxContainer",
    "MalformedContainerError",
    "MissingBodyEntryError",
    "Modification",
    "Segment",
    "SegmentKind",
    "SequentialApplier",
    "UnmatchedModificationWarning",
    "ZeroAppliedWarning",
    "diff_segments",
    "extract_text_from_stream",
    "modify_docx",
    "normalize",
    "parse_modifications",
    "preview",
    "__version__",
]
