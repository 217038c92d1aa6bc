import logging
import sys
from io import BytesIO
from pathlib import Path
from typing import List, Optional

import structlog
from mcp.server.fastmcp import FastMCP

from tailor.export import DEFAULT_FILENAME, modify_docx, preview
from tailor.ingest import extract_text_from_stream
from tailor.markup import segments_to_markup
from tailor.models import Modification
from tailor.report import format_length_stats, format_summary, length_stats

# --- LOGGING CONFIGURATION ---
# MCP communicates over stdio.
# CRITICAL: All logs must go to stderr. Any print to stdout will break the JSON-RPC protocol.
logging.basicConfig(stream=sys.stderr, level=logging.INFO, force=True)

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

mcp = FastMCP("Tailor Resume Service")


def _read_file_bytes(path: str) -> BytesIO:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(p, "rb") as f:
        return BytesIO(f.read())


@mcp.tool()
def read_docx(file_path: str) -> str:
    """
    Reads a DOCX file and returns its raw text, one paragraph per block.
    Copy excerpts from this text when proposing modifications.

    The text includes paragraphs inside tables, but apply_modifications only
    rewrites top-level body paragraphs. Excerpts taken from table cells will
    be reported as not matched.

    Args:
        file_path: Absolute path to the DOCX file.
    """
    try:
        return extract_text_from_stream(_read_file_bytes(file_path))
    except Exception as e:
        return f"Error reading file: {str(e)}"


@mcp.tool()
def preview_modifications(docx_path: str, modifications: List[Modification]) -> str:
    """
    Shows how modifications would change the document, as CriticMarkup:
    {--original--}{++replacement++}{>>reason<<}.

    Only exact excerpts are shown here; export also tolerates whitespace,
    quote and case drift, and matches on the first 70% of an excerpt.
    The preview covers table-cell text; export does not, so a change located
    inside a table here will come back as not matched from apply_modifications.

    Args:
        docx_path: Absolute path to the DOCX file.
        modifications: Ordered list of {original_excerpt, new_content, reason, section}.
    """
    try:
        text = extract_text_from_stream(_read_file_bytes(docx_path))
        segments, result = preview(text, modifications)
        return "\n\n".join(
            [
                segments_to_markup(segments),
                f"Located {result.applied_count} / {result.total} changes.",
                format_length_stats(length_stats(modifications)),
            ]
        )
    except Exception as e:
        return f"Error previewing modifications: {str(e)}"


@mcp.tool()
def apply_modifications(
    docx_path: str,
    modifications: List[Modification],
    output_path: Optional[str] = None,
) -> str:
    """
    Applies modifications to the DOCX and saves a new file.

    Each matched paragraph is rewritten with new_content in the style of its
    first run. Unmatched modifications are reported, not fatal.

    Args:
        docx_path: Absolute path to the source file.
        modifications: Ordered list of {original_excerpt, new_content, reason, section}.
        output_path: Optional. Defaults to Tailored_Resume.docx next to the source.
    """
    try:
        stream = _read_file_bytes(docx_path)
        if not output_path:
            output_path = str(Path(docx_path).parent / DEFAULT_FILENAME)

        export = modify_docx(stream.getvalue(), modifications, filename=Path(output_path).name)
        with open(output_path, "wb") as f:
            f.write(export.doc_bytes)

        return f"{format_summary(export.result)}\nSaved to: {output_path}"

    except Exception as e:
        return f"Error applying modifications: {str(e)}"


def main():
    mcp.run()


if __name__ == "__main__":
    main()
