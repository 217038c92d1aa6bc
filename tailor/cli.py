import argparse
import json
import sys
from io import BytesIO
from pathlib import Path
from typing import List

from tailor import __version__
from tailor.errors import MalformedContainerError
from tailor.export import DEFAULT_FILENAME, modify_docx, preview
from tailor.ingest import extract_text_from_stream
from tailor.markup import segments_to_markup
from tailor.models import Modification, parse_modifications
from tailor.report import format_length_stats, format_summary, length_stats


def _read_docx_text(path: Path) -> str:
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, "rb") as f:
        try:
            return extract_text_from_stream(BytesIO(f.read()))
        except MalformedContainerError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)


def _load_modifications(path: Path) -> List[Modification]:
    if not path.exists():
        print(f"Error: Modifications file not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_modifications(f.read())
    except ValueError as e:
        print(f"Error parsing modifications JSON: {e}", file=sys.stderr)
        sys.exit(1)


def handle_extract(args):
    text = _read_docx_text(args.input)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"Extracted text to {args.output}", file=sys.stderr)
    else:
        print(text)


def handle_preview(args):
    if args.input.suffix.lower() == ".docx":
        text = _read_docx_text(args.input)
    else:
        with open(args.input, "r", encoding="utf-8") as f:
            text = f.read()

    modifications = _load_modifications(args.modifications)
    segments, result = preview(text, modifications)

    if args.json:
        output = json.dumps([s.model_dump(mode="json") for s in segments], indent=2)
    else:
        output = segments_to_markup(segments, include_reason=not args.no_reasons)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"Saved preview to {args.output}", file=sys.stderr)
    else:
        print(output)

    print(format_length_stats(length_stats(modifications)), file=sys.stderr)
    print(f"Stats: {result.applied_count} / {result.total} changes located.", file=sys.stderr)


def handle_apply(args):
    modifications = _load_modifications(args.modifications)

    if not args.original.exists():
        print(f"Error: File not found: {args.original}", file=sys.stderr)
        sys.exit(1)
    with open(args.original, "rb") as f:
        docx_bytes = f.read()

    output_path = args.output or args.original.with_name(DEFAULT_FILENAME)

    print(f"Applying {len(modifications)} modifications...", file=sys.stderr)
    try:
        export = modify_docx(docx_bytes, modifications, filename=output_path.name)
    except MalformedContainerError as e:
        print(f"Error: Failed to modify document: {e}", file=sys.stderr)
        sys.exit(1)

    with open(output_path, "wb") as f:
        f.write(export.doc_bytes)

    print(f"✅ Saved to {output_path}", file=sys.stderr)
    print(format_summary(export.result), file=sys.stderr)
    if export.result.zero_applied:
        sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="tailor", description="Tailor: apply model-proposed edits to a DOCX")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    p_extract = subparsers.add_parser("extract", help="Extract raw text from a DOCX file")
    p_extract.add_argument("input", type=Path, help="Input DOCX file")
    p_extract.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p_extract.set_defaults(func=handle_extract)

    p_preview = subparsers.add_parser("preview", help="Show modifications as a diff of the document text")
    p_preview.add_argument("input", type=Path, help="Input DOCX or plain text file")
    p_preview.add_argument("modifications", type=Path, help="JSON file containing modifications")
    p_preview.add_argument("-o", "--output", type=Path, help="Output path (default: stdout)")
    p_preview.add_argument("--json", action="store_true", help="Output raw JSON segments instead of CriticMarkup")
    p_preview.add_argument("--no-reasons", action="store_true", help="Omit {>>reason<<} blocks")
    p_preview.set_defaults(func=handle_preview)

    p_apply = subparsers.add_parser("apply", help="Apply modifications to a DOCX")
    p_apply.add_argument("original", type=Path, help="Original DOCX")
    p_apply.add_argument("modifications", type=Path, help="JSON file containing modifications")
    p_apply.add_argument("-o", "--output", type=Path, help=f"Output DOCX path (default: {DEFAULT_FILENAME})")
    p_apply.set_defaults(func=handle_apply)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
