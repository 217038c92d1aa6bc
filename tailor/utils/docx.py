"""
Low-level helpers for reading and building WordprocessingML run markup.
Work directly on lxml elements so they serve both the archive-level codec
and python-docx objects (via their ._element).
"""

from typing import Iterator, Optional

from docx.oxml.ns import qn
from lxml import etree

XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"


def create_element(name: str):
    return etree.Element(qn(name))


def get_body(root) -> Optional[etree._Element]:
    return root.find(qn("w:body"))


def iter_body_paragraphs(body) -> Iterator[etree._Element]:
    """
    Yields the block-level w:p children of w:body in document order.
    Paragraphs nested in tables, text boxes etc. are not yielded.
    """
    for child in body.iterchildren():
        if child.tag == qn("w:p"):
            yield child


def iter_runs(paragraph) -> Iterator[etree._Element]:
    """All w:r descendants, including those inside hyperlinks and w:ins/w:del."""
    return paragraph.iter(qn("w:r"))


def get_run_text(run) -> str:
    """
    Extracts text from a run, converting <w:tab/> to spaces and <w:br/> to newlines.
    """
    text = ""
    for child in run:
        if child.tag == qn("w:t"):
            text += child.text or ""
        elif child.tag == qn("w:delText"):
            text += child.text or ""
        elif child.tag == qn("w:tab"):
            text += " "
        elif child.tag in (qn("w:br"), qn("w:cr")):
            text += "\n"
    return text


def get_paragraph_text(paragraph) -> str:
    return "".join(get_run_text(run) for run in iter_runs(paragraph))


def get_run_properties(run) -> Optional[etree._Element]:
    return run.find(qn("w:rPr"))


def create_text_run(text: str, run_properties=None):
    """
    Builds <w:r>[<w:rPr/>]<w:t xml:space="preserve">text</w:t></w:r>.
    run_properties is used as-is; callers pass a copy if the source must survive.
    """
    run = create_element("w:r")
    if run_properties is not None:
        run.append(run_properties)
    t = etree.SubElement(run, qn("w:t"))
    t.text = text
    t.set(XML_SPACE, "preserve")
    return run
