"""
Archive-level codec for DOCX containers.

Only word/document.xml is parsed; every other entry is carried through as
raw bytes so that styles, numbering, media and relationships come out of
an export exactly as they went in.
"""

import zlib
from io import BytesIO
from typing import List, Optional, Tuple
from zipfile import ZIP_DEFLATED, BadZipFile, ZipFile, ZipInfo

import structlog
from lxml import etree

from tailor.errors import (
    ContainerClosedError,
    ContainerInUseError,
    MalformedContainerError,
    MissingBodyEntryError,
)

logger = structlog.get_logger(__name__)

BODY_ENTRY = "word/document.xml"


def _clone_info(info: ZipInfo) -> ZipInfo:
    """Fresh ZipInfo carrying the layout attributes of a source entry."""
    clone = ZipInfo(info.filename, date_time=info.date_time)
    clone.compress_type = info.compress_type
    clone.external_attr = info.external_attr
    clone.create_system = info.create_system
    clone.comment = info.comment
    return clone


class DocxContainer:
    """
    In-memory DOCX archive with the body markup parsed for mutation.

    Use load() to build one and save() to serialize it. After save() the
    container is disposed.
    """

    def __init__(self, entries: List[Tuple[ZipInfo, bytes]], root: etree._Element):
        self._entries: Optional[List[Tuple[ZipInfo, bytes]]] = entries
        self._root = root
        self._owner: Optional[object] = None

    @classmethod
    def load(cls, data: bytes) -> "DocxContainer":
        try:
            zf = ZipFile(BytesIO(data))
        except BadZipFile as e:
            raise MalformedContainerError(f"Not a DOCX archive: {e}") from e

        with zf:
            if BODY_ENTRY not in zf.namelist():
                raise MissingBodyEntryError(f"{BODY_ENTRY} not found")
            try:
                entries = [(info, zf.read(info)) for info in zf.infolist()]
            except (BadZipFile, zlib.error) as e:
                raise MalformedContainerError(f"Corrupt archive entry: {e}") from e

        body_xml = next(raw for info, raw in entries if info.filename == BODY_ENTRY)
        try:
            root = etree.fromstring(body_xml)
        except etree.XMLSyntaxError as e:
            raise MalformedContainerError(f"Could not parse {BODY_ENTRY}: {e}") from e

        logger.debug(f"Loaded container with {len(entries)} entries")
        return cls(entries, root)

    @property
    def closed(self) -> bool:
        return self._entries is None

    @property
    def entry_names(self) -> List[str]:
        self._check_open()
        return [info.filename for info, _ in self._entries]

    @property
    def root(self) -> etree._Element:
        """Read access to the body markup root (w:document)."""
        self._check_open()
        return self._root

    def claim(self, owner: object) -> etree._Element:
        """
        Grants exclusive write access to the body markup.
        Claiming twice for the same owner is allowed; another owner is refused.
        """
        self._check_open()
        if self._owner is not None and self._owner is not owner:
            raise ContainerInUseError("Body markup is already claimed by another writer.")
        self._owner = owner
        return self._root

    def release(self, owner: object):
        if self._owner is owner:
            self._owner = None

    def save(self) -> bytes:
        """
        Serializes the archive, re-encoding only the body markup, then disposes
        the container.
        """
        self._check_open()
        output = BytesIO()
        with ZipFile(output, "w", ZIP_DEFLATED) as out_zip:
            for info, raw in self._entries:
                if info.filename == BODY_ENTRY:
                    raw = etree.tostring(self._root, xml_declaration=True, encoding="UTF-8", standalone=True)
                out_zip.writestr(_clone_info(info), raw)

        self._entries = None
        self._owner = None
        return output.getvalue()

    def _check_open(self):
        if self._entries is None:
            raise ContainerClosedError("Container was already saved.")
