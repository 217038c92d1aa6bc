"""
Exceptions and warnings raised while applying modifications.

Structural problems (a broken container) are fatal and propagate to the
caller. Matching problems are never raised mid-pass: they are collected on
the ApplyResult and reported once the pass is over.
"""


class TailorError(Exception):
    """Base class for all engine errors."""


class MalformedContainerError(TailorError, ValueError):
    """The input is not a usable DOCX container."""


class MissingBodyEntryError(MalformedContainerError):
    """The archive has no body-markup entry (word/document.xml)."""


class ContainerInUseError(TailorError, RuntimeError):
    """The body markup is already claimed by another writer."""


class ContainerClosedError(TailorError, RuntimeError):
    """The container was already saved and disposed."""


class UnmatchedModificationWarning(UserWarning):
    """An excerpt could not be located by either matching tier."""

    def __init__(self, index: int, excerpt: str):
        self.index = index
        self.excerpt = excerpt
        super().__init__(f"Modification #{index} not matched: '{excerpt[:50]}'")


class ZeroAppliedWarning(UserWarning):
    """No modification of a non-empty batch could be applied."""

    def __init__(self, total: int):
        self.total = total
        super().__init__(f"No changes could be applied (0 / {total}).")
