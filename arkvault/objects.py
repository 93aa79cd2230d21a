"""Kinds of objects a vault can hold."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class FileSystem(Enum):
    """File system flavours."""

    POSIX = "posix"
    WINDOWS = "windows"


class Email(Enum):
    """E-mail sources."""

    IMAP = "imap"
    GMAIL = "gmail"


class ObjectStorage(Enum):
    """Object storage services."""

    S3 = "s3"


ObjectVariant = Union[FileSystem, Email, ObjectStorage]

_DISPLAY = {
    FileSystem.POSIX: "File System (Posix)",
    FileSystem.WINDOWS: "File System (Windows)",
    Email.IMAP: "Email (IMAP)",
    Email.GMAIL: "Email (Gmail)",
    ObjectStorage.S3: "Object Storage (S3)",
}

# Checked in this order; the first keyword found in the text wins.
_KEYWORDS = (
    ("posix", FileSystem.POSIX),
    ("win", FileSystem.WINDOWS),
    ("imap", Email.IMAP),
    ("gmail", Email.GMAIL),
    ("s3", ObjectStorage.S3),
)


@dataclass(frozen=True)
class ObjectType:
    """The type of objects stored in a vault."""

    variant: ObjectVariant

    def __post_init__(self) -> None:
        if not isinstance(self.variant, (FileSystem, Email, ObjectStorage)):
            raise TypeError(f"not an object type variant: {self.variant!r}")

    @classmethod
    def parse(cls, text: str) -> ObjectType:
        """Parse a loose, case-insensitive description such as ``"Posix"`` or ``"s3"``."""
        normalized = text.strip().lower()
        for keyword, variant in _KEYWORDS:
            if keyword in normalized:
                return cls(variant)
        raise ValueError(f"unknown or unsupported object type [{normalized}]")

    def __str__(self) -> str:
        return _DISPLAY[self.variant]