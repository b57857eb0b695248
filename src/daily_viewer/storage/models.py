"""Data models for vault documents."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath


class SortDirection(Enum):
    ASCENDING = "old-to-new"
    DESCENDING = "new-to-old"


@dataclass(frozen=True)
class Document:
    """A file in the vault, addressed by its vault-relative path."""

    path: str

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def basename(self) -> str:
        """Filename without extension."""
        return PurePosixPath(self.path).stem

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.lstrip(".")

    @property
    def folder(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return "" if parent == "." else parent


@dataclass(frozen=True)
class DatedDocument:
    """A document paired with the date parsed from its basename."""

    document: Document
    key: datetime
