"""Read access to a vault directory of notes and attachments."""

import asyncio
import logging
import re
from pathlib import Path, PurePosixPath
from typing import Protocol
from urllib.parse import quote

from .models import Document

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Interface the daily view uses to reach documents."""

    async def list_documents(self, extension: str) -> list[Document]:
        """Return every document with the given extension, freshly listed."""
        ...

    async def list_files(self) -> list[Document]:
        """Return every file in the vault, notes and attachments alike."""
        ...

    async def read_content(self, document: Document) -> str:
        """Return the text content of a document."""
        ...

    def resolve_link(
        self,
        linkpath: str,
        source_path: str,
        default_extension: str = "md",
        files: list[Document] | None = None,
    ) -> Document | None:
        """Return the file a link written in ``source_path`` points to.

        ``files`` is a listing from ``list_files()`` to resolve against.
        """
        ...

    def resource_path(self, document: Document) -> str:
        """Return a URL that serves the document's bytes."""
        ...


class VaultStore:
    """Scan the vault directory structure."""

    def __init__(self, vault_path: Path, resource_base: str | None = None):
        self.vault_path = Path(vault_path)
        self.resource_base = resource_base.rstrip("/") if resource_base else None

    def _iter_files(self) -> list[Document]:
        documents = []
        for file_path in self.vault_path.rglob("*"):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(self.vault_path)
            # Skip .obsidian, .trash and other hidden folders
            if any(part.startswith(".") for part in relative.parts):
                continue
            documents.append(Document(path=relative.as_posix()))
        return sorted(documents, key=lambda d: d.path)

    async def list_documents(self, extension: str = "md") -> list[Document]:
        """List documents with the given extension, sorted by path."""
        extension = extension.lstrip(".")
        files = await self.list_files()
        return [d for d in files if d.extension == extension]

    async def list_files(self) -> list[Document]:
        return await asyncio.to_thread(self._iter_files)

    async def read_content(self, document: Document) -> str:
        return await asyncio.to_thread(
            self.absolute_path(document).read_text, encoding="utf-8"
        )

    def absolute_path(self, document: Document) -> Path:
        return self.vault_path / document.path

    def resolve_link(
        self,
        linkpath: str,
        source_path: str = "",
        default_extension: str = "md",
        files: list[Document] | None = None,
    ) -> Document | None:
        """Find the first destination of a wiki link.

        Resolution order: the link taken relative to the source note's
        folder, then as a vault path, then the same-named file with the
        shortest path anywhere in the vault. ``#heading`` and ``|alias``
        suffixes are ignored and a link without extension refers to a note.

        Pass ``files`` from ``list_files()`` to resolve many links against a
        single listing; otherwise the vault is walked for this call.
        """
        target = linkpath.split("|", 1)[0].split("#", 1)[0].strip()
        if not target:
            return None
        if not PurePosixPath(target).suffix:
            target = f"{target}.{default_extension}"

        if files is None:
            files = self._iter_files()
        by_path = {d.path: d for d in files}

        source_folder = Document(path=source_path).folder if source_path else ""
        if source_folder and f"{source_folder}/{target}" in by_path:
            return by_path[f"{source_folder}/{target}"]
        if target in by_path:
            return by_path[target]

        name = PurePosixPath(target).name
        candidates = [d for d in files if d.name == name]
        if not candidates:
            return None
        return min(candidates, key=lambda d: (len(d.path), d.path))

    def get_document(self, path: str) -> Document | None:
        """Return the document at a vault-relative path if it exists inside the vault."""
        file_path = (self.vault_path / path).resolve()
        if not file_path.is_relative_to(self.vault_path.resolve()) or not file_path.is_file():
            return None
        return Document(path=file_path.relative_to(self.vault_path.resolve()).as_posix())

    async def find_tag(self, tag: str, extension: str = "md") -> list[Document]:
        """Return documents whose text contains ``#tag``."""
        tag_re = re.compile(rf"(?<![\w#/])#{re.escape(tag)}(?![\w/-])")
        found = []
        for document in await self.list_documents(extension):
            try:
                content = await self.read_content(document)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping {document.path} in tag search: {e}")
                continue
            if tag_re.search(content):
                found.append(document)
        return found

    def resource_path(self, document: Document) -> str:
        if self.resource_base is not None:
            return f"{self.resource_base}/{quote(document.path)}"
        return self.absolute_path(document).resolve().as_uri()
