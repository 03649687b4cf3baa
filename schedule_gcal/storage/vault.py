"""Filesystem-backed document vault (the host's document collaborator)."""

from datetime import datetime
from pathlib import Path, PurePosixPath

from schedule_gcal.constants import DOCUMENT_EXTENSION
from schedule_gcal.exceptions import DocumentNotFoundError


class FileSystemVault:
    """Daily notes stored as files under one root directory.

    Paths handed in and out are vault-relative POSIX strings
    (e.g. "Daily/2025-01-06.md").
    """

    def __init__(self, root: Path, extension: str = DOCUMENT_EXTENSION):
        self.root = root
        self.extension = extension

    def _resolve(self, path: str) -> Path:
        return self.root / PurePosixPath(path.strip("/"))

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def read_document(self, path: str) -> str:
        """Read a document's text.

        Raises:
            DocumentNotFoundError: If no such document exists
        """
        target = self._resolve(path)
        if not target.is_file():
            raise DocumentNotFoundError(f"Document not found: {path}")
        return target.read_text(encoding="utf-8")

    def list_documents(self, folder: str) -> list[str]:
        """Recursively list documents with the vault extension under ``folder``."""
        base = self._resolve(folder) if folder else self.root
        if not base.is_dir():
            return []
        return sorted(
            p.relative_to(self.root).as_posix()
            for p in base.rglob(f"*{self.extension}")
            if p.is_file()
        )

    def mtime(self, path: str) -> float:
        """Modification time of a document (raises ``DocumentNotFoundError``)."""
        try:
            return self._resolve(path).stat().st_mtime
        except FileNotFoundError as e:
            raise DocumentNotFoundError(f"Document not found: {path}") from e

    def now(self) -> datetime:
        return datetime.now()
