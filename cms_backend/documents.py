from __future__ import annotations

import enum
import logging
import os
import stat
import uuid
from dataclasses import dataclass
from pathlib import Path

from .errors import DocumentNotFound, InvalidDocumentName

logger = logging.getLogger("mdcms.documents")

_TMP_PREFIX = ".tmp-"

# NAME_MAX on the common Linux/macOS filesystems, in bytes.
MAX_NAME_BYTES = 255


class DocumentKind(enum.Enum):
    PLAIN_TEXT = "text/plain"
    MARKDOWN = "text/markdown"

    @classmethod
    def from_name(cls, name: str) -> "DocumentKind":
        if Path(name).suffix.lower() in (".md", ".markdown"):
            return cls.MARKDOWN
        return cls.PLAIN_TEXT


@dataclass(frozen=True)
class Document:
    name: str
    content: bytes
    kind: DocumentKind

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


def _is_document_name(name: str) -> bool:
    """A document name is one plain path component that fits in a directory entry."""
    if not isinstance(name, str) or name in ("", ".", ".."):
        return False
    if any(sep in name for sep in ("/", "\\", "\x00")):
        return False
    try:
        encoded = name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return len(encoded) <= MAX_NAME_BYTES


class DocumentStore:
    """Flat directory of documents, one file per document.

    Every path is base_dir / name for a single-component name; symlinks that
    resolve outside base_dir are refused.

    There is no locking: two requests writing the same name race, and whichever
    os.replace runs last wins. Readers never see a partially written file.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        """Map a document name to its file, or raise InvalidDocumentName."""
        if not _is_document_name(name):
            logger.warning("Rejected document name %r", name)
            raise InvalidDocumentName(name)
        path = self.base_dir / name
        try:
            resolved = path.resolve()
        except OSError:
            raise InvalidDocumentName(name)
        if resolved.parent != self.base_dir:
            logger.warning("Document %r resolves outside the storage directory", name)
            raise InvalidDocumentName(name)
        return path

    def _existing_path(self, name: str) -> Path:
        try:
            path = self._path(name)
            found = path.is_file()
        except (InvalidDocumentName, OSError):
            raise DocumentNotFound(name)
        if not found:
            raise DocumentNotFound(name)
        return path

    def list(self) -> list[str]:
        names = []
        for child in self.base_dir.iterdir():
            if child.name.startswith("."):
                continue
            if child.is_file():
                names.append(child.name)
        return sorted(names)

    def exists(self, name: str) -> bool:
        try:
            self._existing_path(name)
        except DocumentNotFound:
            return False
        return True

    def read(self, name: str) -> Document:
        path = self._existing_path(name)
        return Document(name=name, content=path.read_bytes(), kind=DocumentKind.from_name(name))

    def write(self, name: str, content: bytes) -> Path:
        """Create or overwrite a document.

        A new file gets 0o666 minus the process umask, like a plain open(); an
        overwritten file keeps its permission bits.
        """
        dest = self._path(name)
        tmp = self.base_dir / f"{_TMP_PREFIX}{uuid.uuid4().hex}"

        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            try:
                os.chmod(tmp, stat.S_IMODE(dest.stat().st_mode))
            except FileNotFoundError:
                pass
            os.replace(tmp, dest)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        logger.info("Wrote %s (%d bytes)", name, len(content))
        return dest

    def create_empty(self, name: str) -> str:
        """Create an empty document; returns the normalized (stripped) name."""
        name = (name or "").strip()
        if not name or not Path(name).suffix:
            raise InvalidDocumentName(name)
        self.write(name, b"")
        logger.info("Created %s", name)
        return name

    def delete(self, name: str) -> None:
        path = self._existing_path(name)
        path.unlink()
        logger.info("Deleted %s", name)
