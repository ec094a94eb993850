"""
Document storage.

The rest of the library only needs something that satisfies DocumentStore.
FileDocumentStore keeps documents as UTF-8 files under a root directory;
document ids are paths relative to that root.
"""

import logging
from pathlib import Path
from typing import Protocol, Union

from twee_bridge.errors import DocumentStoreError

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    def open(self, doc_id: str) -> str:
        """Return the full current text of a document."""

    def save(self, doc_id: str) -> None:
        """Flush pending edits so that open() returns fresh text."""

    def write_all(self, doc_id: str, data: bytes) -> None:
        """Replace the document contents."""


class FileDocumentStore:
    """Documents stored as files under a root directory."""

    def __init__(self, root: Union[str, Path] = '.'):
        self.root = Path(root).resolve()

    def path_for(self, doc_id: str) -> Path:
        path = (self.root / doc_id).resolve()
        if path != self.root and self.root not in path.parents:
            raise DocumentStoreError(f"Document {doc_id} is outside {self.root}")
        return path

    def doc_id_for(self, path: Union[str, Path]) -> str:
        """Document id (root-relative POSIX path) of a file under the root."""
        return Path(path).resolve().relative_to(self.root).as_posix()

    def open(self, doc_id: str) -> str:
        path = self.path_for(doc_id)
        if not path.is_file():
            raise DocumentStoreError(f"Document not found: {doc_id}")
        # newline='' keeps CRLF line endings as they are on disk
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()

    def save(self, doc_id: str) -> None:
        # Files are written through immediately; nothing is buffered
        self.path_for(doc_id)

    def write_all(self, doc_id: str, data: bytes) -> None:
        path = self.path_for(doc_id)
        path.write_bytes(data)
        logger.debug(f"Wrote {len(data)} bytes to {path}")
