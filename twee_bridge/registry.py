"""
Passage registry.

TweeRegistry builds its passage list by reading every header line of a set of
Twee documents, the way an editor would when it opens a story folder.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Union

from twee_bridge.headers import iter_headers
from twee_bridge.models import PassageDescriptor
from twee_bridge.store import DocumentStore, FileDocumentStore

logger = logging.getLogger(__name__)

TWEE_SUFFIXES = ('.twee', '.tw')


class Registry(Protocol):
    def list_passages(self) -> List[PassageDescriptor]:
        """Return a snapshot of all known passages."""


def parse_document(origin: str, document_text: str) -> List[PassageDescriptor]:
    """List the passages declared in one document, in document order."""
    passages = []
    for _, header in iter_headers(document_text):
        if not header.name:
            logger.warning(f"Skipping header without a passage name in {origin}")
            continue
        passages.append(PassageDescriptor(
            name=header.name,
            origin=origin,
            tags=header.tags,
            meta=header.meta,
        ))
    return passages


class TweeRegistry:
    """Registry backed by the headers of a set of Twee documents."""

    def __init__(self, store: DocumentStore, doc_ids: Iterable[str]):
        self.store = store
        self.doc_ids = list(doc_ids)

    @classmethod
    def from_directory(cls, root: Union[str, Path],
                       store: Optional[FileDocumentStore] = None) -> 'TweeRegistry':
        """Registry over every Twee file under `root`, searched recursively."""
        store = store or FileDocumentStore(root)
        root = Path(root)
        doc_ids = [
            store.doc_id_for(path)
            for path in sorted(root.rglob('*'))
            if path.is_file() and path.suffix in TWEE_SUFFIXES
        ]
        logger.info(f"Found {len(doc_ids)} Twee file(s) under {root}")
        return cls(store, doc_ids)

    def list_passages(self) -> List[PassageDescriptor]:
        passages = []
        for doc_id in self.doc_ids:
            passages.extend(parse_document(doc_id, self.store.open(doc_id)))
        return passages
