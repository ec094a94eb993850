"""
Editor synchronisation.

Glue between the parsing core and its collaborators:
- collect_passages / send_passages_to_client: build and emit the `passages`
  broadcast (every passage with the names it links to)
- update_passages: rewrite headers for a batch of position/size/tag updates,
  one read-rewrite-write cycle per origin document
"""

import logging
from typing import Any, Dict, Iterable, List, Protocol

from twee_bridge.errors import PassageNotFoundError
from twee_bridge.extract import extract_body
from twee_bridge.links import scan_links
from twee_bridge.models import DEFAULT_SIZE, PassageDescriptor, PassageRecord, PositionUpdate, Vector
from twee_bridge.registry import Registry
from twee_bridge.rewrite import group_by_origin, rewrite
from twee_bridge.store import DocumentStore

logger = logging.getLogger(__name__)

PASSAGES_EVENT = 'passages'


class Channel(Protocol):
    def emit(self, event: str, payload: Any) -> None:
        """Deliver an event to the connected client."""


def linked_passage_names(store: DocumentStore, passage: PassageDescriptor) -> List[str]:
    """Names of the passages that `passage` links to."""
    return scan_links(extract_body(store.open(passage.origin), passage))


def collect_passages(passages: Iterable[PassageDescriptor], store: DocumentStore,
                     skip_missing: bool = False) -> List[PassageRecord]:
    """Build broadcast records for a snapshot of passages.

    Each origin document is read once.

    Args:
        passages: Registry snapshot
        store: Where the origin documents live
        skip_missing: Leave out passages whose header is missing instead of raising

    Raises:
        PassageNotFoundError: A passage header is missing and skip_missing is False
    """
    documents: Dict[str, str] = {}
    records = []
    for passage in passages:
        if passage.origin not in documents:
            documents[passage.origin] = store.open(passage.origin)
        try:
            body = extract_body(documents[passage.origin], passage)
        except PassageNotFoundError as e:
            if not skip_missing:
                raise
            logger.warning(f"Skipping passage: {e}")
            continue
        records.append(PassageRecord(
            origin=passage.origin,
            name=passage.name,
            tags=list(passage.tags),
            meta=dict(passage.meta),
            links_to_names=scan_links(body),
        ))
    return records


def send_passages_to_client(registry: Registry, store: DocumentStore, channel: Channel,
                            skip_missing: bool = False) -> List[Dict]:
    """Emit the `passages` event with every registered passage and its links.

    Returns:
        The emitted payload
    """
    records = collect_passages(registry.list_passages(), store, skip_missing=skip_missing)
    payload = [record.to_dict() for record in records]
    logger.info(f"Sending {len(payload)} passages to client")
    channel.emit(PASSAGES_EVENT, payload)
    return payload


def update_passages(updates: Iterable[PositionUpdate], store: DocumentStore,
                    default_size: Vector = DEFAULT_SIZE) -> List[str]:
    """Rewrite passage headers for a batch of updates.

    Every origin document is read and rewritten before any of them is
    written, so a document that cannot be opened leaves the whole batch
    unwritten.

    Returns:
        The origin documents that were rewritten
    """
    grouped = group_by_origin(updates)
    edited: Dict[str, str] = {}
    for origin, file_updates in grouped.items():
        store.save(origin)
        edited[origin] = rewrite(store.open(origin), file_updates, default_size)

    for origin, text in edited.items():
        store.write_all(origin, text.encode('utf-8'))
        logger.info(f"Rewrote {len(grouped[origin])} passage header(s) in {origin}")
    return list(grouped)
