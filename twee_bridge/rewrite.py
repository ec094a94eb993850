"""
Passage Rewriter Module

Rewrites passage header lines after the editor moves, resizes or retags
passages. Only the matched header lines change; passage bodies and unrelated
headers are left byte-identical.
"""

import logging
from typing import Dict, Iterable, List

from twee_bridge.headers import compose_header, find_header
from twee_bridge.models import DEFAULT_SIZE, PositionUpdate, Vector

logger = logging.getLogger(__name__)


def build_header_meta(update: PositionUpdate, default_size: Vector = DEFAULT_SIZE) -> Dict[str, str]:
    """Build the header metadata object for an update.

    `position` is always present; `size` only when it differs from the
    default size in either axis.
    """
    meta = {'position': str(update.position)}
    if update.size.x != default_size.x or update.size.y != default_size.y:
        meta['size'] = str(update.size)
    return meta


def compose_update_header(update: PositionUpdate, default_size: Vector = DEFAULT_SIZE) -> str:
    """Compose the new header line for an update."""
    return compose_header(update.name, update.tags, build_header_meta(update, default_size))


def rewrite(document_text: str, updates: Iterable[PositionUpdate],
            default_size: Vector = DEFAULT_SIZE) -> str:
    """Apply header updates to a document.

    Updates are applied in order, each against the result of the previous
    one. An update whose header is not found is skipped.

    Args:
        document_text: Full contents of the origin document
        updates: Updates for passages in this document
        default_size: Size omitted from the header metadata

    Returns:
        The updated document text
    """
    edited = document_text
    for update in updates:
        match = find_header(edited, update.name)
        if match is None:
            logger.debug(f"No header for passage {update.name!r} in {update.origin}, skipping")
            continue

        new_header = compose_update_header(update, default_size)
        # Keep CRLF line endings intact
        if match.group(0).endswith('\r'):
            new_header += '\r'
        edited = edited[:match.start()] + new_header + edited[match.end():]

    return edited


def group_by_origin(updates: Iterable[PositionUpdate]) -> Dict[str, List[PositionUpdate]]:
    """Group updates by origin document, keeping first-seen order."""
    grouped: Dict[str, List[PositionUpdate]] = {}
    for update in updates:
        grouped.setdefault(update.origin, []).append(update)
    return grouped
