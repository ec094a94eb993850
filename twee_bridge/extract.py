"""
Extract Passage Module

Locates a passage inside a Twee document and returns its body: the text
between the end of the passage's header line and the start of the next
header line (or the end of the document).
"""

import logging
from typing import Tuple

from twee_bridge.errors import PassageNotFoundError
from twee_bridge.headers import find_header, generic_header_pattern
from twee_bridge.models import PassageDescriptor

logger = logging.getLogger(__name__)


def _locate(document_text: str, passage: PassageDescriptor) -> Tuple[int, int, int]:
    """Return (header_start, content_start, content_end) offsets."""
    header = find_header(document_text, passage.name)
    if header is None:
        raise PassageNotFoundError(passage.name, passage.origin)

    content_start = header.end()
    # Searching strictly after the header keeps it from matching itself
    next_header = generic_header_pattern().search(document_text, content_start)
    content_end = next_header.start() if next_header else len(document_text)
    return header.start(), content_start, content_end


def extract_body(document_text: str, passage: PassageDescriptor) -> str:
    """Extract the body of `passage` from the document text.

    Args:
        document_text: Full contents of the passage's origin document
        passage: Descriptor of the passage to extract

    Returns:
        The passage body, including the newline that ends the header line

    Raises:
        PassageNotFoundError: The passage header is not in the document
    """
    _, content_start, content_end = _locate(document_text, passage)
    return document_text[content_start:content_end]


def extract_block(document_text: str, passage: PassageDescriptor) -> Tuple[str, str]:
    """Extract (header_line, body) of `passage`.

    ``header_line + body`` is the contiguous passage block as it appears in
    the document.
    """
    header_start, content_start, content_end = _locate(document_text, passage)
    logger.debug(f"Passage {passage.name!r} spans {header_start}:{content_end}")
    return (
        document_text[header_start:content_start],
        document_text[content_start:content_end],
    )
