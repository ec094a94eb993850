"""
twee-bridge: passage extraction, link discovery and header rewriting for Twee documents

This library reads and rewrites Twee source files (``:: Name [tags] {meta}``
headers and ``[[...]]`` links) without disturbing unrelated document content.

Modules:
- headers: Build header patterns, parse and compose header lines
- extract: Extract a passage body from a document
- links: Discover linked passage names in a passage body
- rewrite: Rewrite passage headers after position/size/tag changes
- sync: Broadcast passages with their links, apply update batches
- service: Flask HTTP channel for the broadcast and update batches
"""

from twee_bridge.errors import DocumentStoreError, PassageNotFoundError, TweeBridgeError
from twee_bridge.extract import extract_block, extract_body
from twee_bridge.headers import (
    build_named_header_pattern,
    compose_header,
    generic_header_pattern,
    parse_header,
)
from twee_bridge.links import classify_link, iter_links, scan_links
from twee_bridge.models import PassageDescriptor, PassageRecord, PositionUpdate, Vector
from twee_bridge.rewrite import rewrite

__version__ = "1.0.0"

__all__ = [
    "DocumentStoreError",
    "PassageDescriptor",
    "PassageNotFoundError",
    "PassageRecord",
    "PositionUpdate",
    "TweeBridgeError",
    "Vector",
    "build_named_header_pattern",
    "classify_link",
    "compose_header",
    "extract_block",
    "extract_body",
    "generic_header_pattern",
    "iter_links",
    "parse_header",
    "rewrite",
    "scan_links",
]
