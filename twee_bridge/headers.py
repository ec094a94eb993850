"""
Passage header patterns.

A Twee passage header is a single line:

    :: Name [tag1 tag2] {"position":"600,400","size":"100,200"}

The tag block and the metadata block are both optional. All patterns here are
compiled in multiline mode so ``^`` and ``$`` anchor to line boundaries.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

HEADER_PREFIX = '::'

_GENERIC_HEADER_RE = re.compile(
    r'^::[ \t]*(?P<name>.*?)[ \t]*'
    r'(?:\[(?P<tags>[^\]]*)\][ \t]*?)?'
    r'(?:(?P<meta>\{.*\})[ \t]*)?\r?$',
    re.MULTILINE,
)


@dataclass
class ParsedHeader:
    """Name, tags and metadata of one header line."""
    name: str
    tags: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


@lru_cache(maxsize=512)
def build_named_header_pattern(name: str) -> 're.Pattern[str]':
    """Build the pattern matching the header line of passage `name`.

    The name is matched literally (regex metacharacters escaped), followed by
    anything up to the end of the line.

    Args:
        name: Passage name, non-empty

    Returns:
        Compiled multiline pattern
    """
    if not isinstance(name, str) or not name:
        raise ValueError(f"Passage name must be a non-empty string, got {name!r}")
    logger.debug(f"Building header pattern for passage {name!r}")
    return re.compile(r'^::\s*' + re.escape(name) + r'.*?$', re.MULTILINE)


def generic_header_pattern() -> 're.Pattern[str]':
    """Pattern matching any header line (`:: <name> [<tags>] {<meta>}`)."""
    return _GENERIC_HEADER_RE


def find_header(text: str, name: str) -> Optional['re.Match[str]']:
    """Find the first header line of passage `name` in `text`."""
    return build_named_header_pattern(name).search(text)


def _parse_meta(raw: Optional[str], line: str) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        meta = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Ignoring invalid header metadata in {line!r}: {e}")
        return {}
    if not isinstance(meta, dict):
        logger.warning(f"Ignoring non-object header metadata in {line!r}")
        return {}
    return meta


def _from_match(match: 're.Match[str]') -> ParsedHeader:
    tags = match.group('tags')
    return ParsedHeader(
        name=match.group('name'),
        tags=tags.split() if tags else [],
        meta=_parse_meta(match.group('meta'), match.group(0)),
    )


def parse_header(line: str) -> Optional[ParsedHeader]:
    """
    Parse a passage header line.

    Args:
        line: A line that might be a passage header

    Returns:
        ParsedHeader if the line is a header, None otherwise

    Examples:
        >>> parse_header(":: Start")
        ParsedHeader(name='Start', tags=[], meta={})
        >>> parse_header(':: Cave [dark wet] {"position":"10,20"}')
        ParsedHeader(name='Cave', tags=['dark', 'wet'], meta={'position': '10,20'})
        >>> parse_header("Not a header") is None
        True
    """
    line = line.rstrip('\n')
    if not line.startswith(HEADER_PREFIX):
        return None
    match = _GENERIC_HEADER_RE.match(line)
    if not match:
        return None
    return _from_match(match)


def iter_headers(text: str) -> Iterator[Tuple['re.Match[str]', ParsedHeader]]:
    """Yield (match, parsed header) for every header line in `text`."""
    for match in _GENERIC_HEADER_RE.finditer(text):
        yield match, _from_match(match)


def compose_header(name: str, tags: Optional[List[str]], meta: Dict[str, Any]) -> str:
    """Compose a header line: `:: <name> [<tags>] <json>`.

    The tag block is omitted when there are no tags. Metadata is serialized as
    compact single-line JSON.
    """
    line = f"{HEADER_PREFIX} {name} "
    if tags:
        line += f"[{' '.join(tags)}] "
    return line + json.dumps(meta, separators=(',', ':'), ensure_ascii=False)
