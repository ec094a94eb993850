"""
Link Scanner Module

Finds the passages a passage body links to. Supports the Twee link forms:
- [[target]]
- [[display->target]]
- [[target<-display]]
- [[display|target]]
- [img[source]] image links, reported by their first bracketed part

When a link contains more than one separator, the first rule in LINK_RULES
that matches wins (-> before <- before |).
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterator, List, Tuple

# Opening of a link: "[[" or "[img["
LINK_OPEN_RE = re.compile(r'\[(?:img)?\[')
LINK_CLOSE = ']]'


@dataclass(frozen=True)
class LinkRef:
    """A classified link: which syntax matched and the target passage name."""
    kind: str
    target: str


def _after_last(separator: str) -> Callable[[str], str]:
    return lambda text: text.rsplit(separator, 1)[-1]


def _before_first(separator: str) -> Callable[[str], str]:
    return lambda text: text.split(separator, 1)[0]


# Ordered (kind, predicate, extractor) rules; the final rule always matches.
LINK_RULES: List[Tuple[str, Callable[[str], bool], Callable[[str], str]]] = [
    ('arrow', lambda text: '->' in text, _after_last('->')),
    ('reverse_arrow', lambda text: '<-' in text, _before_first('<-')),
    ('pipe', lambda text: '|' in text, _after_last('|')),
    ('plain', lambda text: True, lambda text: text),
]


def classify_link(link_text: str) -> LinkRef:
    """Classify the text inside a link and extract its target.

    Args:
        link_text: Link text without the surrounding brackets

    Returns:
        LinkRef with the rule kind and the stripped target name
    """
    for kind, matches, extract in LINK_RULES:
        if matches(link_text):
            return LinkRef(kind, extract(link_text).strip())
    raise AssertionError("unreachable: the plain rule matches everything")


def iter_links(passage_body: str) -> Iterator[str]:
    """Lazily yield linked passage names in order of appearance."""
    segments = LINK_OPEN_RE.split(passage_body)[1:]
    for segment in segments:
        # Unterminated links are not links
        if LINK_CLOSE not in segment:
            continue
        link_text = segment.split(']', 1)[0]
        yield classify_link(link_text).target


def scan_links(passage_body: str) -> List[str]:
    """Return all linked passage names in order of appearance.

    Duplicates are kept; the result has at most one entry per link opener.
    """
    return list(iter_links(passage_body))
