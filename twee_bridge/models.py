"""
Data model for passages, header updates and broadcast records.

These mirror the JSON shapes exchanged with the editor client:
- PositionUpdate: {"name", "origin", "position": {"x", "y"}, "size": {"x", "y"}, "tags"?}
- PassageRecord: {"origin", "name", "tags", "meta", "linksToNames"}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]


def _format_number(value: Number) -> str:
    # 10.0 -> "10", 10.5 -> "10.5"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_number(text: str) -> Number:
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


@dataclass(frozen=True)
class Vector:
    """A point or extent on the story map."""
    x: Number
    y: Number

    def __str__(self) -> str:
        return f"{_format_number(self.x)},{_format_number(self.y)}"

    def to_dict(self) -> Dict:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: Dict) -> 'Vector':
        return cls(data['x'], data['y'])

    @classmethod
    def parse(cls, text: str) -> 'Vector':
        """Parse the "x,y" form used in header metadata."""
        x, y = text.split(',')
        return cls(_parse_number(x), _parse_number(y))


DEFAULT_SIZE = Vector(100, 100)


@dataclass
class PassageDescriptor:
    """A passage known to the registry.

    Instances are unhashable; use `key`, the (origin, name) pair, as the identity.
    """
    name: str
    origin: str
    tags: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> tuple:
        return (self.origin, self.name)


@dataclass
class PositionUpdate:
    """Desired header state for one passage."""
    name: str
    origin: str
    position: Vector
    size: Vector = DEFAULT_SIZE
    tags: Optional[List[str]] = None

    def to_dict(self) -> Dict:
        data = {
            'name': self.name,
            'origin': self.origin,
            'position': self.position.to_dict(),
            'size': self.size.to_dict(),
        }
        if self.tags is not None:
            data['tags'] = list(self.tags)
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> 'PositionUpdate':
        size = data.get('size')
        return cls(
            name=data['name'],
            origin=data['origin'],
            position=Vector.from_dict(data['position']),
            size=Vector.from_dict(size) if size else DEFAULT_SIZE,
            tags=list(data['tags']) if data.get('tags') is not None else None,
        )


@dataclass
class PassageRecord:
    """One entry of the `passages` broadcast."""
    origin: str
    name: str
    tags: List[str]
    meta: Dict[str, Any]
    links_to_names: List[str]

    def to_dict(self) -> Dict:
        return {
            'origin': self.origin,
            'name': self.name,
            'tags': list(self.tags),
            'meta': dict(self.meta),
            'linksToNames': list(self.links_to_names),
        }
