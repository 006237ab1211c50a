"""
AST node definitions for route templates.

A template such as ``/products/:category?/:productId`` is parsed into an
immutable sequence of static and parameter segments.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union


class SegmentKind(str, Enum):
    """Kind of template segment."""
    STATIC = "static"
    PARAM = "param"


@dataclass(frozen=True)
class StaticSegment:
    """Literal segment; must equal the path segment exactly."""
    value: str

    @property
    def kind(self) -> SegmentKind:
        return SegmentKind.STATIC

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value}


@dataclass(frozen=True)
class ParamSegment:
    """Named parameter segment (``:name`` or ``:name?``)."""
    name: str
    optional: bool = False

    @property
    def kind(self) -> SegmentKind:
        return SegmentKind.PARAM

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "name": self.name, "optional": self.optional}


Segment = Union[StaticSegment, ParamSegment]


@dataclass(frozen=True)
class RouteTemplate:
    """Complete parsed route template."""
    raw: str
    segments: Tuple[Segment, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.segments)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "raw": self.raw,
            "segments": [s.to_dict() for s in self.segments],
        }

    @property
    def params(self) -> List[ParamSegment]:
        """Parameter segments in template order."""
        return [s for s in self.segments if isinstance(s, ParamSegment)]

    def get_param_names(self) -> List[str]:
        return [s.name for s in self.params]

    def get_static_prefix(self) -> str:
        """Extract maximal static prefix."""
        prefix_parts = []
        for segment in self.segments:
            if isinstance(segment, StaticSegment):
                prefix_parts.append(segment.value)
            else:
                break
        return "/" + "/".join(prefix_parts) if prefix_parts else ""
