"""
Parameter hierarchy - parent/child dependency tree among template parameters.

Each parameter's parent is the nearest preceding parameter segment in the
same template, so the relation is a forest by construction.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .ast_nodes import ParamSegment, RouteTemplate
from .tokenizer import tokenize


@dataclass(frozen=True)
class NestedParameter:
    """A parameter positioned in the dependency tree."""
    name: str
    is_optional: bool = False
    parent: Optional[str] = None
    children: Tuple[str, ...] = ()
    level: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "is_optional": self.is_optional,
            "parent": self.parent,
            "children": list(self.children),
            "level": self.level,
        }


Hierarchy = Mapping[str, NestedParameter]


def build_hierarchy(template: Union[RouteTemplate, str]) -> Hierarchy:
    """
    Build the parameter hierarchy for a template.

    Parameters are scanned left to right; static segments in between do not
    break the chain. A name that repeats an earlier parameter is ignored.
    """
    if isinstance(template, str):
        template = tokenize(template)

    draft: Dict[str, Dict[str, Any]] = {}
    last_seen: Optional[str] = None

    for segment in template.segments:
        if not isinstance(segment, ParamSegment) or segment.name in draft:
            continue

        level = draft[last_seen]["level"] + 1 if last_seen is not None else 0
        draft[segment.name] = {
            "is_optional": segment.optional,
            "parent": last_seen,
            "children": [],
            "level": level,
        }
        if last_seen is not None:
            draft[last_seen]["children"].append(segment.name)
        last_seen = segment.name

    return MappingProxyType({
        name: NestedParameter(
            name=name,
            is_optional=data["is_optional"],
            parent=data["parent"],
            children=tuple(data["children"]),
            level=data["level"],
        )
        for name, data in draft.items()
    })


def iter_tree(hierarchy: Hierarchy) -> List[NestedParameter]:
    """Depth-first listing of the forest, roots in insertion order."""
    ordered: List[NestedParameter] = []
    seen = set()

    def visit(param: NestedParameter):
        if param.name in seen:
            return
        seen.add(param.name)
        ordered.append(param)
        for child in param.children:
            if child in hierarchy:
                visit(hierarchy[child])

    for param in hierarchy.values():
        if param.parent is None or param.parent not in hierarchy:
            visit(param)
    return ordered


# ============================================================================
# Relationship analysis
# ============================================================================

@dataclass
class RelationshipAnalysis:
    """Issues found in a hierarchy supplied by a caller."""
    cyclical: List[str] = field(default_factory=list)
    redundant: List[str] = field(default_factory=list)
    dead_branches: List[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(self.cyclical or self.redundant or self.dead_branches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cyclical": self.cyclical,
            "redundant": self.redundant,
            "dead_branches": self.dead_branches,
        }


def detect_cycles(hierarchy: Hierarchy) -> List[str]:
    """Names that sit on a parent cycle, in first-seen order."""
    on_cycle: List[str] = []

    for start in hierarchy:
        path: List[str] = []
        current: Optional[str] = start
        while current is not None and current in hierarchy and current not in path:
            path.append(current)
            current = hierarchy[current].parent
        if current is not None and current in path:
            for name in path[path.index(current):]:
                if name not in on_cycle:
                    on_cycle.append(name)

    return on_cycle


def analyze_relationships(hierarchy: Hierarchy) -> RelationshipAnalysis:
    """
    Analyze a hierarchy for structural issues.

    Hierarchies produced by ``build_hierarchy`` are always clean; this is
    meant for maps assembled or edited by hand.
    """
    analysis = RelationshipAnalysis(cyclical=detect_cycles(hierarchy))

    by_children: Dict[Tuple[str, ...], List[str]] = {}
    for name, param in hierarchy.items():
        if param.children:
            by_children.setdefault(tuple(sorted(param.children)), []).append(name)
    for group in by_children.values():
        for name in group[1:]:
            analysis.redundant.append(f"{name} (similar to {group[0]})")

    all_children = {child for param in hierarchy.values() for child in param.children}
    for name, param in hierarchy.items():
        if param.parent and name not in all_children:
            analysis.dead_branches.append(name)

    return analysis
