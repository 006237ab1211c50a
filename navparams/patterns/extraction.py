"""
Extraction engine - binds path segments to template parameters.

The engine describes *why* a path failed to match instead of only whether it
matched: every failure mode is reported as data on the ``ExtractionResult``
and partial bindings are always returned.
"""

import logging
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from .ast_nodes import ParamSegment, RouteTemplate, StaticSegment
from .hierarchy import NestedParameter, build_hierarchy
from .tokenizer import split_path, tokenize

logger = logging.getLogger("navparams.patterns.extraction")


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of matching one path against one template."""
    params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    hierarchy: Mapping[str, NestedParameter] = field(default_factory=lambda: MappingProxyType({}))
    missing_required: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
    extraction_time_ms: float = 0.0
    template: str = ""
    path: str = ""

    @property
    def matched(self) -> bool:
        """True when the path matched structurally and every required value is present."""
        return not self.errors and not self.missing_required

    def to_dict(self) -> Dict[str, Any]:
        return {
            "template": self.template,
            "path": self.path,
            "params": dict(self.params),
            "hierarchy": {name: p.to_dict() for name, p in self.hierarchy.items()},
            "missing_required": list(self.missing_required),
            "errors": list(self.errors),
            "extraction_time_ms": self.extraction_time_ms,
        }


def _align(segments: Sequence[Any], parts: List[str]) -> List[str]:
    # A trailing slash is an artifact unless it stands in for the last value
    if len(parts) == len(segments) + 1 and parts[-1] == "":
        return parts[:-1]
    return parts


def extract(
    template: Union[RouteTemplate, str],
    path: Union[Sequence[str], str],
) -> ExtractionResult:
    """
    Extract parameter values from ``path`` according to ``template``.

    - A segment-count mismatch is recorded, binding continues up to the
      shorter of the two.
    - Static segments must match exactly (case-sensitive).
    - Parameters bind the literal segment, even when it is empty.
    - Required parameters that are empty or unbound are listed in
      ``missing_required``.
    """
    start = time.perf_counter()

    if isinstance(template, str):
        template = tokenize(template)
    if isinstance(path, str):
        raw_path = path
        parts = split_path(path)
    else:
        parts = list(path)
        raw_path = "/" + "/".join(parts)

    segments = template.segments
    parts = _align(segments, parts)
    hierarchy = build_hierarchy(template)

    errors: List[str] = []
    if len(parts) != len(segments):
        errors.append(
            f"segment count mismatch: template has {len(segments)} segments, "
            f"path has {len(parts)}"
        )

    params: Dict[str, str] = {}
    for index, (segment, literal) in enumerate(zip(segments, parts)):
        if isinstance(segment, StaticSegment):
            if literal != segment.value:
                errors.append(
                    f"segment mismatch at position {index}: "
                    f"expected '{segment.value}', got '{literal}'"
                )
        elif isinstance(segment, ParamSegment):
            if segment.name in params:
                errors.append(f"duplicate parameter '{segment.name}' at position {index}")
                continue
            params[segment.name] = literal

    missing_required = [
        name for name, param in hierarchy.items()
        if not param.is_optional and not params.get(name)
    ]

    elapsed_ms = (time.perf_counter() - start) * 1000.0

    if errors or missing_required:
        logger.debug(
            "Extraction of %r against %r: %d error(s), missing %s",
            raw_path, template.raw, len(errors), missing_required,
        )

    return ExtractionResult(
        params=MappingProxyType(params),
        hierarchy=hierarchy,
        missing_required=tuple(missing_required),
        errors=tuple(errors),
        extraction_time_ms=elapsed_ms,
        template=template.raw,
        path=raw_path,
    )


def extract_nested_parameters(template: str, path: str) -> ExtractionResult:
    """Host entry point: extract from raw template and path strings."""
    return extract(tokenize(template), path)
