"""
URL builder - the inverse of extraction.

Omitted optional values are emitted as empty segments (``//``) so that
``extract(template, build_url(template, params))`` binds the same values.
"""

from typing import List, Mapping, Union

from ..faults import UrlBuildFault
from .ast_nodes import ParamSegment, RouteTemplate
from .tokenizer import tokenize


def build_url(template: Union[RouteTemplate, str], params: Mapping[str, str]) -> str:
    """
    Fill ``template`` with ``params``.

    Raises:
        UrlBuildFault: a required parameter has no value
    """
    if isinstance(template, str):
        template = tokenize(template)

    missing = [
        seg.name for seg in template.params
        if not seg.optional and not params.get(seg.name)
    ]
    if missing:
        raise UrlBuildFault(template.raw, missing)

    parts: List[str] = []
    for segment in template.segments:
        if isinstance(segment, ParamSegment):
            parts.append(str(params.get(segment.name) or ""))
        else:
            parts.append(segment.value)

    return "/" + "/".join(parts)
