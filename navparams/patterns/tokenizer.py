"""
Tokenizer for route templates and actual paths.

Template syntax::

    /users/:id                 # required parameter
    /users/:id?/profile        # optional parameter
    /org/:orgId/team/:teamId   # parameters interleaved with static text

Paths are split on ``/``. The artifact produced by a leading slash is
dropped; interior empty segments (``//``) are kept because they stand for an
omitted value.
"""

from functools import lru_cache
from typing import List

from .ast_nodes import ParamSegment, RouteTemplate, Segment, StaticSegment

PARAM_PREFIX = ":"
OPTIONAL_SUFFIX = "?"


def _classify(part: str) -> Segment:
    if not part.startswith(PARAM_PREFIX):
        return StaticSegment(part)

    name = part[len(PARAM_PREFIX):]
    optional = name.endswith(OPTIONAL_SUFFIX)
    if optional:
        name = name[:-len(OPTIONAL_SUFFIX)]

    # ``:``, ``:?`` and ``::x`` are not parameters; they are matched literally
    if not name or PARAM_PREFIX in name:
        return StaticSegment(part)

    return ParamSegment(name=name, optional=optional)


@lru_cache(maxsize=1024)
def tokenize(template: str) -> RouteTemplate:
    """
    Parse a route template into a ``RouteTemplate``.

    Never raises. Each distinct template string is parsed once; the
    returned template is immutable and shared between callers.

    Examples::

        "/users/:id"   -> (StaticSegment("users"), ParamSegment("id"))
        "/a/:b?/"      -> (StaticSegment("a"), ParamSegment("b", optional=True))
    """
    parts = template.split("/")
    if template.startswith("/"):
        parts = parts[1:]
    if parts and parts[-1] == "":
        parts = parts[:-1]

    return RouteTemplate(raw=template, segments=tuple(_classify(p) for p in parts))


def split_path(path: str) -> List[str]:
    """
    Split an actual path into literal segments.

    ``"/org//user/"`` -> ``["org", "", "user", ""]``. The trailing empty
    segment is kept here; extraction decides whether it is an artifact.
    """
    if not path:
        return []
    parts = path.split("/")
    if path.startswith("/"):
        parts = parts[1:]
    return parts
