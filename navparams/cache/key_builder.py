"""
Cache key builders for the memoization layer.

Keys are deterministic serializations of the call arguments, hashed to a
fixed length so that large parameter maps and rule sets do not inflate the
cache index.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union

from ..patterns.ast_nodes import RouteTemplate


class HashKeyBuilder:
    """
    Hash-based key builder.

    Pattern: ``{namespace}:{sha256_hex[:hash_length]}``
    """

    def __init__(self, hash_length: int = 64):
        self._hash_length = min(hash_length, 64)

    def build(self, namespace: str, raw_key: str) -> str:
        key_hash = hashlib.sha256(raw_key.encode("utf-8")).hexdigest()[:self._hash_length]
        return f"{namespace}:{key_hash}"


_key_builder = HashKeyBuilder()


def _template_text(template: Union[RouteTemplate, str]) -> str:
    return template.raw if isinstance(template, RouteTemplate) else template


def _path_text(path: Union[Sequence[str], str]) -> Union[str, list]:
    return path if isinstance(path, str) else list(path)


def extraction_key(template: Union[RouteTemplate, str], path: Union[Sequence[str], str]) -> str:
    """Key for one ``(template, path)`` pair."""
    raw = json.dumps([_template_text(template), _path_text(path)])
    return _key_builder.build("extraction", raw)


def validation_key(
    params: Mapping[str, str],
    hierarchy: Mapping[str, Any],
    rules: Optional[Mapping[str, Any]] = None,
) -> Tuple[str, Tuple[Callable[..., Any], ...]]:
    """
    Key for one ``(params, hierarchy, rules)`` triple.

    Returns ``(digest, predicates)``. Custom predicates have no stable
    serialization, so the key holds the callables themselves: they compare
    by identity and stay alive as long as the cache entry does.
    """
    ordered_rules = sorted((rules or {}).items(), key=lambda item: item[0])
    raw = json.dumps(
        {
            "params": sorted((str(k), str(v)) for k, v in params.items()),
            "hierarchy": sorted(
                (name, node.parent or "", bool(node.is_optional))
                for name, node in hierarchy.items()
            ),
            "rules": [(name, rule.fingerprint()) for name, rule in ordered_rules],
        },
        sort_keys=True,
    )
    predicates = tuple(rule.custom for _, rule in ordered_rules if rule.custom is not None)
    return _key_builder.build("validation", raw), predicates
