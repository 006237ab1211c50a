"""
Engine configuration.

Sources are layered; each one overrides what came before it:

1. ``EngineConfig`` defaults
2. JSON / YAML files, in the order given
3. A ``.env`` file (only ``NAVPARAMS_*`` keys)
4. The process environment (only ``NAVPARAMS_*`` keys)
5. Explicit overrides

``NAVPARAMS_MONITOR_CAPACITY=50`` sets ``monitor_capacity``; a double
underscore nests (``NAVPARAMS_REPORT__WIDTH`` sets ``report.width``).
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import yaml
from dotenv import dotenv_values

from .faults import ConfigFault
from .monitor import DEFAULT_CAPACITY

logger = logging.getLogger("navparams.config")

ENV_PREFIX = "NAVPARAMS_"

_TRUE = frozenset({"true", "yes", "on"})
_FALSE = frozenset({"false", "no", "off"})
_NULL = frozenset({"none", "null", ""})


@dataclass(frozen=True)
class EngineConfig:
    """Settings for a ``NestedParameterEngine``."""
    monitor_capacity: int = DEFAULT_CAPACITY
    cache_max_size: Optional[int] = None
    enable_stats: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def coerce_env_value(raw: str) -> Any:
    """Turn an environment string into a bool, None, number, JSON value or str."""
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    if lowered in _NULL:
        return None

    for number in (int, float):
        try:
            return number(raw)
        except ValueError:
            continue

    if raw.lstrip().startswith(("{", "[")):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Value %r looks like JSON but does not parse", raw)
    return raw


def deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``source`` into ``target`` in place, recursing into nested dicts."""
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, Mapping):
            deep_merge(existing, value)
        else:
            target[key] = value
    return target


def _read_file(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        raise ConfigFault(str(path), "config file not found")

    text = path.read_text()
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        elif path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            raise ConfigFault(str(path), f"unsupported config format '{path.suffix}'")
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigFault(str(path), f"malformed {path.suffix[1:]}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFault(str(path), "top level must be a mapping")
    return data


def _positive_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigFault(key, f"must be a positive integer, got {value!r}")
    return value


class ConfigLoader:
    """
    Collects configuration from every source into one nested dict.

    Usage::

        loader = ConfigLoader.load(paths=["navparams.yaml"], env_file=".env")
        engine = NestedParameterEngine.from_config(loader.to_engine_config())
    """

    def __init__(self, env_prefix: str = ENV_PREFIX):
        self.env_prefix = env_prefix
        self.data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[Iterable[Union[str, Path]]] = None,
        env_prefix: str = ENV_PREFIX,
        env_file: Optional[str] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ConfigLoader":
        """
        Args:
            paths: ``.json``, ``.yaml`` or ``.yml`` files
            env_prefix: Prefix selecting environment keys
            env_file: ``.env`` file; skipped when it does not exist
            overrides: Applied last
            environ: Environment mapping, ``os.environ`` when omitted
        """
        loader = cls(env_prefix)
        for path in paths or ():
            loader.add_file(path)
        if env_file:
            loader.add_env_file(env_file)
        loader.add_environ(os.environ if environ is None else environ)
        if overrides:
            deep_merge(loader.data, overrides)
        return loader

    def add_file(self, path: Union[str, Path]):
        path = Path(path)
        deep_merge(self.data, _read_file(path))
        logger.debug("Loaded config file %s", path)

    def add_env_file(self, path: str):
        if not Path(path).is_file():
            logger.debug("No env file at %s", path)
            return
        values = {k: v for k, v in dotenv_values(path).items() if v is not None}
        self.add_environ(values)

    def add_environ(self, environ: Mapping[str, str]):
        for key, raw in environ.items():
            if not key.startswith(self.env_prefix):
                continue
            *parents, leaf = key[len(self.env_prefix):].lower().split("__")
            node = self.data
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = coerce_env_value(raw)

    def get(self, dotted: str, default: Any = None) -> Any:
        """``get("report.width")`` -> nested lookup, ``default`` when absent."""
        node: Any = self.data
        for part in dotted.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def to_dict(self) -> Dict[str, Any]:
        return self.data

    def to_engine_config(self) -> EngineConfig:
        """Validate the collected values and build an ``EngineConfig``."""
        known = {f.name for f in fields(EngineConfig)}
        unknown = sorted(set(self.data) - known)
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", unknown)

        capacity = _positive_int("monitor_capacity", self.data.get("monitor_capacity", DEFAULT_CAPACITY))

        max_size = self.data.get("cache_max_size")
        if max_size is not None and (isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 0):
            raise ConfigFault("cache_max_size", f"must be a non-negative integer or null, got {max_size!r}")

        enable_stats = self.data.get("enable_stats", True)
        # ``NAVPARAMS_ENABLE_STATS=1`` arrives as the int 1
        if type(enable_stats) is int and enable_stats in (0, 1):
            enable_stats = bool(enable_stats)
        if not isinstance(enable_stats, bool):
            raise ConfigFault("enable_stats", f"must be a boolean, got {enable_stats!r}")

        return EngineConfig(
            monitor_capacity=capacity,
            cache_max_size=max_size,
            enable_stats=enable_stats,
        )
