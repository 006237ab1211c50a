"""
Engine facade - one host-owned object bundling memoization and monitoring.

Plain ``extract``/``validate`` calls always do the work and record a
performance sample. The ``memoized_*`` variants go through the
``MemoizationLayer``; a cache hit returns the stored result without doing
(or timing) the work again.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from .cache.memo import MemoizationLayer
from .config import EngineConfig
from .faults import ConfigFault
from .monitor import PerformanceMonitor, PerformanceSample
from .patterns.ast_nodes import RouteTemplate
from .patterns.extraction import ExtractionResult, extract
from .patterns.hierarchy import NestedParameter
from .validation.rules import ValidationRule
from .validation.validator import ValidationResult, validate

logger = logging.getLogger("navparams.engine")

EXTRACT_OPERATION = "extract"
VALIDATE_OPERATION = "validate"

_UNSET: Any = object()


class NestedParameterEngine:
    """
    Nested route-parameter extraction and validation.

    Usage::

        engine = NestedParameterEngine()
        result = engine.memoized_extract("/org/:orgId/user/:userId", "/org/acme/user/7")
        check = engine.memoized_validate(result.params, result.hierarchy, rules)
        engine.get_metrics()
    """

    def __init__(
        self,
        memo: Optional[MemoizationLayer] = None,
        monitor: Optional[PerformanceMonitor] = None,
        *,
        cache_max_size: Any = _UNSET,
        enable_stats: Any = _UNSET,
    ):
        """
        Args:
            memo: Caller-owned layer. Its functions are used as they are, so
                memoized calls record monitor samples only when the layer
                wraps this engine's ``extract``/``validate``.
            monitor: Caller-owned monitor (default capacity otherwise)
            cache_max_size: LRU bound for the default layer (None = unbounded)
            enable_stats: Hit/miss counting for the default layer

        Raises:
            ConfigFault: ``memo`` given together with cache settings
        """
        # An empty monitor is falsy (``__len__``), so test against None
        self.monitor = PerformanceMonitor() if monitor is None else monitor
        if memo is None:
            memo = MemoizationLayer(
                max_size=None if cache_max_size is _UNSET else cache_max_size,
                enable_stats=True if enable_stats is _UNSET else enable_stats,
                extract_func=self.extract,
                validate_func=self.validate,
            )
        elif cache_max_size is not _UNSET or enable_stats is not _UNSET:
            raise ConfigFault(
                "memo",
                "cache_max_size and enable_stats apply only to the default memoization layer",
            )
        self.memo = memo

    @classmethod
    def from_config(cls, config: EngineConfig) -> "NestedParameterEngine":
        logger.debug("Creating engine from config %s", config.to_dict())
        return cls(
            monitor=PerformanceMonitor(capacity=config.monitor_capacity),
            cache_max_size=config.cache_max_size,
            enable_stats=config.enable_stats,
        )

    # ── Uncached operations ──────────────────────────────────────────

    def extract(
        self,
        template: Union[RouteTemplate, str],
        path: Union[Sequence[str], str],
    ) -> ExtractionResult:
        result = extract(template, path)
        self.monitor.record(EXTRACT_OPERATION, result.extraction_time_ms)
        return result

    def validate(
        self,
        params: Mapping[str, str],
        hierarchy: Mapping[str, NestedParameter],
        rules: Optional[Mapping[str, ValidationRule]] = None,
    ) -> ValidationResult:
        result = validate(params, hierarchy, rules)
        self.monitor.record(VALIDATE_OPERATION, result.validation_time_ms)
        return result

    # ── Cached operations ────────────────────────────────────────────

    def memoized_extract(
        self,
        template: Union[RouteTemplate, str],
        path: Union[Sequence[str], str],
    ) -> ExtractionResult:
        return self.memo.extract(template, path)

    def memoized_validate(
        self,
        params: Mapping[str, str],
        hierarchy: Mapping[str, NestedParameter],
        rules: Optional[Mapping[str, ValidationRule]] = None,
    ) -> ValidationResult:
        return self.memo.validate(params, hierarchy, rules)

    def extract_and_validate(
        self,
        template: Union[RouteTemplate, str],
        path: Union[Sequence[str], str],
        rules: Optional[Mapping[str, ValidationRule]] = None,
        memoized: bool = True,
    ) -> Tuple[ExtractionResult, ValidationResult]:
        """Extract, then validate the extracted values."""
        if memoized:
            extraction = self.memoized_extract(template, path)
            return extraction, self.memoized_validate(extraction.params, extraction.hierarchy, rules)
        extraction = self.extract(template, path)
        return extraction, self.validate(extraction.params, extraction.hierarchy, rules)

    # ── Metrics ──────────────────────────────────────────────────────

    def get_metrics(self) -> Dict[str, Dict[str, int]]:
        return self.memo.get_metrics()

    def get_history(self) -> list:
        return self.monitor.get_history()

    def clear_caches(self):
        self.memo.clear_caches()

    def last_sample(self) -> Optional[PerformanceSample]:
        history = self.monitor.get_recent(1)
        return history[0] if history else None
