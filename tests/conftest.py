"""
Shared test fixtures and helpers for the NavParams test suite.
"""

import pytest

from navparams.cache import MemoizationLayer
from navparams.engine import NestedParameterEngine
from navparams.monitor import PerformanceMonitor


@pytest.fixture
def monitor():
    """Fresh performance monitor with a small capacity."""
    return PerformanceMonitor(capacity=10)


@pytest.fixture
def memo():
    """Fresh, unbounded memoization layer."""
    return MemoizationLayer()


@pytest.fixture
def engine(monitor):
    """Engine wired to the ``monitor`` fixture."""
    return NestedParameterEngine(monitor=monitor)
