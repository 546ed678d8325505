"""
Registry - Memoized Collector Classes and Instances.

Components:
    - KeyedCache: single-flight cache, one build per key
    - CollectorRegistry: one collector per source type
"""

from metricbuddy.registry.collector_registry import CollectorRegistry
from metricbuddy.registry.keyed_cache import CacheStats, KeyedCache

__all__ = [
    "CollectorRegistry",
    "CacheStats",
    "KeyedCache",
]
