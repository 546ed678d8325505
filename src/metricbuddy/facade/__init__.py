"""
Facade - MetricsCollectors and Its Factories.
"""

from metricbuddy.facade.metrics_collectors import (
    MetricsCollectors,
    create_metrics_collectors,
    default_instance,
)

__all__ = [
    "MetricsCollectors",
    "create_metrics_collectors",
    "default_instance",
]
