"""
Metrics aggregation for QUASAR.
"""

from quasar.metrics.aggregator import calculate_metrics

__all__ = ['calculate_metrics']
