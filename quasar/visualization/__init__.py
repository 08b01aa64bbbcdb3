"""
Chart data mappers and Plotly figure builders.
"""

from quasar.visualization.chart_data import (
    algorithm_distribution,
    assets_in_bucket,
    certificate_status,
    compliance_trend,
    migration_progress,
    performance_comparison,
    risk_timeline,
    risk_distribution,
    vulnerability_buckets,
    vulnerability_level,
)

__all__ = [
    'algorithm_distribution',
    'assets_in_bucket',
    'certificate_status',
    'compliance_trend',
    'migration_progress',
    'performance_comparison',
    'risk_timeline',
    'risk_distribution',
    'vulnerability_buckets',
    'vulnerability_level',
]
