"""
Data models for QUASAR.
"""

from quasar.models.data_models import (
    Asset,
    DashboardMetrics,
    DataMode,
    assets_to_dataframe,
)

__all__ = [
    'Asset',
    'DashboardMetrics',
    'DataMode',
    'assets_to_dataframe',
]
