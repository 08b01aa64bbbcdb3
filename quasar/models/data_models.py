"""
Data models for the QUASAR asset inventory.

This module defines the **schema layer** for QUASAR.  It provides typed
dataclasses for every value that flows between ingestion, aggregation and the
dashboard.

Role in the pipeline
--------------------
Ingestion turns raw CSV rows into ``Asset`` records.  Everything downstream
(aggregator, chart mappers, classifier, reports) reads those records and
never writes back.  That is why every model here is frozen: a derived view
can never corrupt the inventory it was computed from.

Dataclass hierarchy
-------------------
::

    Asset
        One cryptographic asset with its risk, performance, compliance and
        prediction fields.  Built with ``Asset.from_row`` from a mapping of
        raw cell strings.

    DashboardMetrics
        Aggregate KPIs for one asset collection, produced by
        ``quasar.metrics.calculate_metrics``.

    DataMode
        Whether the active view combines bundled and uploaded data or shows
        the upload alone.

Coercion conventions
--------------------
- Integer fields take the leading integer of the cell (``"45.7"`` -> 45).
- Fractional fields take the leading decimal number (``"0.85"`` -> 0.85).
- Everything else is a trimmed string, empty when the column is absent.
- Nothing is ever ``None``; unparsable numbers fall back to 0.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterable, Mapping

import pandas as pd

from ..core.config import ASSET_COLUMNS, FRACTIONAL_COLUMNS, INTEGER_COLUMNS
from ..core.utils import clean_cell, parse_float, parse_int


# ============================================================================
# ASSET MODEL
# ============================================================================

@dataclass(frozen=True)
class Asset:
    """A single cryptographic asset row.

    **Identity**: ``asset_id``, ``type``, ``encryption_algorithm``,
    ``key_length``.

    **Risk**: ``quantum_risk_score`` (0-1), ``quantum_vulnerability_score``
    (0-100), ``criticality``, ``current_status``, ``migration_priority``.

    **Migration**: ``estimated_time_to_qsafe`` (days), ``migration_time``
    (hours), ``automation_status``.

    **Performance**: before/after pairs for latency, CPU, memory and
    throughput.

    **Compliance**: ``compliance_score``, ``cert_valid``,
    ``encryption_strength_index``.

    **Prediction**: ``predicted_migration_risk`` (0-1) and predicted
    latency, CPU and memory.
    """

    asset_id: str = ""
    type: str = ""
    encryption_algorithm: str = ""
    key_length: int = 0
    last_rotation_date: str = ""
    usage_frequency: str = ""
    quantum_risk_score: float = 0.0
    criticality: str = ""
    current_status: str = ""
    migration_priority: str = ""
    quantum_vulnerability_score: int = 0
    estimated_time_to_qsafe: int = 0
    migration_time: int = 0
    automation_status: str = ""
    latency_before: int = 0
    latency_after: int = 0
    cpu_usage_before: int = 0
    cpu_usage_after: int = 0
    memory_usage_before: int = 0
    memory_usage_after: int = 0
    throughput_before: int = 0
    throughput_after: int = 0
    compliance_score: int = 0
    cert_valid: str = ""
    encryption_strength_index: int = 0
    predicted_migration_risk: float = 0.0
    predicted_latency: int = 0
    predicted_cpu: int = 0
    predicted_memory: int = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Asset":
        """Build an asset from a header -> raw cell mapping.

        Unknown keys are ignored; absent keys take the field default.
        """
        values = {}
        for name in ASSET_COLUMNS:
            raw = row.get(name)
            if name in INTEGER_COLUMNS:
                values[name] = parse_int(raw)
            elif name in FRACTIONAL_COLUMNS:
                values[name] = parse_float(raw)
            else:
                values[name] = clean_cell(raw)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Flat field mapping in schema order."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ============================================================================
# DASHBOARD METRICS
# ============================================================================

@dataclass(frozen=True)
class DashboardMetrics:
    """Aggregate KPIs for an asset collection.

    Percentages (``average_risk_score``, ``automation_success_rate``, the
    ``avg_*_impact`` fields and ``avg_predicted_migration_risk``) are
    rounded whole numbers.  All other averages are rounded too.
    """

    total_assets: int = 0
    vulnerable_assets: int = 0
    migrating_assets: int = 0
    post_quantum_assets: int = 0
    critical_assets: int = 0
    average_risk_score: int = 0
    high_risk_assets: int = 0
    medium_risk_assets: int = 0
    low_risk_assets: int = 0
    avg_quantum_vulnerability: int = 0
    avg_time_to_qsafe: int = 0
    avg_migration_time: int = 0
    automation_success_rate: int = 0
    avg_latency_impact: int = 0
    avg_cpu_impact: int = 0
    avg_memory_impact: int = 0
    avg_throughput_impact: int = 0
    avg_compliance_score: int = 0
    expired_certs: int = 0
    avg_encryption_strength: int = 0
    avg_predicted_migration_risk: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)
    criticality_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result['status_counts'] = dict(self.status_counts)
        result['criticality_counts'] = dict(self.criticality_counts)
        return result


# ============================================================================
# DATA MODE
# ============================================================================

class DataMode(str, Enum):
    """Which assets the dashboard shows once an upload is present."""

    COMBINED = "combined"
    UPLOAD_ONLY = "upload-only"

    @property
    def label(self) -> str:
        return "Combined" if self is DataMode.COMBINED else "Upload only"


# ============================================================================
# CONVERSION HELPERS
# ============================================================================

def assets_to_dataframe(assets: Iterable[Asset]) -> pd.DataFrame:
    """One row per asset, one column per field, in schema order."""
    records = [a.to_dict() for a in assets]
    return pd.DataFrame.from_records(records, columns=ASSET_COLUMNS)
