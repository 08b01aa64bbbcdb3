"""
Metrics aggregation for the QUASAR dashboard.

Reduces an asset collection to a single ``DashboardMetrics`` value.  The
reduction is total: an empty collection yields all zeros, a zero baseline
is skipped instead of dividing by it, and every mean goes through
``safe_mean`` so no NaN ever reaches the KPI cards.

Sums use exact floating-point summation, so the result is independent of
input order.
"""

import logging
from collections import Counter

from ..core.config import (
    AUTOMATION_SUCCESS,
    CERT_EXPIRED,
    HIGH_RISK_THRESHOLD,
    MEDIUM_RISK_THRESHOLD,
    STATUS_LEGACY,
    STATUS_MIGRATING,
    STATUS_POST_QUANTUM,
)
from ..core.utils import round_half_up, safe_mean, safe_percentage
from ..models.data_models import DashboardMetrics

logger = logging.getLogger(__name__)

# (metric field, before attribute, after attribute)
IMPACT_PAIRS = [
    ('avg_latency_impact', 'latency_before', 'latency_after'),
    ('avg_cpu_impact', 'cpu_usage_before', 'cpu_usage_after'),
    ('avg_memory_impact', 'memory_usage_before', 'memory_usage_after'),
    ('avg_throughput_impact', 'throughput_before', 'throughput_after'),
]


def _impact(assets, before_attr, after_attr):
    """Mean percentage change over assets with a non-zero baseline."""
    changes = []
    for asset in assets:
        before = getattr(asset, before_attr)
        if before == 0:
            continue
        changes.append((getattr(asset, after_attr) - before) / before * 100)
    return round_half_up(safe_mean(changes))


def _positive_mean(values):
    return round_half_up(safe_mean(v for v in values if v > 0))


def calculate_metrics(assets):
    """Compute dashboard KPIs for an asset collection.

    Args:
        assets: Iterable of Asset records.

    Returns:
        DashboardMetrics
    """
    assets = tuple(assets)
    total = len(assets)
    if total == 0:
        return DashboardMetrics()

    status_counts = Counter(a.current_status for a in assets)
    criticality_counts = Counter(a.criticality for a in assets)

    high_risk = sum(1 for a in assets if a.quantum_risk_score >= HIGH_RISK_THRESHOLD)
    medium_risk = sum(
        1 for a in assets
        if MEDIUM_RISK_THRESHOLD <= a.quantum_risk_score < HIGH_RISK_THRESHOLD
    )

    impacts = {
        name: _impact(assets, before, after)
        for name, before, after in IMPACT_PAIRS
    }

    successes = sum(1 for a in assets if a.automation_status == AUTOMATION_SUCCESS)

    metrics = DashboardMetrics(
        total_assets=total,
        vulnerable_assets=status_counts.get(STATUS_LEGACY, 0),
        migrating_assets=status_counts.get(STATUS_MIGRATING, 0),
        post_quantum_assets=status_counts.get(STATUS_POST_QUANTUM, 0),
        critical_assets=sum(
            1 for a in assets
            if a.criticality == 'high' and a.current_status == STATUS_LEGACY
        ),
        average_risk_score=round_half_up(safe_mean(a.quantum_risk_score for a in assets) * 100),
        high_risk_assets=high_risk,
        medium_risk_assets=medium_risk,
        low_risk_assets=total - high_risk - medium_risk,
        avg_quantum_vulnerability=round_half_up(
            safe_mean(a.quantum_vulnerability_score for a in assets)
        ),
        avg_time_to_qsafe=_positive_mean(a.estimated_time_to_qsafe for a in assets),
        avg_migration_time=_positive_mean(a.migration_time for a in assets),
        automation_success_rate=round_half_up(safe_percentage(successes, total)),
        avg_compliance_score=round_half_up(safe_mean(a.compliance_score for a in assets)),
        expired_certs=sum(1 for a in assets if a.cert_valid == CERT_EXPIRED),
        avg_encryption_strength=round_half_up(
            safe_mean(a.encryption_strength_index for a in assets)
        ),
        avg_predicted_migration_risk=round_half_up(
            safe_mean(a.predicted_migration_risk for a in assets) * 100
        ),
        status_counts=dict(status_counts),
        criticality_counts=dict(criticality_counts),
        **impacts,
    )

    logger.debug(
        f"Metrics: {total} assets, {metrics.vulnerable_assets} vulnerable, "
        f"{metrics.critical_assets} critical"
    )
    return metrics
