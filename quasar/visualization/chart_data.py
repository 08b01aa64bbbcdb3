"""
Chart data mappers.

Each function projects the asset collection (or its metrics) into a short
list of plain dict records, one per bar, slice or point.  The Plotly
builders in ``quasar.visualization.charts`` and the PDF report both consume
these records, so the numbers on screen and on paper always agree.

The two 7-day series (compliance trend and risk timeline) are synthesized
from the current snapshot; there is no history.  ``today`` is injectable so
tests can pin the date labels.
"""

import logging
from collections import Counter
from datetime import date, timedelta

from ..core.config import (
    CERT_EXPIRED,
    CERT_VALID,
    COMPLIANCE_FACTOR_STEP,
    MIGRATING_BASE,
    MIGRATING_CAP,
    MIGRATING_STEP,
    PERFORMANCE_SCALE_DIVISOR,
    STATUS_LEGACY,
    STATUS_MIGRATING,
    STATUS_POST_QUANTUM,
    TREND_DAYS,
    VULNERABILITY_HIGH_THRESHOLD,
    VULNERABILITY_MEDIUM_THRESHOLD,
    VULNERABLE_DECAY,
)
from ..core.utils import round_half_up, safe_mean, safe_percentage

logger = logging.getLogger(__name__)

# (label, before attribute, after attribute, scaled)
PERFORMANCE_METRICS = [
    ('Latency (ms)', 'latency_before', 'latency_after', False),
    ('CPU Usage (%)', 'cpu_usage_before', 'cpu_usage_after', False),
    ('Memory (MB)', 'memory_usage_before', 'memory_usage_after', True),
    ('Throughput', 'throughput_before', 'throughput_after', True),
]


def _day_label(day):
    # M/D, no zero padding
    return f"{day.month}/{day.day}"


def _trend_days(today):
    """Yield (days_ago, label) for today-6 .. today."""
    today = today or date.today()
    for days_ago in range(TREND_DAYS - 1, -1, -1):
        yield days_ago, _day_label(today - timedelta(days=days_ago))


def algorithm_distribution(assets, limit=None):
    """Asset count per encryption algorithm, most common first.

    Ties keep first-encountered order.
    """
    counts = Counter(a.encryption_algorithm for a in assets)
    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    if limit is not None:
        ranked = ranked[:limit]
    return [{'name': name, 'value': value} for name, value in ranked]


def certificate_status(assets):
    valid = sum(1 for a in assets if a.cert_valid == CERT_VALID)
    expired = sum(1 for a in assets if a.cert_valid == CERT_EXPIRED)
    return [
        {'name': 'Valid', 'value': valid},
        {'name': 'Expired', 'value': expired},
    ]


def compliance_trend(assets, today=None):
    """Seven-day compliance and encryption-strength ramp.

    Each day scales today's averages by ``1 - days_ago * 0.08``, so the
    series climbs from 52% to 100% of the current values.
    """
    assets = tuple(assets)
    pq_compliance = safe_mean(
        a.compliance_score for a in assets if a.current_status == STATUS_POST_QUANTUM
    )
    strength = safe_mean(a.encryption_strength_index for a in assets)

    points = []
    for days_ago, label in _trend_days(today):
        factor = 1 - days_ago * COMPLIANCE_FACTOR_STEP
        points.append({
            'date': label,
            'compliance': round_half_up(pq_compliance * factor),
            'strength': round_half_up(strength * factor),
        })
    return points


def performance_comparison(assets):
    """Average before/after performance for assets in or past migration.

    Memory and throughput are divided by 10 so all four bars share a scale.
    """
    subset = [
        a for a in assets
        if a.current_status in (STATUS_MIGRATING, STATUS_POST_QUANTUM)
    ]

    rows = []
    for label, before_attr, after_attr, scaled in PERFORMANCE_METRICS:
        before = round_half_up(safe_mean(getattr(a, before_attr) for a in subset))
        after = round_half_up(safe_mean(getattr(a, after_attr) for a in subset))
        if scaled:
            before = round_half_up(before / PERFORMANCE_SCALE_DIVISOR)
            after = round_half_up(after / PERFORMANCE_SCALE_DIVISOR)
        rows.append({'metric': label, 'before': before, 'after': after})
    return rows


def risk_timeline(assets, today=None):
    """Seven-day vulnerable / migrating / secure breakdown.

    ``secure`` is whatever remains of the total and can go negative for
    small inventories.
    """
    assets = tuple(assets)
    total = len(assets)
    legacy = sum(1 for a in assets if a.current_status == STATUS_LEGACY)

    points = []
    for days_ago, label in _trend_days(today):
        step = TREND_DAYS - 1 - days_ago
        vulnerable = round_half_up(legacy * (1 - step * VULNERABLE_DECAY))
        migrating = min(MIGRATING_BASE + step * MIGRATING_STEP, MIGRATING_CAP)
        points.append({
            'date': label,
            'vulnerable': vulnerable,
            'migrating': migrating,
            'secure': total - vulnerable - migrating,
        })
    return points


def risk_distribution(metrics):
    return [
        {'name': 'High Risk', 'value': metrics.high_risk_assets},
        {'name': 'Medium Risk', 'value': metrics.medium_risk_assets},
        {'name': 'Low Risk', 'value': metrics.low_risk_assets},
    ]


def vulnerability_level(score):
    """Overview bucket ('high', 'medium', 'low') for a 0-100 vulnerability score."""
    if score >= VULNERABILITY_HIGH_THRESHOLD:
        return 'high'
    if score >= VULNERABILITY_MEDIUM_THRESHOLD:
        return 'medium'
    return 'low'


def vulnerability_buckets(assets):
    """Asset counts and shares per vulnerability bucket, high first.

    Percentages are rounded independently, so they need not sum to 100.
    """
    assets = tuple(assets)
    counts = Counter(vulnerability_level(a.quantum_vulnerability_score) for a in assets)
    return [
        {
            'name': f"{level.capitalize()} Risk",
            'level': level,
            'value': counts[level],
            'percent': round_half_up(safe_percentage(counts[level], len(assets))),
        }
        for level in ('high', 'medium', 'low')
    ]


def migration_progress(assets):
    """Total, migrated (post-quantum) and pending (everything else) counts."""
    assets = tuple(assets)
    migrated = sum(1 for a in assets if a.current_status == STATUS_POST_QUANTUM)
    return {'total': len(assets), 'migrated': migrated, 'pending': len(assets) - migrated}


def assets_in_bucket(assets, level):
    """Assets whose vulnerability score falls in ``level``, in input order."""
    if level not in ('high', 'medium', 'low'):
        raise ValueError(f"Unknown vulnerability level: {level!r}")
    return [a for a in assets if vulnerability_level(a.quantum_vulnerability_score) == level]
