"""
Quantum Risk Classifier.

=== PURPOSE ===
Maps raw asset scores and statuses onto the labels the dashboard shows, and
ranks assets for the two action-oriented panels:

  - Risk level      -- critical / high / medium / low from quantum_risk_score
  - Status label    -- vulnerable / migrating / secure from current_status
  - Top risks       -- composite-score ranking with recommended actions
  - Migration queue -- high-criticality legacy assets with a target algorithm

=== SCORING FORMULA ===
The top-risk sidebar uses a weighted composite on a 0-100 scale:

    Composite = min(100, round(((Vulnerability / 100) x 0.6 + Risk x 0.4) x 100))

Where:
  - Vulnerability: quantum_vulnerability_score (0-100)
  - Risk:          quantum_risk_score (0-1)

=== THRESHOLDS ===
Risk level bounds are inclusive lower bounds: 0.9 is critical, 0.8 high,
0.6 medium.  They are fixed in ``quasar.core.config`` and not user-tunable.

All functions here are pure and total; any float (including NaN) classifies.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List

from ..core.config import (
    COMPOSITE_RISK_WEIGHT,
    COMPOSITE_VULNERABILITY_WEIGHT,
    CRITICAL_VULNERABILITY_SCORE,
    DEFAULT_TARGET_ALGORITHM,
    MIGRATION_CRITICAL_RISK,
    MIGRATION_QUEUE_LIMIT,
    RISK_LEVEL_DEFAULT,
    RISK_LEVEL_THRESHOLDS,
    STATUS_LEGACY,
    STATUS_POST_QUANTUM,
    TARGET_ALGORITHMS,
    TOP_RISK_LIMIT,
    TOP_RISK_MAX_ACTIONS,
    AUTOMATION_MANUAL,
    CERT_EXPIRED,
)
from ..core.utils import round_half_up

logger = logging.getLogger(__name__)


# ==========================================
# LABELS
# ==========================================

def get_risk_level(score):
    """Bucket a quantum_risk_score into critical / high / medium / low."""
    for threshold, level in RISK_LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return RISK_LEVEL_DEFAULT


def get_status_label(status):
    """Display label for a migration status; unknown values read as migrating."""
    if status == STATUS_LEGACY:
        return "vulnerable"
    if status == STATUS_POST_QUANTUM:
        return "secure"
    return "migrating"


# ==========================================
# TOP RISKS
# ==========================================

@dataclass(frozen=True)
class RiskItem:
    """One row of the top-risk sidebar."""
    rank: int
    risk_label: str
    score: int
    explanation: str
    actions: List[str] = field(default_factory=list)
    evidence_snippet: str = ""


def composite_risk_score(asset):
    """60% vulnerability + 40% risk, on a 0-100 scale, capped at 100."""
    composite = (
        asset.quantum_vulnerability_score / 100 * COMPOSITE_VULNERABILITY_WEIGHT
        + asset.quantum_risk_score * COMPOSITE_RISK_WEIGHT
    )
    return min(100, round_half_up(composite * 100))


def recommended_actions(asset):
    """Ordered remediation steps for an asset, at most three."""
    actions = []
    if asset.current_status == STATUS_LEGACY:
        actions.append(f"Migrate {asset.encryption_algorithm} to post-quantum algorithm")
    if asset.cert_valid == CERT_EXPIRED:
        actions.append("Renew expired certificate immediately")
    if asset.automation_status == AUTOMATION_MANUAL:
        actions.append("Enable automation for faster migration")
    if asset.quantum_vulnerability_score > CRITICAL_VULNERABILITY_SCORE:
        actions.append("Prioritize as critical vulnerability")
    if not actions:
        actions.append("Monitor and maintain current security posture")
    return actions[:TOP_RISK_MAX_ACTIONS]


def get_top_risks(assets, limit=TOP_RISK_LIMIT):
    """Rank assets by composite score, highest first (stable on ties)."""
    scored = [(composite_risk_score(a), a) for a in assets]
    scored.sort(key=lambda pair: -pair[0])

    items = []
    for rank, (score, asset) in enumerate(scored[:limit], start=1):
        explanation = (
            f"{asset.type} using {asset.encryption_algorithm} with "
            f"{asset.key_length}-bit keys poses {asset.criticality} risk. "
            f"Estimated {asset.estimated_time_to_qsafe} days to quantum-safe state."
        )
        evidence = (
            f"Vulnerability: {asset.quantum_vulnerability_score}%, "
            f"Risk: {round_half_up(asset.quantum_risk_score * 100)}%, "
            f"Status: {asset.current_status}"
        )
        items.append(RiskItem(
            rank=rank,
            risk_label=f"{asset.asset_id} - {asset.type}",
            score=score,
            explanation=explanation,
            actions=recommended_actions(asset),
            evidence_snippet=evidence,
        ))
    return items


# ==========================================
# MIGRATION QUEUE
# ==========================================

@dataclass(frozen=True)
class MigrationTask:
    """A pending migration for one high-criticality legacy asset."""
    id: str
    name: str
    type: str
    current_algorithm: str
    target_algorithm: str
    priority: str
    progress: int
    estimated_time: str


def target_algorithm(algorithm):
    """Post-quantum replacement for a current algorithm name."""
    for needle, target in TARGET_ALGORITHMS:
        if needle in algorithm:
            return target
    return DEFAULT_TARGET_ALGORITHM


def get_migration_tasks(assets, limit=MIGRATION_QUEUE_LIMIT):
    """High-criticality legacy assets, riskiest first."""
    candidates = [
        a for a in assets
        if a.current_status == STATUS_LEGACY and a.criticality == 'high'
    ]
    candidates.sort(key=lambda a: -a.quantum_risk_score)

    tasks = []
    for asset in candidates[:limit]:
        risk = asset.quantum_risk_score
        tasks.append(MigrationTask(
            id=asset.asset_id,
            name=asset.asset_id,
            type=asset.type,
            current_algorithm=asset.encryption_algorithm,
            target_algorithm=target_algorithm(asset.encryption_algorithm),
            priority='critical' if risk >= MIGRATION_CRITICAL_RISK else 'high',
            progress=0,
            estimated_time=f"{math.ceil(risk * 10)} hours",
        ))
    logger.debug(f"Migration queue: {len(tasks)} of {len(candidates)} candidates")
    return tasks


__all__ = [
    'get_risk_level',
    'get_status_label',
    'RiskItem',
    'composite_risk_score',
    'recommended_actions',
    'get_top_risks',
    'MigrationTask',
    'target_algorithm',
    'get_migration_tasks',
]
