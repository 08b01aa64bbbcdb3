"""
Quantum attack simulation data.

Mock per-algorithm "break time" series for the simulator panel.  Nothing
here models a real attack: values are derived from the inventory's risk
scores (or fixed baselines in demo mode) plus seeded noise.
"""

import logging
import random

from ..core.config import DEMO_ALGORITHMS, DEMO_BASE_VULNERABILITY, SIMULATED_ALGORITHMS
from ..core.utils import safe_mean

logger = logging.getLogger(__name__)


def quantum_simulation_data(assets, rng=None):
    """Break-time estimate per common classical algorithm.

    ``break_time`` is the mean quantum_risk_score of matching assets x 100,
    or 0 when the inventory has none of that algorithm.
    """
    rng = rng or random.Random()
    assets = tuple(assets)
    rows = []
    for algorithm in SIMULATED_ALGORITHMS:
        avg_risk = safe_mean(
            a.quantum_risk_score for a in assets if a.encryption_algorithm == algorithm
        )
        rows.append({
            'algorithm': algorithm,
            'break_time': avg_risk * 100,
            'confidence': 85 + rng.random() * 10,
        })
    return rows


def demo_simulation_data(rng=None):
    rng = rng or random.Random()
    return [
        {
            'algorithm': algorithm,
            'break_time': base + rng.randrange(10),
            'confidence': 85 + rng.random() * 12,
        }
        for algorithm, base in zip(DEMO_ALGORITHMS, DEMO_BASE_VULNERABILITY)
    ]


def simulate_migration_start(asset_id):
    """Client-side stand-in for kicking off a migration."""
    logger.info(f"Simulated migration start for {asset_id}")
    return {
        'asset_id': asset_id,
        'status': "MIGRATING",
        'eta': "10 hours",
        'progress': 0,
    }
