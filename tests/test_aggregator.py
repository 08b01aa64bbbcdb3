"""
Unit tests for quasar.metrics

Expected values for the fixture inventory are worked out by hand in
tests/fixtures/sample_data.py terms:
- 3 legacy, 1 migrating, 1 post-quantum
- risk scores 0.95, 0.82, 0.65, 0.20, 0.88
- A-5 has zero performance baselines and is skipped for impact averages
"""

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from quasar.metrics import calculate_metrics
from quasar.models import DashboardMetrics
from tests.fixtures.sample_data import create_sample_assets, make_asset


class TestCalculateMetrics(unittest.TestCase):
    """Test suite for calculate_metrics."""

    def setUp(self):
        """Set up test fixtures."""
        self.assets = create_sample_assets()
        self.metrics = calculate_metrics(self.assets)

    def test_empty_collection_is_all_zero(self):
        """No assets produces zero metrics without dividing by zero."""
        metrics = calculate_metrics([])

        self.assertEqual(metrics, DashboardMetrics())
        self.assertEqual(metrics.total_assets, 0)
        self.assertEqual(metrics.average_risk_score, 0)
        self.assertEqual(metrics.automation_success_rate, 0)

    def test_status_counts(self):
        self.assertEqual(self.metrics.total_assets, 5)
        self.assertEqual(self.metrics.vulnerable_assets, 3)
        self.assertEqual(self.metrics.migrating_assets, 1)
        self.assertEqual(self.metrics.post_quantum_assets, 1)
        self.assertEqual(
            self.metrics.status_counts,
            {'legacy': 3, 'migrating': 1, 'post-quantum': 1},
        )
        self.assertEqual(self.metrics.criticality_counts, {'high': 4, 'medium': 1})

    def test_critical_requires_high_and_legacy(self):
        """A-3 and A-4 are high criticality but not legacy."""
        self.assertEqual(self.metrics.critical_assets, 2)

    def test_risk_buckets_partition_total(self):
        """High (>= 0.8), medium (0.6 - 0.8) and low always sum to total."""
        self.assertEqual(self.metrics.high_risk_assets, 3)
        self.assertEqual(self.metrics.medium_risk_assets, 1)
        self.assertEqual(self.metrics.low_risk_assets, 1)
        self.assertEqual(
            self.metrics.high_risk_assets + self.metrics.medium_risk_assets
            + self.metrics.low_risk_assets,
            self.metrics.total_assets,
        )

    def test_bucket_boundaries_are_inclusive(self):
        assets = [
            make_asset(asset_id='B-1', quantum_risk_score=0.8),
            make_asset(asset_id='B-2', quantum_risk_score=0.6),
            make_asset(asset_id='B-3', quantum_risk_score=0.59),
        ]
        metrics = calculate_metrics(assets)

        self.assertEqual(metrics.high_risk_assets, 1)
        self.assertEqual(metrics.medium_risk_assets, 1)
        self.assertEqual(metrics.low_risk_assets, 1)

    def test_averages(self):
        """Averages are rounded to whole numbers."""
        self.assertEqual(self.metrics.average_risk_score, 70)
        self.assertEqual(self.metrics.avg_quantum_vulnerability, 65)
        self.assertEqual(self.metrics.avg_compliance_score, 70)
        self.assertEqual(self.metrics.avg_encryption_strength, 64)
        self.assertEqual(self.metrics.avg_predicted_migration_risk, 58)

    def test_time_averages_ignore_zero_values(self):
        """A-4 reports 0 days / 0 hours and is left out of both means."""
        self.assertEqual(self.metrics.avg_time_to_qsafe, 25)
        self.assertEqual(self.metrics.avg_migration_time, 20)

    def test_automation_and_certificates(self):
        self.assertEqual(self.metrics.automation_success_rate, 60)
        self.assertEqual(self.metrics.expired_certs, 1)

    def test_performance_impacts(self):
        """Mean percentage change over assets with a non-zero baseline."""
        self.assertEqual(self.metrics.avg_latency_impact, 16)
        self.assertEqual(self.metrics.avg_cpu_impact, 20)
        # 12.5 rounds half up
        self.assertEqual(self.metrics.avg_memory_impact, 13)
        # -5.5 rounds half up toward zero
        self.assertEqual(self.metrics.avg_throughput_impact, -5)

    def test_all_zero_baselines_give_zero_impact(self):
        assets = [make_asset(asset_id='Z-1', latency_after=50, throughput_after=10)]
        metrics = calculate_metrics(assets)

        self.assertEqual(metrics.avg_latency_impact, 0)
        self.assertEqual(metrics.avg_throughput_impact, 0)

    def test_result_is_independent_of_order(self):
        """Reversing the collection gives identical metrics."""
        self.assertEqual(calculate_metrics(reversed(self.assets)), self.metrics)

    def test_to_dict_contains_every_metric(self):
        result = self.metrics.to_dict()

        self.assertEqual(result['total_assets'], 5)
        self.assertEqual(result['status_counts']['legacy'], 3)
        self.assertIn('avg_throughput_impact', result)


if __name__ == '__main__':
    unittest.main()
