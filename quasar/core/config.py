"""
Central Configuration Module for QUASAR.

=== PURPOSE ===
This module is the single source of truth for every column table, threshold,
trend constant and file name used across the QUASAR dashboard.  Every other
module imports from here rather than defining its own magic numbers, which
keeps the system easy to audit.

=== DATA FLOW ===
  1. The COLUMN TABLES drive CSV ingestion (quasar.ingestion): which headers
     must be present and how each cell is coerced.
  2. The RISK THRESHOLDS drive the metrics aggregator (quasar.metrics) and
     the risk classifier (quasar.scoring).
  3. The TREND CONSTANTS drive the synthesized 7-day chart series
     (quasar.visualization.chart_data).
  4. The STREAMING constants pace the demo assistant (quasar.simulation).
  5. FILE NAMES define the bundled dataset and every exported artifact.

=== KEY DESIGN DECISIONS ===
- Thresholds are hard-coded constants, not user settings.  The dashboard
  never exposes them as widgets.
- Numeric coercion is lossy-but-safe: a missing or unparsable cell becomes 0
  so averaging never sees a missing value.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# ==========================================
# PATHS
# ==========================================
PACKAGE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = PACKAGE_DIR / "data"

# Bundled inventory shipped with the package; used whenever no upload is active
DEFAULT_DATA_FILE = DATA_DIR / "QUASAR_Test_Data.csv"

# ==========================================
# CSV SCHEMA
# ==========================================
# Columns every uploaded CSV must carry.  Order matters: missing-column
# errors list the absent names in exactly this order.
REQUIRED_COLUMNS = [
    "asset_id",
    "type",
    "encryption_algorithm",
    "key_length",
    "current_status",
    "quantum_vulnerability_score",
    "migration_priority",
    "predicted_migration_risk",
]

# Full extended schema, in the order used by the sample template and by
# Asset.to_dict().
ASSET_COLUMNS = [
    "asset_id",
    "type",
    "encryption_algorithm",
    "key_length",
    "last_rotation_date",
    "usage_frequency",
    "quantum_risk_score",
    "criticality",
    "current_status",
    "migration_priority",
    "quantum_vulnerability_score",
    "estimated_time_to_qsafe",
    "migration_time",
    "automation_status",
    "latency_before",
    "latency_after",
    "cpu_usage_before",
    "cpu_usage_after",
    "memory_usage_before",
    "memory_usage_after",
    "throughput_before",
    "throughput_after",
    "compliance_score",
    "cert_valid",
    "encryption_strength_index",
    "predicted_migration_risk",
    "predicted_latency",
    "predicted_cpu",
    "predicted_memory",
]

# Coerced with leading-integer parsing; unparsable -> 0
INTEGER_COLUMNS = frozenset([
    "key_length",
    "quantum_vulnerability_score",
    "estimated_time_to_qsafe",
    "migration_time",
    "latency_before",
    "latency_after",
    "cpu_usage_before",
    "cpu_usage_after",
    "memory_usage_before",
    "memory_usage_after",
    "throughput_before",
    "throughput_after",
    "compliance_score",
    "encryption_strength_index",
    "predicted_latency",
    "predicted_cpu",
    "predicted_memory",
])

# Coerced with leading-decimal parsing; unparsable -> 0.0
FRACTIONAL_COLUMNS = frozenset([
    "quantum_risk_score",
    "predicted_migration_risk",
])

# ==========================================
# STATUS VOCABULARY
# ==========================================
STATUS_LEGACY = "legacy"
STATUS_MIGRATING = "migrating"
STATUS_POST_QUANTUM = "post-quantum"

CERT_VALID = "valid"
CERT_EXPIRED = "expired"

AUTOMATION_SUCCESS = "success"
AUTOMATION_MANUAL = "manual"

# ==========================================
# RISK THRESHOLDS
# ==========================================
# Aggregator buckets on quantum_risk_score (inclusive lower bounds)
HIGH_RISK_THRESHOLD = 0.8
MEDIUM_RISK_THRESHOLD = 0.6

# Classifier labels on quantum_risk_score (inclusive lower bounds)
RISK_LEVEL_THRESHOLDS = [
    (0.9, "critical"),
    (0.8, "high"),
    (0.6, "medium"),
]
RISK_LEVEL_DEFAULT = "low"

# Asset overview buckets on quantum_vulnerability_score (0-100, inclusive
# lower bounds) and the row cap of the drill-down table
VULNERABILITY_HIGH_THRESHOLD = 70
VULNERABILITY_MEDIUM_THRESHOLD = 40
VULNERABILITY_DRILLDOWN_LIMIT = 20

# Composite score used by the top-risk sidebar: 60% vulnerability, 40% risk
COMPOSITE_VULNERABILITY_WEIGHT = 0.6
COMPOSITE_RISK_WEIGHT = 0.4
TOP_RISK_LIMIT = 5
TOP_RISK_MAX_ACTIONS = 3
CRITICAL_VULNERABILITY_SCORE = 90

# Migration queue
MIGRATION_QUEUE_LIMIT = 8
MIGRATION_CRITICAL_RISK = 0.9
# Ordered (substring, target) pairs; first match wins
TARGET_ALGORITHMS = [
    ("RSA", "Kyber-768"),
    ("ECC", "Kyber-768"),
    ("AES", "AES-256-GCM"),
]
DEFAULT_TARGET_ALGORITHM = "CRYSTALS-Dilithium"

# ==========================================
# TREND CONSTANTS
# ==========================================
# Both 7-day series are synthesized from the current snapshot.  The
# formulas are reproduced exactly so outputs stay deterministic.
TREND_DAYS = 7
COMPLIANCE_FACTOR_STEP = 0.08   # progress factor = 1 - days_ago * step (0.52 .. 1.0)
VULNERABLE_DECAY = 0.05         # vulnerable shrinks 5% of the legacy count per day
MIGRATING_BASE = 10
MIGRATING_STEP = 2
MIGRATING_CAP = 15

# Memory and throughput bars are divided by this for chart scale
PERFORMANCE_SCALE_DIVISOR = 10
ALGORITHM_CHART_LIMIT = 6

# ==========================================
# SIMULATION / ASSISTANT
# ==========================================
SIMULATED_ALGORITHMS = ["RSA-2048", "RSA-3072", "RSA-4096", "ECDSA-256", "ECC-384"]
DEMO_ALGORITHMS = ["RSA-2048", "RSA-4096", "ECDSA-P256", "ML-DSA", "CRYSTALS-Kyber"]
DEMO_BASE_VULNERABILITY = [85, 60, 78, 12, 8]

# Streaming delays in seconds
STREAM_INITIAL_DELAY = 0.2
STREAM_MIN_DELAY = 0.18
STREAM_DELAY_JITTER = 0.12

VERBOSITY_LEVELS = ["short", "medium", "long"]
TONES = ["technical", "non-technical"]
CHUNK_SIZES = {"short": 3, "medium": 4, "long": 5}

# ==========================================
# EXPORTED ARTIFACTS
# ==========================================
SAMPLE_TEMPLATE_FILENAME = "quasar_sample_template.csv"
REPORT_FILENAME_PATTERN = "QUASAR_Report_{date}.pdf"
RESPONSE_FILENAME_PATTERN = "quasar-response-{epoch_ms}.json"

APP_TITLE = "QUASAR"
APP_SUBTITLE = "Quantum-Augmented Security Architecture & Resilience"
