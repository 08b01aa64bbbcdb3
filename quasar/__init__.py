"""
QUASAR - Quantum-Augmented Security Architecture & Resilience.

A dashboard for tracking an organization's cryptographic assets through the
migration to post-quantum algorithms:
- CSV inventory ingestion with schema validation
- KPI aggregation over the active asset view
- Risk classification, top-risk ranking and a migration queue
- Chart data for the overview and Plotly figures
- A demo assistant with simulated streaming responses
- PDF and Excel report exports
"""

__version__ = "1.0.0"
__author__ = "QUASAR Team"

# Core imports
from .core.config import *
from .core.exceptions import QuasarError, SchemaError, InsufficientDataError

# Models and ingestion
from .models import Asset, DashboardMetrics, DataMode
from .ingestion import parse_csv, load_uploaded_file, load_default_assets

# Metrics and scoring
from .metrics import calculate_metrics
from .scoring import get_risk_level, get_status_label, get_top_risks, get_migration_tasks

# Session state
from .session import SessionDataSource, apply_upload

# Reports
from .reports import build_pdf_report, build_inventory_workbook
