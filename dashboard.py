"""
QUASAR Dashboard Launcher

Serves the QUASAR quantum-risk dashboard as a multi-page Streamlit app.

Usage:
    streamlit run dashboard.py --server.port 8501
    python run.py --port 8501            # same, via the CLI launcher
"""

import sys
from pathlib import Path

# Ensure the quasar package is importable without installation
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

import streamlit as st

# ============================================================================
# PAGE CONFIG
# ============================================================================
st.set_page_config(
    page_title="QUASAR | Quantum Asset Risk Dashboard",
    page_icon="🛡️",
    layout="wide",
    initial_sidebar_state="expanded",
)

from quasar.dashboard.streamlit_app import main

main()
