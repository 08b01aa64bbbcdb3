"""
Streamlit presentation layer for QUASAR.

The app itself lives in ``quasar.dashboard.streamlit_app`` and is launched
through the repository-level ``dashboard.py``.
"""
