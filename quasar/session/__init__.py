"""
Per-session data source for the QUASAR dashboard.
"""

from quasar.session.data_source import SessionDataSource, apply_upload

__all__ = ['SessionDataSource', 'apply_upload']
