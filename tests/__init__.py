"""
QUASAR Test Suite

This package contains unit tests and fixtures for the QUASAR dashboard.

Run tests with:
    pytest tests/
    pytest tests/test_csv_parser.py -v
    pytest tests/test_scoring.py::TestTopRisks -v
"""

__version__ = "1.0.0"
