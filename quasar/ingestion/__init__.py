"""
CSV ingestion for QUASAR.
"""

from quasar.ingestion.csv_parser import (
    SAMPLE_CSV,
    parse_csv,
    load_uploaded_file,
    load_default_assets,
    sample_template,
)

__all__ = [
    'SAMPLE_CSV',
    'parse_csv',
    'load_uploaded_file',
    'load_default_assets',
    'sample_template',
]
