"""
Core module for QUASAR.

Contains configuration, the exception hierarchy and coercion utilities.
"""

from quasar.core.config import *
from quasar.core.exceptions import (
    QuasarError,
    SchemaError,
    InsufficientDataError,
    UnsupportedFileTypeError,
    ExportTargetMissingError,
    ReportExportError,
)
from quasar.core.utils import (
    clean_cell,
    parse_int,
    parse_float,
    round_half_up,
    safe_mean,
    safe_percentage,
    validate_columns,
)

__all__ = [
    # Exceptions
    'QuasarError',
    'SchemaError',
    'InsufficientDataError',
    'UnsupportedFileTypeError',
    'ExportTargetMissingError',
    'ReportExportError',
    # Utils
    'clean_cell',
    'parse_int',
    'parse_float',
    'round_half_up',
    'safe_mean',
    'safe_percentage',
    'validate_columns',
]
