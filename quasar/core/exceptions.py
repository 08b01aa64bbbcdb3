"""
Exception hierarchy for QUASAR.

Every error the core raises derives from ``QuasarError``, itself a
``ValueError`` so callers that already guard data loading with
``except ValueError`` keep working.  The dashboard catches ``QuasarError`` at
the triggering user action and turns it into a notification; the previously
active dataset is never touched by a failed upload.
"""


class QuasarError(ValueError):
    """Base class for all user-facing QUASAR errors."""


class SchemaError(QuasarError):
    """Uploaded CSV is missing required columns or repeats an asset_id."""

    def __init__(self, message, missing_columns=None, duplicate_ids=None):
        super().__init__(message)
        self.missing_columns = list(missing_columns or [])
        self.duplicate_ids = list(duplicate_ids or [])


class InsufficientDataError(QuasarError):
    """CSV has no data rows (or could not be read as text)."""


class UnsupportedFileTypeError(QuasarError):
    """Selected file does not carry a .csv suffix."""


class ExportTargetMissingError(QuasarError):
    """Nothing to export at invocation time."""


class ReportExportError(QuasarError):
    """Document generation failed while building an export."""
