"""
QUASAR - CSV Ingestion
======================

This module is the single entry point for all asset data entering QUASAR.
It reads the bundled inventory or a user upload, validates its header, and
coerces every cell into a typed ``Asset`` record.

Data Flow
---------
1. Upload bytes  -->  suffix check (.csv)  -->  UTF-8 decode (BOM tolerated)
2. Text  -->  stripped, split into lines  -->  header + data rows
3. Header trimmed and checked against REQUIRED_COLUMNS
4. Each data row zipped with the header and passed to ``Asset.from_row``
5. asset_id uniqueness checked across the parsed rows

Format
------
Fields are split on bare commas.  Quoted fields containing commas are not
supported; a quote character is kept as part of the cell.  Rows shorter than
the header leave the trailing fields at their defaults, extra cells are
ignored.

Errors
------
- UnsupportedFileTypeError : file name lacks the .csv suffix
- InsufficientDataError    : fewer than two lines, or undecodable bytes
- SchemaError              : required columns absent, or duplicate asset_id
"""

import logging
from collections import Counter
from pathlib import Path

from ..core.config import (
    DEFAULT_DATA_FILE,
    REQUIRED_COLUMNS,
    SAMPLE_TEMPLATE_FILENAME,
)
from ..core.exceptions import (
    InsufficientDataError,
    SchemaError,
    UnsupportedFileTypeError,
)
from ..core.utils import validate_columns
from ..models.data_models import Asset

logger = logging.getLogger(__name__)

# ── Fixed sample template ────────────────────────────────────────────────────
# Offered as a download so users can see the expected layout.  Three assets,
# one per common status/criticality combination.
SAMPLE_CSV = """asset_id,type,encryption_algorithm,key_length,last_rotation_date,usage_frequency,quantum_risk_score,criticality,current_status,migration_priority,quantum_vulnerability_score,estimated_time_to_qsafe,migration_time,automation_status,latency_before,latency_after,cpu_usage_before,cpu_usage_after,memory_usage_before,memory_usage_after,throughput_before,throughput_after,compliance_score,cert_valid,encryption_strength_index,predicted_migration_risk,predicted_latency,predicted_cpu,predicted_memory
ASSET-001,database,RSA-2048,2048,2024-01-15,high,0.85,high,legacy,P1,0.82,30,24,success,45,52,30,35,512,580,1000,950,85,valid,65,0.75,55,38,620
ASSET-002,api,ECDSA-256,256,2024-02-20,medium,0.45,medium,post-quantum,P2,0.35,0,12,success,22,24,25,27,256,270,2000,1980,92,valid,82,0.25,25,28,280
ASSET-003,storage,AES-256,256,2023-11-10,low,0.65,high,legacy,P1,0.58,45,36,manual,35,42,40,48,1024,1150,800,750,78,expired,58,0.55,45,52,1200"""

CSV_SUFFIX = ".csv"


def _split_fields(line):
    return [cell.strip() for cell in line.split(',')]


def parse_csv(text):
    """Parse CSV text into an ordered tuple of assets.

    Args:
        text: Full document text, header on the first line.

    Returns:
        tuple[Asset, ...]: One record per data line, in file order.

    Raises:
        InsufficientDataError: Fewer than two lines after stripping.
        SchemaError: Required columns missing or asset_id repeated.
    """
    lines = text.strip().splitlines()
    if len(lines) < 2:
        raise InsufficientDataError("CSV must have headers and at least one data row")

    headers = _split_fields(lines[0])
    missing = validate_columns(headers, REQUIRED_COLUMNS)
    if missing:
        raise SchemaError(
            f"Missing required columns: {', '.join(missing)}",
            missing_columns=missing,
        )

    assets = tuple(
        Asset.from_row(dict(zip(headers, _split_fields(line))))
        for line in lines[1:]
    )

    # Blank identifiers (empty lines) are not treated as duplicates
    id_counts = Counter(a.asset_id for a in assets if a.asset_id)
    duplicates = [asset_id for asset_id, n in id_counts.items() if n > 1]
    if duplicates:
        logger.warning(f"Rejected CSV with duplicate asset ids: {duplicates}")
        raise SchemaError(
            f"Duplicate asset_id values: {', '.join(duplicates)}",
            duplicate_ids=duplicates,
        )

    logger.debug(f"Parsed {len(assets)} assets from {len(headers)} columns")
    return assets


def load_uploaded_file(filename, content):
    """Accept an uploaded file and parse it.

    Args:
        filename: Name reported by the uploader; must end in .csv.
        content: Raw bytes (or already-decoded text).

    Returns:
        tuple[Asset, ...]
    """
    if not str(filename or "").lower().endswith(CSV_SUFFIX):
        logger.info(f"Rejected non-CSV upload: {filename}")
        raise UnsupportedFileTypeError("Please upload a CSV file")

    if isinstance(content, (bytes, bytearray)):
        try:
            text = bytes(content).decode('utf-8-sig')
        except UnicodeDecodeError as e:
            logger.warning(f"Could not decode {filename}: {e}")
            raise InsufficientDataError(
                "CSV must have headers and at least one data row"
            ) from e
    else:
        text = str(content).lstrip('\ufeff')

    assets = parse_csv(text)
    logger.info(f"Loaded {len(assets)} assets from upload {filename}")
    return assets


def load_default_assets(path=DEFAULT_DATA_FILE):
    """Read and parse the bundled inventory (or any CSV on disk)."""
    path = Path(path)
    text = path.read_text(encoding='utf-8-sig')
    assets = parse_csv(text)
    logger.info(f"Loaded {len(assets)} assets from {path.name}")
    return assets


def sample_template():
    """(filename, bytes) for the downloadable template."""
    return SAMPLE_TEMPLATE_FILENAME, SAMPLE_CSV.encode('utf-8')
