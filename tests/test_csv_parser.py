"""
Unit tests for quasar.ingestion

Covers:
- Header validation and missing-column reporting
- Cell coercion for integer, fractional and text columns
- Duplicate asset_id rejection
- Upload handling (suffix check, BOM, decoding)
- The bundled inventory and the sample template
"""

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from quasar.core.config import ASSET_COLUMNS, SAMPLE_TEMPLATE_FILENAME
from quasar.core.exceptions import (
    InsufficientDataError,
    QuasarError,
    SchemaError,
    UnsupportedFileTypeError,
)
from quasar.ingestion import (
    SAMPLE_CSV,
    load_default_assets,
    load_uploaded_file,
    parse_csv,
    sample_template,
)
from tests.fixtures.sample_data import create_sample_assets, create_sample_csv_text

MINIMAL_HEADER = (
    "asset_id,type,encryption_algorithm,key_length,current_status,"
    "quantum_vulnerability_score,migration_priority,predicted_migration_risk"
)


class TestParseCsv(unittest.TestCase):
    """Test suite for parse_csv."""

    def test_sample_template_parses(self):
        """The built-in template yields its three assets in order."""
        assets = parse_csv(SAMPLE_CSV)

        self.assertEqual(len(assets), 3)
        self.assertEqual([a.asset_id for a in assets], ['ASSET-001', 'ASSET-002', 'ASSET-003'])

        first = assets[0]
        self.assertEqual(first.key_length, 2048)
        self.assertAlmostEqual(first.quantum_risk_score, 0.85)
        self.assertEqual(first.current_status, 'legacy')
        self.assertEqual(first.cert_valid, 'valid')
        self.assertAlmostEqual(first.predicted_migration_risk, 0.75)

    def test_fractional_vulnerability_takes_integer_prefix(self):
        """An integer column holding '0.82' keeps only its leading integer."""
        assets = parse_csv(SAMPLE_CSV)
        self.assertEqual(assets[0].quantum_vulnerability_score, 0)

    def test_record_count_is_lines_minus_header(self):
        """One asset per data line."""
        text = create_sample_csv_text()
        assets = parse_csv(text)
        self.assertEqual(len(assets), len(text.strip().splitlines()) - 1)

    def test_fixture_inventory_parses_to_same_assets(self):
        """Fixture assets written to CSV read back unchanged."""
        self.assertEqual(parse_csv(create_sample_csv_text()), create_sample_assets())

    def test_non_numeric_cell_becomes_zero(self):
        """'abc' in an integer column parses as 0."""
        text = f"{MINIMAL_HEADER}\nX-1,server,RSA-2048,abc,legacy,90,P1,oops\n"
        asset = parse_csv(text)[0]

        self.assertEqual(asset.key_length, 0)
        self.assertEqual(asset.predicted_migration_risk, 0.0)
        self.assertEqual(asset.quantum_vulnerability_score, 90)

    def test_absent_optional_columns_use_defaults(self):
        """Columns outside the required set default to '' or 0."""
        text = f"{MINIMAL_HEADER}\nX-1,server,RSA-2048,2048,legacy,90,P1,0.5\n"
        asset = parse_csv(text)[0]

        self.assertEqual(asset.criticality, '')
        self.assertEqual(asset.cert_valid, '')
        self.assertEqual(asset.latency_before, 0)
        self.assertEqual(asset.quantum_risk_score, 0.0)

    def test_header_and_cells_are_trimmed(self):
        """Whitespace around header names and cells is ignored."""
        header = ' , '.join(MINIMAL_HEADER.split(','))
        text = f"{header}\n X-1 , server , RSA-2048 , 2048 , legacy , 90 , P1 , 0.5 \n"
        asset = parse_csv(text)[0]

        self.assertEqual(asset.asset_id, 'X-1')
        self.assertEqual(asset.encryption_algorithm, 'RSA-2048')
        self.assertEqual(asset.key_length, 2048)

    def test_short_row_leaves_trailing_defaults(self):
        """A row with fewer cells than the header still parses."""
        text = f"{MINIMAL_HEADER}\nX-1,server,RSA-2048\n"
        asset = parse_csv(text)[0]

        self.assertEqual(asset.encryption_algorithm, 'RSA-2048')
        self.assertEqual(asset.key_length, 0)
        self.assertEqual(asset.current_status, '')

    def test_missing_columns_listed_in_required_order(self):
        """Every absent required column is named once, in schema order."""
        text = "asset_id,type,encryption_algorithm,current_status,quantum_vulnerability_score\nX,y,z,legacy,1\n"

        with self.assertRaises(SchemaError) as context:
            parse_csv(text)

        self.assertEqual(
            str(context.exception),
            "Missing required columns: key_length, migration_priority, predicted_migration_risk",
        )
        self.assertEqual(
            context.exception.missing_columns,
            ['key_length', 'migration_priority', 'predicted_migration_risk'],
        )

    def test_header_only_is_insufficient(self):
        """A header without data rows is rejected."""
        with self.assertRaises(InsufficientDataError) as context:
            parse_csv(MINIMAL_HEADER + "\n")
        self.assertEqual(str(context.exception), "CSV must have headers and at least one data row")

    def test_empty_text_is_insufficient(self):
        """Blank input is rejected before schema checks."""
        with self.assertRaises(InsufficientDataError):
            parse_csv("   \n\n")

    def test_duplicate_asset_ids_rejected(self):
        """A repeated asset_id fails the whole file."""
        text = (
            f"{MINIMAL_HEADER}\n"
            "X-1,server,RSA-2048,2048,legacy,90,P1,0.5\n"
            "X-2,server,RSA-2048,2048,legacy,90,P1,0.5\n"
            "X-1,api,AES-256,256,migrating,20,P3,0.1\n"
        )
        with self.assertRaises(SchemaError) as context:
            parse_csv(text)

        self.assertIn("X-1", str(context.exception))
        self.assertEqual(context.exception.duplicate_ids, ['X-1'])

    def test_errors_are_value_errors(self):
        """Ingestion errors can be caught as ValueError."""
        with self.assertRaises(ValueError):
            parse_csv("only-a-header")
        self.assertTrue(issubclass(SchemaError, QuasarError))


class TestLoadUploadedFile(unittest.TestCase):
    """Test suite for upload handling."""

    def test_rejects_non_csv_suffix(self):
        """Files without a .csv suffix are refused before parsing."""
        with self.assertRaises(UnsupportedFileTypeError) as context:
            load_uploaded_file('inventory.xlsx', SAMPLE_CSV.encode('utf-8'))
        self.assertEqual(str(context.exception), "Please upload a CSV file")

    def test_rejects_missing_filename(self):
        with self.assertRaises(UnsupportedFileTypeError):
            load_uploaded_file(None, SAMPLE_CSV)

    def test_suffix_check_is_case_insensitive(self):
        """INVENTORY.CSV is accepted."""
        assets = load_uploaded_file('INVENTORY.CSV', SAMPLE_CSV.encode('utf-8'))
        self.assertEqual(len(assets), 3)

    def test_accepts_utf8_bom(self):
        """A leading byte-order mark does not corrupt the first header."""
        content = b'\xef\xbb\xbf' + SAMPLE_CSV.encode('utf-8')
        assets = load_uploaded_file('inventory.csv', content)
        self.assertEqual(assets[0].asset_id, 'ASSET-001')

    def test_accepts_text_content(self):
        """Already-decoded text is parsed as-is."""
        assets = load_uploaded_file('inventory.csv', '\ufeff' + SAMPLE_CSV)
        self.assertEqual(assets[0].asset_id, 'ASSET-001')

    def test_undecodable_bytes_are_insufficient(self):
        """Binary content is reported as unreadable data."""
        with self.assertRaises(InsufficientDataError):
            load_uploaded_file('inventory.csv', b'\xff\xfe\x00\x81binary')


class TestBundledData(unittest.TestCase):
    """Test suite for the bundled inventory and template."""

    def test_default_inventory_loads(self):
        """The shipped dataset parses cleanly with unique ids."""
        assets = load_default_assets()

        self.assertGreater(len(assets), 0)
        ids = [a.asset_id for a in assets]
        self.assertEqual(len(ids), len(set(ids)))
        for asset in assets:
            self.assertGreaterEqual(asset.quantum_vulnerability_score, 0)
            self.assertLessEqual(asset.quantum_vulnerability_score, 100)

    def test_default_inventory_covers_every_status(self):
        statuses = {a.current_status for a in load_default_assets()}
        self.assertEqual(statuses, {'legacy', 'migrating', 'post-quantum'})

    def test_sample_template_download(self):
        """The template download carries the full header."""
        filename, content = sample_template()

        self.assertEqual(filename, SAMPLE_TEMPLATE_FILENAME)
        header = content.decode('utf-8').splitlines()[0]
        self.assertEqual(header.split(','), ASSET_COLUMNS)
        self.assertEqual(len(content.decode('utf-8').splitlines()), 4)


if __name__ == '__main__':
    unittest.main()
