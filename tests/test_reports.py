"""
Unit tests for quasar.reports

Tests the PDF snapshot and the Excel inventory export, including the
error paths the dashboard turns into notifications.
"""

import io
import unittest
from datetime import date, datetime
from pathlib import Path
from unittest.mock import patch
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from openpyxl import load_workbook

from quasar.core.exceptions import ExportTargetMissingError, ReportExportError
from quasar.ingestion import SAMPLE_CSV, load_uploaded_file
from quasar.metrics import calculate_metrics
from quasar.reports import build_inventory_workbook, build_pdf_report, report_filename
from tests.fixtures.sample_data import create_sample_assets, make_asset


class TestPdfReport(unittest.TestCase):
    """Test suite for build_pdf_report."""

    def setUp(self):
        """Set up test fixtures."""
        self.assets = create_sample_assets()

    def test_builds_pdf_bytes(self):
        pdf = build_pdf_report(self.assets, generated_at=datetime(2024, 3, 10, 9, 30))
        self.assertTrue(pdf.startswith(b'%PDF'))
        self.assertGreater(len(pdf), 1000)

    def test_accepts_precomputed_metrics(self):
        pdf = build_pdf_report(self.assets, calculate_metrics(self.assets))
        self.assertTrue(pdf.startswith(b'%PDF'))

    def test_empty_view_still_exports(self):
        """An empty asset view renders placeholder sections."""
        pdf = build_pdf_report(())
        self.assertTrue(pdf.startswith(b'%PDF'))

    def test_markup_in_cells_is_escaped(self):
        """Cell text that looks like markup does not break the layout engine."""
        assets = [make_asset(asset_id='<b>X&1', type='db<br>', encryption_algorithm='RSA&<>')]
        pdf = build_pdf_report(assets)
        self.assertTrue(pdf.startswith(b'%PDF'))

    def test_large_inventory_spans_pages(self):
        assets = [make_asset(asset_id=f'BULK-{i:04d}') for i in range(300)]
        pdf = build_pdf_report(assets)
        self.assertTrue(pdf.startswith(b'%PDF'))

    def test_missing_target(self):
        with self.assertRaises(ExportTargetMissingError) as context:
            build_pdf_report(None)
        self.assertEqual(str(context.exception), "Unable to find content to export")

    @patch('quasar.reports.pdf_report.SimpleDocTemplate')
    def test_build_failure_is_wrapped(self, mock_doc):
        """Layout errors surface as ReportExportError with the user message."""
        mock_doc.return_value.build.side_effect = RuntimeError("layout failed")

        with self.assertRaises(ReportExportError) as context:
            build_pdf_report(self.assets)

        self.assertEqual(str(context.exception), "Failed to export PDF. Please try again.")
        self.assertIsInstance(context.exception.__cause__, RuntimeError)

    def test_report_filename(self):
        self.assertEqual(report_filename(date(2024, 3, 10)), "QUASAR_Report_2024-03-10.pdf")
        self.assertTrue(report_filename().startswith("QUASAR_Report_"))


class TestExcelExport(unittest.TestCase):
    """Test suite for build_inventory_workbook."""

    def setUp(self):
        """Set up test fixtures."""
        self.assets = create_sample_assets()
        self.workbook = load_workbook(io.BytesIO(build_inventory_workbook(self.assets)))

    def test_sheets(self):
        self.assertEqual(self.workbook.sheetnames, ['Assets', 'Metrics', 'Migration Queue'])

    def test_assets_sheet(self):
        ws = self.workbook['Assets']

        self.assertEqual(ws.max_row, len(self.assets) + 1)
        self.assertEqual(ws['A1'].value, 'asset_id')
        self.assertEqual(ws['B1'].value, 'risk_level')
        self.assertEqual(ws['C1'].value, 'status_label')
        self.assertEqual(ws['A2'].value, 'A-1')
        self.assertEqual(ws['B2'].value, 'critical')
        self.assertEqual(ws['C2'].value, 'vulnerable')
        self.assertEqual(ws.freeze_panes, 'A2')

    def test_metrics_sheet(self):
        rows = {row[0]: row[1] for row in self.workbook['Metrics'].iter_rows(min_row=2, values_only=True)}

        self.assertEqual(rows['total_assets'], 5)
        self.assertEqual(rows['average_risk_score'], 70)
        self.assertNotIn('status_counts', rows)

    def test_migration_queue_sheet(self):
        ws = self.workbook['Migration Queue']
        values = list(ws.iter_rows(min_row=2, values_only=True))

        self.assertEqual([v[0] for v in values], ['A-1', 'A-5'])
        self.assertEqual(values[0][3], 'Kyber-768')

    def test_empty_view(self):
        workbook = load_workbook(io.BytesIO(build_inventory_workbook([])))
        self.assertEqual(workbook['Assets'].max_row, 1)

    def test_missing_target(self):
        with self.assertRaises(ExportTargetMissingError):
            build_inventory_workbook(None)

    def test_control_characters_in_upload_are_stripped(self):
        """A bell character in an uploaded cell does not break the workbook."""
        assets = load_uploaded_file('inventory.csv', SAMPLE_CSV.replace('database', 'data\x07base'))
        workbook = load_workbook(io.BytesIO(build_inventory_workbook(assets)))

        types = [row[0] for row in workbook['Assets'].iter_rows(
            min_row=2, min_col=4, max_col=4, values_only=True)]
        self.assertIn('database', types)

    @patch('quasar.reports.excel_export.pd.ExcelWriter')
    def test_write_failure_is_wrapped(self, mock_writer):
        """Any writer error surfaces as ReportExportError."""
        mock_writer.side_effect = RuntimeError("engine exploded")

        with self.assertRaises(ReportExportError) as context:
            build_inventory_workbook(self.assets)

        self.assertEqual(str(context.exception), "Failed to export Excel workbook. Please try again.")
        self.assertIsInstance(context.exception.__cause__, RuntimeError)


if __name__ == '__main__':
    unittest.main()
