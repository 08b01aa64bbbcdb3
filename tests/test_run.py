"""
Unit tests for run.py

Tests all major functions in the run.py entry point script including:
- Path validation and security
- Health checks
- Summary mode and report writing
- Argument parsing and dispatch
- Logging setup
"""

import unittest
from unittest.mock import patch, MagicMock
from pathlib import Path
import logging
import sys
import tempfile
import shutil

# Add parent directory to path to import run module
sys.path.insert(0, str(Path(__file__).parent.parent))

import run
from tests.fixtures.sample_data import create_sample_csv_file

PROJECT_ROOT = Path(run.__file__).parent.resolve()


class TestPathValidation(unittest.TestCase):
    """Test suite for path validation and security functions."""

    def setUp(self):
        """Set up test fixtures."""
        # Inside the project root so the allowlist accepts it
        self.test_dir = Path(tempfile.mkdtemp(dir=PROJECT_ROOT))
        self.test_file = self.test_dir / "test.csv"
        self.test_file.write_text("test data")

    def tearDown(self):
        """Clean up test fixtures."""
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_validate_existing_file(self):
        """Test validation of existing file."""
        result = run.validate_file_path(str(self.test_file), must_exist=True)
        self.assertIsInstance(result, Path)
        self.assertTrue(result.exists())

    def test_validate_nonexistent_file_without_requirement(self):
        """Test validation of non-existent file when existence not required."""
        nonexistent = self.test_dir / "nonexistent.csv"
        result = run.validate_file_path(str(nonexistent), must_exist=False)
        self.assertIsInstance(result, Path)

    def test_validate_nonexistent_file_with_requirement(self):
        """Test validation fails for non-existent file when existence required."""
        nonexistent = self.test_dir / "nonexistent.csv"
        with self.assertRaises(ValueError) as context:
            run.validate_file_path(str(nonexistent), must_exist=True)
        self.assertIn("File not found", str(context.exception))

    def test_prevent_path_traversal(self):
        """Test prevention of path traversal attacks."""
        with self.assertRaises(ValueError) as context:
            run.validate_file_path('/etc/passwd', must_exist=False)
        self.assertIn("outside allowed directories", str(context.exception))

    def test_sibling_prefix_is_not_allowed(self):
        """A directory that merely shares the project root's prefix is rejected."""
        sibling = str(PROJECT_ROOT) + "-evil/report.pdf"
        if Path(sibling).resolve().is_relative_to(Path.home().resolve()):
            self.skipTest("project root lives under the home directory")
        with self.assertRaises(ValueError):
            run.validate_file_path(sibling)


class TestHealthCheck(unittest.TestCase):
    """Test suite for health check functionality."""

    @patch('run.check_bundled_data')
    @patch('run.check_required_packages')
    def test_health_check_all_pass(self, mock_packages, mock_data):
        """Test health check when all checks pass."""
        mock_packages.return_value = (True, [])
        mock_data.return_value = (True, "30 assets")

        self.assertTrue(run.health_check())

    @patch('run.check_bundled_data')
    @patch('run.check_required_packages')
    def test_health_check_missing_packages(self, mock_packages, mock_data):
        """Test health check when packages are missing."""
        mock_packages.return_value = (False, ['reportlab', 'openpyxl'])
        mock_data.return_value = (True, "30 assets")

        self.assertFalse(run.health_check())

    @patch('run.check_bundled_data')
    @patch('run.check_required_packages')
    def test_health_check_bad_dataset(self, mock_packages, mock_data):
        """Test health check when the bundled dataset fails to parse."""
        mock_packages.return_value = (True, [])
        mock_data.return_value = (False, "Missing required columns: key_length")

        self.assertFalse(run.health_check())

    def test_check_bundled_data(self):
        """The shipped dataset parses."""
        ok, detail = run.check_bundled_data()
        self.assertTrue(ok)
        self.assertTrue(detail.endswith("assets"))

    def test_check_required_packages_all_installed(self):
        """Test package check returns a (bool, list) pair."""
        all_installed, missing = run.check_required_packages()
        self.assertIsInstance(all_installed, bool)
        self.assertIsInstance(missing, list)

    @patch('builtins.__import__')
    def test_check_required_packages_missing(self, mock_import):
        """Test package check when packages are missing."""
        def import_side_effect(name, *args, **kwargs):
            if name in ['reportlab', 'tqdm']:
                raise ImportError(f"No module named '{name}'")
            return MagicMock()

        mock_import.side_effect = import_side_effect

        all_installed, missing = run.check_required_packages()

        self.assertFalse(all_installed)
        self.assertEqual(missing, ['reportlab', 'tqdm'])


class TestSummary(unittest.TestCase):
    """Test suite for summary mode."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp(dir=PROJECT_ROOT))
        self.csv_path = create_sample_csv_file(self.test_dir)

    def tearDown(self):
        """Clean up test fixtures."""
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_load_summary_assets_concatenates_files(self):
        second = self.test_dir / "second.csv"
        second.write_text(self.csv_path.read_text())

        assets = run.load_summary_assets([str(self.csv_path), str(second)])
        self.assertEqual(len(assets), 10)

    @patch('builtins.print')
    def test_print_summary(self, mock_print):
        self.assertTrue(run.print_summary([str(self.csv_path)]))

        printed = "\n".join(str(call.args[0]) for call in mock_print.call_args_list if call.args)
        self.assertIn("Total assets", printed)
        self.assertIn("A-1 - database", printed)
        self.assertIn("RSA-2048 -> Kyber-768", printed)

    @patch('builtins.print')
    def test_print_summary_writes_reports(self, _mock_print):
        pdf_path = self.test_dir / "report.pdf"
        excel_path = self.test_dir / "inventory.xlsx"

        ok = run.print_summary([str(self.csv_path)], str(pdf_path), str(excel_path))

        self.assertTrue(ok)
        self.assertTrue(pdf_path.read_bytes().startswith(b'%PDF'))
        self.assertTrue(excel_path.read_bytes().startswith(b'PK'))

    @patch('builtins.print')
    def test_print_summary_missing_file(self, _mock_print):
        self.assertFalse(run.print_summary([str(self.test_dir / "absent.csv")]))

    @patch('builtins.print')
    def test_print_summary_invalid_csv(self, _mock_print):
        broken = self.test_dir / "broken.csv"
        broken.write_text("asset_id,type\nX,y\n")
        self.assertFalse(run.print_summary([str(broken)]))


class TestArgumentParsing(unittest.TestCase):
    """Test suite for command-line argument parsing."""

    def test_parse_args_defaults(self):
        """Test argument parsing with default values."""
        with patch('sys.argv', ['run.py']):
            args = run.parse_args()

            self.assertEqual(args.port, 8501)
            self.assertFalse(args.dashboard)
            self.assertFalse(args.no_browser)
            self.assertFalse(args.verbose)
            self.assertFalse(args.health_check)
            self.assertIsNone(args.summary)

    def test_parse_args_verbose(self):
        args = run.parse_args(['-v'])
        self.assertTrue(args.verbose)

    def test_parse_args_health_check(self):
        args = run.parse_args(['--health-check'])
        self.assertTrue(args.health_check)

    def test_parse_args_custom_port(self):
        args = run.parse_args(['--port', '8502', '--no-browser'])
        self.assertEqual(args.port, 8502)
        self.assertTrue(args.no_browser)

    def test_parse_args_summary_files(self):
        args = run.parse_args(['--summary', 'a.csv', 'b.csv', '--pdf', 'r.pdf', '--excel', 'i.xlsx'])

        self.assertEqual(args.summary, ['a.csv', 'b.csv'])
        self.assertEqual(args.pdf, 'r.pdf')
        self.assertEqual(args.excel, 'i.xlsx')

    @patch('sys.stderr')
    def test_report_flags_require_summary(self, _mock_stderr):
        with self.assertRaises(SystemExit):
            run.parse_args(['--pdf', 'r.pdf'])


class TestMain(unittest.TestCase):
    """Test suite for mode dispatch."""

    def tearDown(self):
        """Close the handlers main() installed."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()

    @patch('run.launch_dashboard')
    def test_default_launches_dashboard(self, mock_launch):
        mock_launch.return_value = True

        self.assertEqual(run.main(['--port', '8600', '--no-browser']), 0)
        mock_launch.assert_called_once_with(port=8600, open_browser=False)

    @patch('run.launch_dashboard')
    def test_dashboard_failure_exit_code(self, mock_launch):
        mock_launch.return_value = False
        self.assertEqual(run.main([]), 1)

    @patch('run.health_check')
    def test_health_check_mode(self, mock_health):
        mock_health.return_value = False
        self.assertEqual(run.main(['--health-check']), 1)

    @patch('run.print_summary')
    def test_summary_mode(self, mock_summary):
        mock_summary.return_value = True

        self.assertEqual(run.main(['--summary', 'a.csv']), 0)
        mock_summary.assert_called_once_with(['a.csv'], None, None)


class TestLogging(unittest.TestCase):
    """Test suite for logging configuration."""

    def tearDown(self):
        """Close the handlers setup_logging installed."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()

    def test_setup_logging_creates_log_file(self):
        log_file = run.setup_logging(verbose=False)

        self.assertIsInstance(log_file, Path)
        self.assertEqual(log_file.parent.name, "logs")
        self.assertTrue(log_file.name.startswith("quasar_"))

    @patch('builtins.print')
    def test_setup_logging_verbose_mode(self, _mock_print):
        """Test logging setup in verbose mode."""
        run.setup_logging(verbose=True)

        root_logger = logging.getLogger()
        self.assertEqual(root_logger.level, logging.DEBUG)
        self.assertEqual(len(root_logger.handlers), 2)

        console = [h for h in root_logger.handlers if not isinstance(h, logging.FileHandler)]
        self.assertEqual(console[0].level, logging.INFO)

    def test_repeated_setup_does_not_duplicate_handlers(self):
        run.setup_logging()
        run.setup_logging()
        self.assertEqual(len(logging.getLogger().handlers), 2)


if __name__ == '__main__':
    unittest.main()
