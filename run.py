#!/usr/bin/env python3
"""
QUASAR - Main CLI Entry Point
=============================

Command-line entry point for the QUASAR quantum-risk dashboard.  It has
three modes:

DASHBOARD (default)  (launch_dashboard)
    Spawns a Streamlit subprocess running dashboard.py and keeps it alive
    until Ctrl+C.  The dashboard loads the bundled inventory
    (quasar/data/QUASAR_Test_Data.csv) and accepts CSV uploads.

SUMMARY  (print_summary)
    Parses one or more inventory CSVs, prints the dashboard KPIs, the top
    risks and the migration queue to the terminal, and optionally writes
    the PDF / Excel reports.  Useful for CI or headless servers.

HEALTH CHECK  (health_check)
    Verifies the Python version, required packages and the bundled dataset.

Usage:
    python run.py                          # Launch dashboard on :8501
    python run.py --port 8502 --no-browser
    python run.py --summary assets.csv     # Print metrics for a CSV
    python run.py --summary a.csv b.csv --pdf report.pdf --excel inventory.xlsx
    python run.py --health-check

Environment Requirements:
    - Python 3.9+
    - streamlit, pandas, plotly, reportlab, openpyxl, tqdm
"""

import logging
import sys
import subprocess
import argparse
import webbrowser
from pathlib import Path
import time
import atexit
import socket
from tqdm import tqdm

# ==========================================
# PATH VALIDATION & SECURITY
# ==========================================
# User-supplied paths from --summary / --pdf / --excel are resolved and
# checked against an allowlist (the project root and the user's home
# directory) before use.

def validate_file_path(path: str, must_exist: bool = False) -> Path:
    """
    Resolve a user-supplied path and make sure it stays in allowed directories.

    Args:
        path: Raw file path string from a CLI argument.
        must_exist: When True, raise ValueError if the file is missing.

    Returns:
        A fully-resolved Path inside the project root or the home directory.

    Raises:
        ValueError: If the path is missing (when required) or outside the
                    allowed directories.
    """
    resolved = Path(path).resolve()

    if must_exist and not resolved.exists():
        raise ValueError(f"Invalid file path '{path}': File not found: {path}")

    project_root = Path(__file__).parent.resolve()
    home_dir = Path.home().resolve()
    allowed = any(
        resolved == root or root in resolved.parents
        for root in (project_root, home_dir)
    )
    if not allowed:
        raise ValueError(f"Invalid file path '{path}': Path outside allowed directories")

    return resolved


# ==========================================
# LOGGING
# ==========================================

def setup_logging(verbose: bool = False):
    """
    Configure the root logger with file and console handlers.

    Every run writes a timestamped log under logs/.  The file handler always
    captures DEBUG; the console shows WARNING (INFO with --verbose).

    Returns:
        Path: The log file for this run.
    """
    log_dir = Path(__file__).parent / "logs"
    log_dir.mkdir(exist_ok=True)

    timestamp = time.strftime('%Y%m%d_%H%M%S')
    log_file = log_dir / f"quasar_{timestamp}.log"

    file_formatter = logging.Formatter(
        '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(console_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # main() may run more than once in a process; avoid duplicate lines
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    if verbose:
        print(f"\U0001f4dd Verbose logging enabled. Log file: {log_file}")

    return log_file


logger = logging.getLogger(__name__)


# ==========================================
# HEALTH CHECK UTILITIES
# ==========================================

def check_required_packages():
    """
    Verify that the runtime packages are importable.

    Returns:
        Tuple of (all_installed: bool, missing_packages: list[str]) where the
        list holds pip install names, not import names.
    """
    required = {
        'streamlit': 'streamlit',
        'pandas': 'pandas',
        'plotly': 'plotly',
        'reportlab': 'reportlab',
        'openpyxl': 'openpyxl',
        'tqdm': 'tqdm',
    }

    missing = []
    for import_name, package_name in required.items():
        try:
            __import__(import_name)
        except ImportError:
            missing.append(package_name)

    return len(missing) == 0, missing


def check_bundled_data():
    """
    Parse the bundled inventory.

    Returns:
        Tuple of (ok: bool, detail: str).
    """
    from quasar.core.config import DEFAULT_DATA_FILE
    from quasar.core.exceptions import QuasarError
    from quasar.ingestion import load_default_assets

    if not DEFAULT_DATA_FILE.exists():
        return False, f"Missing {DEFAULT_DATA_FILE}"
    try:
        assets = load_default_assets()
    except QuasarError as e:
        return False, str(e)
    return True, f"{len(assets)} assets"


def health_check():
    """
    Run the diagnostic checks and print a human-readable report.

    Checks performed:
        1. Python version (>= 3.9 required)
        2. Required Python packages
        3. Project structure (quasar/, dashboard.py)
        4. Bundled dataset parses cleanly

    Returns:
        bool: True if every check passed.
    """
    print()
    print("=" * 60)
    print("  \U0001f3e5 QUASAR - HEALTH CHECK")
    print("=" * 60)
    print()

    python_version = sys.version_info
    python_ok = python_version >= (3, 9)
    status = "✅" if python_ok else "❌"
    print(f"{status} Python Version: {python_version.major}.{python_version.minor}.{python_version.micro}")
    if not python_ok:
        print("   Required: Python 3.9+")

    packages_ok, missing = check_required_packages()
    status = "✅" if packages_ok else "❌"
    print(f"{status} Required Packages: {'All installed' if packages_ok else f'{len(missing)} missing'}")
    if missing:
        print(f"   Missing: {', '.join(missing)}")
        print(f"   Install with: pip install {' '.join(missing)}")

    project_root = Path(__file__).parent
    required_paths = ['quasar', 'quasar/data', 'dashboard.py']
    structure_ok = all((project_root / p).exists() for p in required_paths)
    status = "✅" if structure_ok else "❌"
    print(f"{status} Project Structure: {'Valid' if structure_ok else 'Missing files'}")

    data_ok, detail = check_bundled_data() if structure_ok else (False, "Skipped")
    status = "✅" if data_ok else "❌"
    print(f"{status} Bundled Dataset: {detail}")

    print()
    print("=" * 60)
    all_ok = python_ok and packages_ok and structure_ok and data_ok
    if all_ok:
        print("  ✅ All checks passed!")
    else:
        print("  ❌ Some checks failed. Please fix the issues above.")
    print("=" * 60)
    print()

    return all_ok


# ==========================================
# SUMMARY MODE
# ==========================================

def load_summary_assets(paths):
    """Parse every CSV in ``paths`` and concatenate the assets in order."""
    from quasar.ingestion import parse_csv

    assets = ()
    for path in tqdm(paths, desc="Parsing inventories", unit="file", disable=len(paths) < 2):
        resolved = validate_file_path(path, must_exist=True)
        parsed = parse_csv(resolved.read_text(encoding='utf-8-sig'))
        logger.info(f"Parsed {len(parsed)} assets from {resolved.name}")
        assets += parsed
    return assets


def print_summary(paths, pdf_path=None, excel_path=None):
    """
    Print dashboard KPIs for one or more CSV files.

    Returns:
        bool: True on success, False if any file failed to load or export.
    """
    from quasar.core.exceptions import QuasarError
    from quasar.metrics import calculate_metrics
    from quasar.scoring import get_migration_tasks, get_top_risks

    try:
        assets = load_summary_assets(paths)
    except ValueError as e:
        # QuasarError is a ValueError, as are path validation failures
        print(f"❌ {e}")
        return False

    metrics = calculate_metrics(assets)

    print()
    print("=" * 60)
    print(f"  \U0001f6e1️  QUASAR SUMMARY ({len(paths)} file{'s' if len(paths) != 1 else ''})")
    print("=" * 60)
    rows = [
        ("Total assets", metrics.total_assets),
        ("Vulnerable (legacy)", metrics.vulnerable_assets),
        ("Migrating", metrics.migrating_assets),
        ("Post-quantum", metrics.post_quantum_assets),
        ("Critical", metrics.critical_assets),
        ("Average risk score", f"{metrics.average_risk_score}%"),
        ("High / medium / low risk",
         f"{metrics.high_risk_assets} / {metrics.medium_risk_assets} / {metrics.low_risk_assets}"),
        ("Avg time to q-safe", f"{metrics.avg_time_to_qsafe} days"),
        ("Automation success", f"{metrics.automation_success_rate}%"),
        ("Avg compliance", f"{metrics.avg_compliance_score}%"),
        ("Expired certificates", metrics.expired_certs),
    ]
    for label, value in rows:
        print(f"  {label:<26} {value}")

    top = get_top_risks(assets)
    if top:
        print()
        print("  Top risks:")
        for item in top:
            print(f"    {item.rank}. {item.risk_label:<32} score {item.score}")

    tasks = get_migration_tasks(assets)
    if tasks:
        print()
        print("  Migration queue:")
        for task in tasks:
            print(f"    {task.id:<16} {task.current_algorithm} -> {task.target_algorithm}"
                  f" ({task.priority}, {task.estimated_time})")
    print("=" * 60)

    try:
        if pdf_path:
            from quasar.reports import build_pdf_report
            target = validate_file_path(pdf_path)
            target.write_bytes(build_pdf_report(assets, metrics))
            print(f"✅ PDF report written to {target}")
        if excel_path:
            from quasar.reports import build_inventory_workbook
            target = validate_file_path(excel_path)
            target.write_bytes(build_inventory_workbook(assets, metrics))
            print(f"✅ Excel inventory written to {target}")
    except (QuasarError, ValueError) as e:
        print(f"❌ {e}")
        return False

    return True


# ==========================================
# DASHBOARD LAUNCH
# ==========================================

def launch_dashboard(port: int = 8501, open_browser: bool = True):
    """
    Launch the Streamlit dashboard as a managed subprocess.

    Checks the entry point exists and the port is free, starts Streamlit in
    headless mode with the dark theme, optionally opens a browser after a
    short delay, and terminates the subprocess on exit.

    Returns:
        bool: True if the dashboard ran and exited cleanly (including Ctrl+C),
              False on errors (missing files, port in use, etc.).
    """
    print()
    print("=" * 60)
    print("  \U0001f310 Launching QUASAR Dashboard")
    print("=" * 60)
    print()

    dashboard_path = Path(__file__).parent / "dashboard.py"
    if not dashboard_path.exists():
        print(f"❌ Error: Dashboard not found at {dashboard_path}")
        return False

    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            port_in_use = sock.connect_ex(('localhost', port)) == 0
    except OSError as e:
        logger.warning(f"Could not check port status: {e}")
        port_in_use = False

    if port_in_use:
        print(f"⚠️  Port {port} is already in use")
        print("   Please use a different port with --port flag")
        return False

    print(f"  \U0001f4ca Starting Streamlit server on port {port}...")
    print(f"  \U0001f517 URL: http://localhost:{port}")
    print()
    print("  Press Ctrl+C to stop the dashboard")
    print("-" * 60)
    sys.stdout.flush()

    cmd = [
        sys.executable, "-m", "streamlit", "run",
        str(dashboard_path),
        "--server.port", str(port),
        "--server.headless", "true",
        "--browser.gatherUsageStats", "false",
        "--theme.base", "dark",
        "--theme.primaryColor", "#00B4D8",
        "--theme.backgroundColor", "#0A1628",
        "--theme.secondaryBackgroundColor", "#112240",
        "--theme.textColor", "#E0E6F0",
    ]

    streamlit_process = None

    def cleanup():
        """Terminate the Streamlit subprocess: SIGTERM, then SIGKILL after 5s."""
        if streamlit_process and streamlit_process.poll() is None:
            print("\n\U0001f9f9 Cleaning up dashboard process...")
            streamlit_process.terminate()
            try:
                streamlit_process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                print("   Force killing process...")
                streamlit_process.kill()

    atexit.register(cleanup)

    try:
        if open_browser:
            def open_browser_delayed():
                time.sleep(3)
                try:
                    webbrowser.open(f"http://localhost:{port}")
                except webbrowser.Error as e:
                    logger.warning(f"Failed to open browser: {e}")

            import threading
            threading.Thread(target=open_browser_delayed, daemon=True).start()

        streamlit_process = subprocess.Popen(cmd)
        logger.info(f"Streamlit started (pid {streamlit_process.pid}) on port {port}")
        streamlit_process.wait()
        return True

    except KeyboardInterrupt:
        print("\n\n✅ Dashboard stopped by user.")
        cleanup()
        return True
    except FileNotFoundError:
        print("\n❌ Streamlit not found. Install with: pip install streamlit plotly")
        return False
    except OSError as e:
        print(f"\n❌ Error launching dashboard: {e}")
        logger.error("Dashboard launch failed", exc_info=True)
        cleanup()
        return False


# ==========================================
# CLI
# ==========================================

def parse_args(argv=None):
    """
    Parse command-line arguments.

    Modes:
        (default) / --dashboard -- launch the Streamlit dashboard
        --summary FILE [FILE..] -- print metrics for CSV files and exit
        --health-check          -- run diagnostics and exit
    """
    parser = argparse.ArgumentParser(
        description='QUASAR - Quantum Asset Risk Dashboard',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py                        Launch the dashboard
  python run.py --port 8502            Use a custom port
  python run.py --summary assets.csv   Print metrics for a CSV
  python run.py --summary assets.csv --pdf report.pdf
  python run.py --health-check         Check the environment
        """
    )

    parser.add_argument(
        '--dashboard',
        action='store_true',
        help='Launch the Streamlit dashboard (default)'
    )

    parser.add_argument(
        '--summary',
        nargs='+',
        metavar='FILE',
        help='Print dashboard metrics for one or more CSV files and exit'
    )

    parser.add_argument(
        '--pdf',
        metavar='PATH',
        help='With --summary: also write the PDF report to PATH'
    )

    parser.add_argument(
        '--excel',
        metavar='PATH',
        help='With --summary: also write the Excel inventory to PATH'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=8501,
        help='Port for Streamlit dashboard (default: 8501)'
    )

    parser.add_argument(
        '--no-browser',
        action='store_true',
        help='Do not automatically open browser'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show detailed logging output'
    )

    parser.add_argument(
        '--health-check',
        action='store_true',
        help='Run system health check and exit'
    )

    args = parser.parse_args(argv)
    if (args.pdf or args.excel) and not args.summary:
        parser.error('--pdf/--excel require --summary')
    return args


def main(argv=None):
    """Parse CLI args and dispatch to the selected mode; returns the exit code."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    if args.health_check:
        return 0 if health_check() else 1

    if args.summary:
        return 0 if print_summary(args.summary, args.pdf, args.excel) else 1

    try:
        return 0 if launch_dashboard(port=args.port, open_browser=not args.no_browser) else 1
    except KeyboardInterrupt:
        print("\n\n\U0001f44b Cancelled by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
