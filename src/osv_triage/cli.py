"""
osv-triage - Generate an OSV-Scanner configuration from a vulnerability scan

Analyses the vulnerabilities osv-scanner detects in a Node.js project and
generates an osv-scanner.toml that ignores them after manual or AI-assisted
validation.

Prerequisites:
    osv-scanner (go install github.com/google/osv-scanner/cmd/osv-scanner@latest)
    yarn, npm or pnpm (detected automatically)

Environment Variables (optional, enable AI suggestions):
    AZUREAI_API_KEY: Azure OpenAI API key
    AZUREAI_BASE_URL: Azure OpenAI endpoint (e.g. https://your-resource.openai.azure.com)
    AZUREAI_API_VERSION: API version (e.g. 2023-05-15)
    AZUREAI_DEPLOYMENT: Deployment name overriding the model mapping
    AZUREAI_LOGFILE: Usage log path (default: ~/.azure_ai_usage.log)

Usage:
    osv-triage              # Interactive mode
    osv-triage --dry-run    # Preview without creating files
    osv-triage --report     # Also write a markdown report
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .constants import CONFIG_FILE, PACKAGE_JSON, REPORT_FILE
from .llm import AzureAIClient
from .models import OsvTriageError
from .package_managers import detect_package_manager
from .services import (
    ChainResolver,
    ScannerService,
    SuggestionService,
    TriageService,
    collect_findings,
)
from .services.chain_service import DEFAULT_MAX_WORKERS
from .services.config_writer_service import backup_config, generate_toml_config, write_config, write_report
from .services.dependency_service import get_dependencies
from .utils import ask_confirmation, print_error, print_info, print_success, print_warning

logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING") -> None:
    """Send log records to stderr so they do not mix with the interactive output."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='osv-triage',
        description='Generate OSV-Scanner configuration from vulnerability scan',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '-d', '--dry-run',
        action='store_true',
        help='Show what would be done without creating files'
    )
    parser.add_argument(
        '-r', '--report',
        action='store_true',
        help=f'Generate a markdown report ({REPORT_FILE})'
    )
    parser.add_argument(
        '--project-dir',
        default='.',
        help='Node.js project root (default: current directory)'
    )
    parser.add_argument(
        '-j', '--jobs',
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f'Concurrent dependency chain lookups (default: {DEFAULT_MAX_WORKERS})'
    )
    parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: WARNING)'
    )
    return parser


def _prepare_config_file(config_path: str, project_dir: str, dry_run: bool) -> bool:
    """Offer to back up an existing config, or confirm creating one. False aborts."""
    if dry_run:
        return True

    if os.path.exists(config_path):
        if ask_confirmation(f"A {CONFIG_FILE} file already exists. Back it up?", True):
            backup_path = backup_config(config_path)
            print_success(f"Backup created: {backup_path}")
        return True

    print_info(f"Project directory: {os.path.abspath(project_dir)}")
    return ask_confirmation(f"Create the {CONFIG_FILE} file?", False)


def run(args: argparse.Namespace) -> int:
    project_dir = args.project_dir
    config_path = os.path.join(project_dir, CONFIG_FILE)

    # 1. Validate environment
    print_info("Validating environment...")
    scanner = ScannerService(cwd=project_dir)
    if not scanner.is_available():
        print_error("osv-scanner is not installed")
        print_info("Install: go install github.com/google/osv-scanner/cmd/osv-scanner@latest")
        return 1

    if not os.path.exists(os.path.join(project_dir, PACKAGE_JSON)):
        print_error(f"No Node.js project detected ({PACKAGE_JSON} missing)")
        return 1

    if not _prepare_config_file(config_path, project_dir, args.dry_run):
        print_info("Operation cancelled")
        return 0

    # 2. Detect package manager
    package_manager = detect_package_manager(project_dir)
    if not package_manager:
        print_error("Unable to detect the package manager")
        return 1

    pm_version = package_manager.get_version()
    if not pm_version:
        print_error(f"{package_manager.name} is not installed or not accessible")
        return 1
    print(f"📦 Package manager detected: {package_manager.name} v{pm_version}")

    # 3. Update packages
    if not args.dry_run:
        print_info(f"Updating packages with {package_manager.name}...")
        if not package_manager.update():
            print_warning("Package update failed")

    # 4. Scan
    scan_result = scanner.run_scan(package_manager.lockfile)
    if not scan_result:
        print_warning("No vulnerability detected or scan error")
        return 0

    findings = collect_findings(scan_result)
    if not findings:
        print_success("No vulnerability to process")
        return 0

    # 5. Explain and triage
    ChainResolver(package_manager, max_workers=args.jobs).resolve(findings)

    dependencies, dev_dependencies = get_dependencies(project_dir)
    suggestions = SuggestionService(client_factory=AzureAIClient)
    triaged = TriageService(suggestions, dependencies, dev_dependencies).triage_all(findings)

    unique_packages = len({v.key for v in findings})
    print(f"🔍 {len(triaged)} vulnerabilities detected in {unique_packages} packages")

    # 6. Write configuration
    config_content = generate_toml_config(triaged, package_manager.name)
    if args.dry_run:
        print_info("Dry-run mode: no file will be created")
        print(f"\n--- {CONFIG_FILE} content ---")
        print(config_content)
        return 0

    write_config(config_content, config_path)
    print_success(f"{CONFIG_FILE} created with {len(triaged)} ignored vulnerabilities")

    # 7. Verify
    print_info("Verifying configuration...")
    if scanner.verify_config(package_manager.lockfile, CONFIG_FILE):
        print_success("No vulnerability detected with the new configuration")
    else:
        print_warning("Some vulnerabilities are still reported")

    # 8. Report
    if args.report:
        report_path = os.path.join(project_dir, REPORT_FILE)
        write_report(triaged, report_path)
        print_success(f"Report generated: {report_path}")

    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the osv-triage command."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        exit_code = run(args)
    except OsvTriageError as e:
        logger.error(f"osv-triage failed: {e}")
        print_error(str(e))
        exit_code = 1
    except KeyboardInterrupt:
        print_info("Interrupted")
        exit_code = 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print_error(f"Fatal error: {e}")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == '__main__':
    main()
