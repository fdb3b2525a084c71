#!/usr/bin/env python3
"""
Command-line interface for copying a dashboard between tenants.

Every option falls back to its environment variable (or .env entry), so a
configured environment only needs the dashboard ID:

    dashboard-copy --dashboard-id 2b7c2a4e-0000-0000-0000-000000000001
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import Config
from core.errors import ConfigurationError
from core.logger import setup_logger
from services.dashboard_copy import DashboardCopyService
from utils.copy_summary import CopySummaryCollector


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dashboard-copy",
        description="Copy a dashboard from one tenant to another",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --dashboard-id <id>                        # Copy within the destination tenant
  %(prog)s --source-url https://abc.live.example.com --source-token <token> --dashboard-id <id>
  %(prog)s --dashboard-id <id> --dest-name "Copy of Overview"
  %(prog)s --dashboard-id <id> --dry-run              # Validate only, do not create
        """
    )

    dest_group = parser.add_argument_group('destination tenant')
    dest_group.add_argument('--dest-url', help='Destination tenant URL (env: DEST_TENANT_URL)')
    dest_group.add_argument('--dest-token', help='Destination API token (env: DEST_API_TOKEN)')
    dest_group.add_argument('--dest-name', dest='dest_dashboard_name',
                            help='Name for the new dashboard (env: DEST_DASHBOARD_NAME)')

    source_group = parser.add_argument_group('source tenant')
    source_group.add_argument('--source-url', help='Source tenant URL, defaults to the destination (env: SOURCE_TENANT_URL)')
    source_group.add_argument('--source-token', help='Source API token, defaults to the destination token (env: SOURCE_API_TOKEN)')
    source_group.add_argument('--dashboard-id', help='ID of the dashboard to copy (env: SOURCE_DASHBOARD_ID)')

    parser.add_argument(
        '--skip-checks',
        dest='skip_compatibility_checks',
        action='store_true',
        default=None,
        help='Skip tenant, version and token scope checks (env: SKIP_COMPATIBILITY_CHECKS)'
    )
    parser.add_argument(
        '--insecure',
        dest='verify_tls',
        action='store_false',
        default=None,
        help='Do not verify TLS certificates (env: SKIP_TLS_VERIFY)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        default=None,
        help='Export, transform and validate without creating the dashboard'
    )
    parser.add_argument('--output-dir', dest='outputs_storage_path',
                        help='Save exported and transformed dashboards here (env: OUTPUTS_STORAGE_PATH)')
    parser.add_argument('--log-level', help='Logging level (env: LOG_LEVEL)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the dashboard copy tool."""
    args = build_parser().parse_args(argv)

    try:
        config = Config(**vars(args))
    except Exception as e:
        print(f"❌ Failed to load configuration: {e}", file=sys.stderr)
        return 1

    logger = setup_logger(
        'dashboard-copy',
        'main',
        config.log_level,
        json_console=config.log_format.lower() == 'json',
        log_dir=config.logs_storage_path
    )

    try:
        config.validate_config()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info(f"Starting dashboard copy - dashboard: {config.dashboard_id}")
    logger.info(f"Dry run: {config.dry_run}")
    if not config.verify_tls:
        logger.warning("⚠️  TLS certificate verification is disabled")

    summary = CopySummaryCollector(output_dir=config.outputs_storage_path)
    service = DashboardCopyService(config, logger, summary=summary)
    result = service.run()

    summary.display_and_save()

    if result.success:
        if result.dry_run:
            logger.info("Dry run completed, dashboard is valid for the destination")
        else:
            logger.info(f"✅ Created dashboard {result.new_dashboard_id}: {result.viewer_url}")
        return 0

    print(f"Error: {result.error}", file=sys.stderr)
    return 1


if __name__ == '__main__':
    sys.exit(main())
