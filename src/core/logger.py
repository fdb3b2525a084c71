"""
Logging configuration for the dashboard copy tool.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional
import structlog
from rich.console import Console
from rich.logging import RichHandler


def setup_logger(service_name: str, feature: str, log_level: str = "INFO", json_console: bool = False,
                 log_dir: Optional[str] = "logs") -> structlog.stdlib.BoundLogger:
    """
    Set up structured logging for the dashboard copy tool.

    Args:
        service_name: Name of the component (e.g., 'dashboard-copy')
        feature: Feature name for log file organization
        log_level: Logging level
        json_console: If True, output single-line JSON to stdout instead of Rich output
        log_dir: Base directory for log files, or None to log to the console only

    Returns:
        Configured logger instance
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Drop handlers from a previous setup so repeated calls don't duplicate output
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    log_filepath = None
    if log_dir:
        logs_dir = Path(log_dir) / feature
        logs_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H")
        log_filepath = logs_dir / f"dashboard-copy-{service_name}-{timestamp}.log"

        # File handler for persistent logging (always JSON)
        file_handler = logging.FileHandler(log_filepath)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        root_logger.addHandler(file_handler)

    if json_console:
        # Single-line JSON output for log shippers
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter('%(message)s'))
    else:
        # Rich formatting for human-readable output
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True
        )
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    logger = structlog.get_logger(service_name)
    logger.info(
        "Logger initialized",
        service=service_name,
        feature=feature,
        log_file=str(log_filepath) if log_filepath else None,
        log_level=log_level,
        json_console=json_console
    )

    return logger


class LoggerMixin:
    """Mixin class to add logging helpers to services."""

    logger: structlog.stdlib.BoundLogger

    def log_copy_start(self, dashboard_id: str, dry_run: bool = False):
        """Log the start of a dashboard copy."""
        self.logger.info(
            "Dashboard copy started",
            dashboard_id=dashboard_id,
            dry_run=dry_run
        )

    def log_copy_complete(self, dashboard_id: str, success: bool, state: str,
                          new_dashboard_id: Optional[str] = None):
        """Log dashboard copy completion."""
        self.logger.info(
            "Dashboard copy completed",
            dashboard_id=dashboard_id,
            success=success,
            state=state,
            new_dashboard_id=new_dashboard_id
        )

    def log_resource_action(self, action: str, tenant: str, resource_name: str,
                            success: bool, error: Optional[str] = None):
        """Log individual actions against a tenant."""
        log_data = {
            "action": action,
            "tenant": tenant,
            "resource_name": resource_name,
            "success": success
        }

        if error:
            log_data["error"] = error
            self.logger.error("Resource action failed", **log_data)
        else:
            self.logger.info("Resource action completed", **log_data)
