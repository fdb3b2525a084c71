"""
Configuration management for the dashboard copy tool.
"""

import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigurationError
from .tenant import TenantRef


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config(BaseModel):
    """Configuration class for the dashboard copy tool."""

    # Destination tenant
    dest_url: Optional[str] = Field(default=None, description="Base URL of the destination tenant")
    dest_token: Optional[str] = Field(default=None, description="API token for the destination tenant")

    # Source tenant (falls back to the destination when unset)
    source_url: Optional[str] = Field(default=None, description="Base URL of the source tenant")
    source_token: Optional[str] = Field(default=None, description="API token for the source tenant")

    # Dashboard selection
    dashboard_id: Optional[str] = Field(default=None, description="ID of the dashboard to copy")
    dest_dashboard_name: Optional[str] = Field(
        default=None,
        description="Name for the copied dashboard (keeps the source name when unset)"
    )

    # Behaviour flags
    skip_compatibility_checks: bool = Field(
        default=False,
        description="Skip tenant, version and token scope checks"
    )
    verify_tls: bool = Field(default=True, description="Verify TLS certificates")
    dry_run: bool = Field(default=False, description="Stop after validation, do not import")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json or text)")

    # Storage Configuration
    logs_storage_path: Optional[str] = Field(
        default="./logs",
        description="Path to store log files"
    )
    outputs_storage_path: Optional[str] = Field(
        default=None,
        description="Path to store exported dashboard artifacts"
    )

    def __init__(self, **kwargs):
        # Load environment variables
        load_dotenv()

        # Override with environment variables
        env_config = {
            'dest_url': os.getenv('DEST_TENANT_URL'),
            'dest_token': os.getenv('DEST_API_TOKEN'),
            'source_url': os.getenv('SOURCE_TENANT_URL'),
            'source_token': os.getenv('SOURCE_API_TOKEN'),
            'dashboard_id': os.getenv('SOURCE_DASHBOARD_ID'),
            'dest_dashboard_name': os.getenv('DEST_DASHBOARD_NAME'),
            'skip_compatibility_checks': _env_flag('SKIP_COMPATIBILITY_CHECKS'),
            'verify_tls': not _env_flag('SKIP_TLS_VERIFY'),
            'log_level': os.getenv('LOG_LEVEL', 'INFO'),
            'log_format': os.getenv('LOG_FORMAT', 'text'),
            'logs_storage_path': os.getenv('LOGS_STORAGE_PATH', './logs'),
            'outputs_storage_path': os.getenv('OUTPUTS_STORAGE_PATH'),
        }

        # Remove None values
        env_config = {k: v for k, v in env_config.items() if v is not None}

        # Merge with provided kwargs, skipping CLI options that were not given
        env_config.update({k: v for k, v in kwargs.items() if v is not None})

        super().__init__(**env_config)

    def validate_config(self) -> bool:
        """Validate that required configuration is present."""
        if not self.dest_url:
            raise ConfigurationError("DEST_TENANT_URL is required")
        if not self.dest_token:
            raise ConfigurationError("DEST_API_TOKEN is required")
        if not self.dashboard_id:
            raise ConfigurationError("SOURCE_DASHBOARD_ID is required")
        return True

    @property
    def dest_tenant(self) -> TenantRef:
        """Destination tenant with a normalized URL."""
        if not self.dest_url or not self.dest_token:
            raise ConfigurationError("Destination tenant URL and token are required")
        return TenantRef.create(self.dest_url, self.dest_token, role='destination')

    @property
    def source_tenant(self) -> TenantRef:
        """Source tenant, defaulting each missing part to the destination's."""
        url = self.source_url or self.dest_url
        token = self.source_token or self.dest_token
        if not url or not token:
            raise ConfigurationError("Source tenant URL and token are required")
        return TenantRef.create(url, token, role='source')
