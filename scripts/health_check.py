#!/usr/bin/env python3
"""
Health check script for the dashboard copy tool.

Verifies that the tool is configured and that both tenants pass the
compatibility checks, without exporting or creating anything.
"""

import sys
import os
from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.api_client import TenantClient
from core.compatibility import (
    CompatibilityGuard,
    DESTINATION_REQUIRED_SCOPES,
    PIPELINE_MINIMUM_VERSION,
    SOURCE_REQUIRED_SCOPES,
)
from core.config import Config
from core.errors import DashboardCopyError


def check_environment():
    """Check if environment is properly set up."""
    print("🔍 Checking environment setup...")

    if not Path('.env').exists():
        print("⚠️  .env file not found (settings must come from the environment)")
        print("   Copy .env.example to .env to configure tenants and tokens")
    else:
        print("✅ .env file found")

    return True


def check_configuration():
    """Check if configuration is valid."""
    print("\n🔍 Checking configuration...")

    try:
        config = Config()
        if not config.dest_url or not config.dest_token:
            print("❌ Configuration error: DEST_TENANT_URL and DEST_API_TOKEN are required")
            return None
        print("✅ Configuration is valid")
        if not config.dashboard_id:
            print("⚠️  SOURCE_DASHBOARD_ID is not set (pass --dashboard-id when copying)")
        return config
    except Exception as e:
        print(f"❌ Unexpected configuration error: {e}")
        return None


def check_tenant(label, tenant, required_scopes, verify_tls):
    """Run the compatibility checks against one tenant."""
    print(f"  Checking {label} tenant {tenant.url}...")
    try:
        with TenantClient(tenant, verify_tls=verify_tls) as client:
            guard = CompatibilityGuard(client)
            guard.check_tenant_kind()
            print(f"  ✅ {label} is a single-tenant endpoint")
            guard.check_version(PIPELINE_MINIMUM_VERSION)
            print(f"  ✅ {label} server version is supported")
            guard.check_scopes(required_scopes)
            print(f"  ✅ {label} token scopes: {', '.join(sorted(required_scopes))}")
    except DashboardCopyError as e:
        print(f"  ❌ {label} check failed: {e}")
        return False

    return True


def check_tenants(config):
    """Check both tenants."""
    print("\n🔍 Checking tenants...")

    dest_ok = check_tenant("Destination", config.dest_tenant, DESTINATION_REQUIRED_SCOPES, config.verify_tls)
    source_ok = check_tenant("Source", config.source_tenant, SOURCE_REQUIRED_SCOPES, config.verify_tls)
    return dest_ok and source_ok


def main():
    """Main health check function."""
    print("🏥 Dashboard Copy Tool - Health Check")
    print("=" * 50)

    all_checks_passed = True

    if not check_environment():
        all_checks_passed = False

    config = check_configuration()
    if not config:
        all_checks_passed = False

    # Check tenants (only if config is valid)
    if config:
        if not check_tenants(config):
            all_checks_passed = False

    print("\n" + "=" * 50)
    if all_checks_passed:
        print("✅ All health checks passed! The dashboard copy tool is ready to use.")
        print("\nNext steps:")
        print("  1. Validate only: python dashboard-copy.py --dashboard-id <id> --dry-run")
        print("  2. Copy the dashboard: python dashboard-copy.py --dashboard-id <id>")
        return 0
    else:
        print("❌ Some health checks failed. Please fix the issues above.")
        return 1


if __name__ == '__main__':
    sys.exit(main())
