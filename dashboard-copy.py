#!/usr/bin/env python3
"""
Tenant Dashboard Copy Tool

Main entry point: copies one dashboard from a source tenant to a destination
tenant after checking that both tenants and tokens are compatible.
"""

import os
import sys

# Add the src directory to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from scripts.copy_cli import main


if __name__ == '__main__':
    sys.exit(main())
