#!/usr/bin/env python3
"""
Department Query Service - Entry Point Wrapper

Simple wrapper script so the service can be run from a checkout without
installing the package. All functionality lives in the deptquery package.
"""

import sys

from deptquery.cli import main as cli_main, create_argument_parser

def main():
    """Main entry point that delegates to the package CLI."""
    try:
        cli_main()
    except KeyboardInterrupt:
        sys.exit(130)  # Standard exit code for Ctrl+C

__all__ = ['main', 'create_argument_parser']

if __name__ == "__main__":
    main()
