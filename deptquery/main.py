#!/usr/bin/env python3
"""
Department Query Service Main Entry Point

This module serves as the main entry point for the package.
It provides a minimal delegator to the CLI module without import-time side effects.
"""

from .cli import main


if __name__ == "__main__":
    main()
