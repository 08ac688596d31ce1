"""
Entry point for running esbuildkit CLI as a module.

Usage: python -m esbuildkit [command] [options]
"""

from esbuildkit.cli.parser import main

if __name__ == "__main__":
    main()
