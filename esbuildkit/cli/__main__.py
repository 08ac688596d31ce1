"""
Entry point for running esbuildkit CLI as a module.

Usage: python -m esbuildkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
