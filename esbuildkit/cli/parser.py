"""
esbuildkit CLI argument parser.

This module implements the command-line interface for esbuildkit using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from esbuildkit.core.exceptions import ESBuildKitError, ProcessExitError
from esbuildkit.esbuild.options import FORMATS, PLATFORMS

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("esbuildkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """esbuildkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="esbuildkit",
            description="esbuildkit - download and run the esbuild bundler",
            epilog='Use "esbuildkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"esbuildkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./esbuildkit.yaml)",
        )
        parser.add_argument(
            "--esbuild-version",
            metavar="VERSION",
            help="esbuild version to use, e.g. 0.19.11 (default: latest)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="DIR",
            help="Directory esbuild is downloaded into",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_download_command(subparsers)
        self._add_run_command(subparsers)
        self._add_info_command(subparsers)

        return parser

    def _add_download_command(self, subparsers):
        """Add 'download' subcommand."""
        subparsers.add_parser(
            "download",
            help="Download esbuild if needed and print its path",
            description="Download the esbuild executable for this platform",
        )

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Run esbuild on an entry point",
            description=(
                "Run esbuild on an entry point. Arguments after '--' are "
                "passed to esbuild unchanged. Put --sourcemap after ENTRY "
                "or give its mode as --sourcemap=MODE."
            ),
        )
        parser.add_argument("entry_point", type=Path, metavar="ENTRY", help="Entry module")
        parser.add_argument(
            "--cwd",
            type=Path,
            metavar="DIR",
            help="Working directory (default: the entry point's directory)",
        )
        parser.add_argument("--bundle", action="store_true", help="Bundle dependencies")
        parser.add_argument("--outfile", metavar="FILE", help="Output file")
        parser.add_argument("--outdir", metavar="DIR", help="Output directory")
        parser.add_argument("--minify", action="store_true", help="Minify the output")
        parser.add_argument("--format", choices=FORMATS, help="Output format")
        parser.add_argument("--platform", choices=PLATFORMS, help="Platform target")
        parser.add_argument(
            "--sourcemap",
            nargs="?",
            const="",
            default=None,
            metavar="MODE",
            help=(
                "Emit a source map; MODE is linked, external, inline or both. "
                "Place the flag after ENTRY or write --sourcemap=MODE"
            ),
        )
        parser.set_defaults(esbuild_args=[])

    def _add_info_command(self, subparsers):
        """Add 'info' subcommand."""
        subparsers.add_parser(
            "info",
            help="Show detected platform and esbuild package",
            description="Show the OS, architecture and npm package esbuildkit would use",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Everything after the first '--' is kept verbatim in esbuild_args.

        Returns:
            Parsed arguments namespace
        """
        args = list(sys.argv[1:] if args is None else args)
        passthrough: List[str] = []
        if "--" in args:
            index = args.index("--")
            args, passthrough = args[:index], args[index + 1 :]

        parsed_args = self.parser.parse_args(args)
        if passthrough:
            if parsed_args.command != "run":
                self.parser.error("arguments after '--' are only accepted by 'run'")
            parsed_args.esbuild_args = passthrough
        return parsed_args

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except ProcessExitError as e:
            logger.error(f"Error: {e}")
            # Negative means killed by a signal; report 128 + signal like a shell
            return e.returncode if e.returncode >= 0 else 128 - e.returncode
        except (ESBuildKitError, ValueError) as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        from esbuildkit.cli.commands import download, info, run

        command_map = {
            "download": download.run,
            "run": run.run,
            "info": info.run,
        }

        handler = command_map.get(args.command)
        if not handler:
            logger.error(f"Unknown command: {args.command}")
            return 1

        return handler(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
