"""
Run command implementation.

Translates typed CLI flags into esbuild run options and runs esbuild.
"""

import logging
from typing import List

from esbuildkit.cli.utils import create_esbuild
from esbuildkit.esbuild.options import (
    Arguments,
    Bundle,
    Format,
    Minify,
    Outdir,
    Outfile,
    Platform,
    RunOption,
    Sourcemap,
)

logger = logging.getLogger(__name__)


def build_options(args) -> List[RunOption]:
    """
    Build run options from parsed arguments, typed flags first.

    Args:
        args: Parsed 'run' arguments

    Returns:
        Options in the order they are passed to esbuild
    """
    options: List[RunOption] = []
    if args.bundle:
        options.append(Bundle())
    if args.outfile:
        options.append(Outfile(args.outfile))
    if args.outdir:
        options.append(Outdir(args.outdir))
    if args.minify:
        options.append(Minify())
    if args.format:
        options.append(Format(args.format))
    if args.platform:
        options.append(Platform(args.platform))
    if args.sourcemap is not None:
        options.append(Sourcemap(args.sourcemap or None))
    if args.esbuild_args:
        options.append(Arguments(args.esbuild_args))
    return options


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    options = build_options(args)
    esbuild = create_esbuild(args)
    esbuild.run(args.entry_point, options, directory=args.cwd)
    return 0
