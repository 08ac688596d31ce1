"""
esbuildkit - download and run the esbuild bundler from Python.

Usage:
    from pathlib import Path
    from esbuildkit import ESBuild, ESBuildVersion
    from esbuildkit.esbuild.options import Bundle, Outfile

    esbuild = ESBuild(version=ESBuildVersion.fixed("0.19.11"))
    esbuild.run_with(Path("src/a.js"), Bundle(), Outfile("dist/out.js"))
"""

from esbuildkit.esbuild import ESBuild, ESBuildVersion, Downloader, Executor
from esbuildkit.core.exceptions import ESBuildKitError

__all__ = [
    "ESBuild",
    "ESBuildVersion",
    "Downloader",
    "Executor",
    "ESBuildKitError",
]
