"""
esbuild provisioning and execution.

This package resolves, downloads and runs the esbuild executable.
"""

from .versions import ESBuildVersion
from .registry import (
    DistInfo,
    PackageMetadata,
    NpmRegistryClient,
    package_name_for,
)
from .downloader import Downloader, download
from .executor import Executor
from .options import (
    RunOption,
    Bundle,
    Outfile,
    Outdir,
    Define,
    External,
    Format,
    Loader,
    Minify,
    Watch,
    Sourcemap,
    Splitting,
    Target,
    Platform,
    Serve,
    Packages,
    Arguments,
    options_to_arguments,
)
from .wrapper import ESBuild

__all__ = [
    "ESBuildVersion",
    "DistInfo",
    "PackageMetadata",
    "NpmRegistryClient",
    "package_name_for",
    "Downloader",
    "download",
    "Executor",
    "RunOption",
    "Bundle",
    "Outfile",
    "Outdir",
    "Define",
    "External",
    "Format",
    "Loader",
    "Minify",
    "Watch",
    "Sourcemap",
    "Splitting",
    "Target",
    "Platform",
    "Serve",
    "Packages",
    "Arguments",
    "options_to_arguments",
    "ESBuild",
]
