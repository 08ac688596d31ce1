"""
Typed esbuild run options and their command-line flags.

Each option is an immutable value that maps to one or more esbuild flags.
A sequence of options maps to the concatenation of their flags, in order.

Example:
    >>> options_to_arguments([Bundle(), Outfile("dist/out.js"), Format("esm")])
    ['--bundle', '--outfile=dist/out.js', '--format=esm']
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

PathLike = Union[str, Path]

FORMATS = ("iife", "esm", "cjs")
PLATFORMS = ("browser", "node", "neutral")
SOURCEMAP_MODES = ("linked", "external", "inline", "both")


def _require(value: str, what: str) -> None:
    if not str(value):
        raise ValueError(f"{what} cannot be empty")


class RunOption(ABC):
    """Base class of all esbuild run options."""

    @abstractmethod
    def flags(self) -> List[str]:
        """Command-line flags for this option (never empty)."""
        pass


@dataclass(frozen=True)
class Bundle(RunOption):
    """Bundle all dependencies into the output files."""

    def flags(self) -> List[str]:
        return ["--bundle"]


@dataclass(frozen=True)
class Outfile(RunOption):
    """The output file (for one entry point)."""

    path: PathLike

    def __post_init__(self):
        _require(self.path, "Output file")

    def flags(self) -> List[str]:
        return [f"--outfile={self.path}"]


@dataclass(frozen=True)
class Outdir(RunOption):
    """The output directory (for multiple entry points)."""

    path: PathLike

    def __post_init__(self):
        _require(self.path, "Output directory")

    def flags(self) -> List[str]:
        return [f"--outdir={self.path}"]


@dataclass(frozen=True)
class Define(RunOption):
    """Substitute an identifier with a constant expression."""

    key: str
    value: str

    def __post_init__(self):
        _require(self.key, "Define key")

    def flags(self) -> List[str]:
        return [f"--define:{self.key}={self.value}"]


@dataclass(frozen=True)
class External(RunOption):
    """Exclude a module (or wildcard pattern) from the bundle."""

    pattern: str

    def __post_init__(self):
        _require(self.pattern, "External pattern")

    def flags(self) -> List[str]:
        return [f"--external:{self.pattern}"]


@dataclass(frozen=True)
class Format(RunOption):
    """Output format: iife, esm or cjs."""

    format: str

    def __post_init__(self):
        if self.format not in FORMATS:
            raise ValueError(f"Invalid format: {self.format} (expected one of {FORMATS})")

    def flags(self) -> List[str]:
        return [f"--format={self.format}"]


@dataclass(frozen=True)
class Loader(RunOption):
    """Use a specific loader for a file extension."""

    extension: str
    loader: str

    def __post_init__(self):
        _require(self.extension, "Loader extension")
        _require(self.loader, "Loader")

    def flags(self) -> List[str]:
        return [f"--loader:{self.extension}:{self.loader}"]


@dataclass(frozen=True)
class Minify(RunOption):
    """Minify the output."""

    def flags(self) -> List[str]:
        return ["--minify"]


@dataclass(frozen=True)
class Watch(RunOption):
    """Rebuild on file changes; forever keeps watching after stdin closes."""

    forever: bool = False

    def flags(self) -> List[str]:
        return ["--watch=forever" if self.forever else "--watch"]


@dataclass(frozen=True)
class Sourcemap(RunOption):
    """Emit a source map, optionally in a specific mode."""

    mode: Optional[str] = None

    def __post_init__(self):
        if self.mode is not None and self.mode not in SOURCEMAP_MODES:
            raise ValueError(
                f"Invalid sourcemap mode: {self.mode} (expected one of {SOURCEMAP_MODES})"
            )

    def flags(self) -> List[str]:
        if self.mode is None:
            return ["--sourcemap"]
        return [f"--sourcemap={self.mode}"]


@dataclass(frozen=True)
class Splitting(RunOption):
    """Enable code splitting (esm format only)."""

    def flags(self) -> List[str]:
        return ["--splitting"]


@dataclass(frozen=True)
class Target(RunOption):
    """Environment targets, e.g. ('es2020', 'chrome58')."""

    targets: Tuple[str, ...]

    def __post_init__(self):
        # Accept any sequence but store a tuple so the option stays hashable.
        # A lone string is one environment, not a sequence of characters.
        targets = (self.targets,) if isinstance(self.targets, str) else self.targets
        object.__setattr__(self, "targets", tuple(targets))
        if not self.targets:
            raise ValueError("Target requires at least one environment")
        for target in self.targets:
            _require(target, "Target")

    def flags(self) -> List[str]:
        return [f"--target={','.join(self.targets)}"]


@dataclass(frozen=True)
class Platform(RunOption):
    """Platform target: browser, node or neutral."""

    platform: str

    def __post_init__(self):
        if self.platform not in PLATFORMS:
            raise ValueError(
                f"Invalid platform: {self.platform} (expected one of {PLATFORMS})"
            )

    def flags(self) -> List[str]:
        return [f"--platform={self.platform}"]


@dataclass(frozen=True)
class Serve(RunOption):
    """Start a local HTTP server, optionally on a '[host:]port' spec."""

    spec: Optional[str] = None

    def flags(self) -> List[str]:
        if not self.spec:
            return ["--serve"]
        return [f"--serve={self.spec}"]


@dataclass(frozen=True)
class Packages(RunOption):
    """How to treat package imports, e.g. 'external'."""

    value: str

    def __post_init__(self):
        _require(self.value, "Packages value")

    def flags(self) -> List[str]:
        return [f"--packages={self.value}"]


@dataclass(frozen=True)
class Arguments(RunOption):
    """Raw arguments passed to esbuild as-is."""

    values: Tuple[str, ...]

    def __post_init__(self):
        values = (self.values,) if isinstance(self.values, str) else self.values
        object.__setattr__(self, "values", tuple(str(v) for v in values))
        if not self.values:
            raise ValueError("Arguments requires at least one value")

    def flags(self) -> List[str]:
        return list(self.values)


def options_to_arguments(options: Iterable[RunOption]) -> List[str]:
    """
    Flatten options into esbuild arguments, preserving their order.

    Args:
        options: Run options

    Returns:
        Concatenated flags of every option
    """
    arguments: List[str] = []
    for option in options:
        arguments.extend(option.flags())
    return arguments


def target(*environments: str) -> Target:
    """Inline form of Target, e.g. target('es2020', 'chrome58')."""
    return Target(environments)


def arguments(*values: str) -> Arguments:
    """Inline form of Arguments, e.g. arguments('--log-level=warning')."""
    return Arguments(values)


__all__ = [
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
    "target",
    "arguments",
    "FORMATS",
    "PLATFORMS",
    "SOURCEMAP_MODES",
]
