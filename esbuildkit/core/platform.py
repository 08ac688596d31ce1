"""
Platform detection for esbuildkit.

esbuild publishes one npm package per OS and CPU architecture
(e.g. '@esbuild/darwin-arm64'). This module detects both and maps them to
the names used by the registry.

Usage:
    from esbuildkit.core.platform import UnameArchitectureDetector, detect_os

    arch = UnameArchitectureDetector().detect()
    if arch is not None:
        print(f"{detect_os()}-{arch.registry_token}")
"""

import logging
import platform
import subprocess
from enum import Enum
from typing import Optional

from esbuildkit.core.interfaces import ArchitectureDetector

logger = logging.getLogger(__name__)


class Architecture(str, Enum):
    """
    CPU architectures esbuildkit knows about.

    Values are the identifiers reported by `uname -m` (or their esbuild
    equivalents). Use Architecture.parse() to also accept common aliases.
    """

    ARM = "arm"
    ARM64 = "arm64"
    ARMV7 = "armv7"
    X64 = "x64"
    X86_64 = "x86_64"
    IA32 = "ia32"
    LOONG64 = "loong64"
    MIPS64EL = "mips64el"
    PPC64 = "ppc64"
    RISCV64 = "riscv64"
    S390X = "s390x"

    @property
    def registry_token(self) -> str:
        """
        Architecture name used in esbuild's npm package names.

        An empty string means there is no package for this architecture.

        Example:
            >>> Architecture.X86_64.registry_token
            'x64'
        """
        return _REGISTRY_TOKENS[self]

    @classmethod
    def parse(cls, value: str) -> Optional["Architecture"]:
        """
        Parse a machine identifier into an Architecture.

        Args:
            value: Machine string, e.g. 'x86_64', 'aarch64', 'arm64'

        Returns:
            Matching Architecture, or None if unrecognized
        """
        machine = value.strip().lower()
        machine = _ALIASES.get(machine, machine)
        try:
            return cls(machine)
        except ValueError:
            return None


_REGISTRY_TOKENS = {
    Architecture.ARM: "arm",
    Architecture.ARM64: "arm64",
    Architecture.ARMV7: "armv7",
    Architecture.X64: "x64",
    Architecture.X86_64: "x64",
    Architecture.IA32: "ia32",
    # No published package for these two; resolution fails on them.
    Architecture.LOONG64: "",
    Architecture.MIPS64EL: "",
    Architecture.PPC64: "ppc64",
    Architecture.RISCV64: "riscv64",
    Architecture.S390X: "s390x",
}

_ALIASES = {
    "aarch64": "arm64",
    "amd64": "x86_64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "armv7l": "armv7",
    "ppc64le": "ppc64",
}


def detect_os() -> str:
    """
    Detect the operating system as named in esbuild's npm packages.

    Returns:
        'windows', 'linux' or 'darwin'
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    else:
        return "darwin"


class UnameArchitectureDetector(ArchitectureDetector):
    """
    Detects the architecture by running `uname -m`.

    Falls back to platform.machine() where uname isn't available (Windows).
    Never raises: an unknown machine string or a failing command yields None.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def detect(self) -> Optional[Architecture]:
        machine = self._machine()
        if not machine:
            return None

        arch = Architecture.parse(machine)
        if arch is None:
            self.logger.debug(f"Unrecognized machine architecture: {machine}")
        return arch

    def _machine(self) -> str:
        if platform.system().lower() == "windows":
            return platform.machine()

        try:
            result = subprocess.run(
                ["uname", "-m"], capture_output=True, text=True, timeout=5
            )
        except (OSError, subprocess.SubprocessError) as e:
            self.logger.debug(f"Could not run uname: {e}")
            return ""

        if result.returncode != 0:
            self.logger.debug(f"uname exited with status {result.returncode}")
            return ""

        return result.stdout.strip()


__all__ = [
    "Architecture",
    "UnameArchitectureDetector",
    "detect_os",
]
