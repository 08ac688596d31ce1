"""
Unit tests for platform detection.

Tests cover:
- Architecture parsing and aliases
- Registry tokens used in package names
- OS detection
- uname-based architecture detection and its failure modes
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from esbuildkit.core.platform import (
    Architecture,
    UnameArchitectureDetector,
    detect_os,
)


class TestArchitecture:
    """Tests for the Architecture enum."""

    @pytest.mark.parametrize(
        "machine,expected",
        [
            ("x86_64", Architecture.X86_64),
            ("amd64", Architecture.X86_64),
            ("arm64", Architecture.ARM64),
            ("aarch64", Architecture.ARM64),
            ("armv7l", Architecture.ARMV7),
            ("i686", Architecture.IA32),
            ("ppc64le", Architecture.PPC64),
            ("riscv64", Architecture.RISCV64),
            ("s390x", Architecture.S390X),
            ("loong64", Architecture.LOONG64),
            ("mips64el", Architecture.MIPS64EL),
        ],
    )
    def test_parse_known_machines(self, machine, expected):
        """Test machine strings and aliases map to architectures."""
        assert Architecture.parse(machine) is expected

    def test_parse_normalizes_case_and_whitespace(self):
        """Test uname output with trailing newline and odd case parses."""
        assert Architecture.parse(" X86_64\n") is Architecture.X86_64

    def test_parse_unknown_returns_none(self):
        """Test an unrecognized machine yields None instead of raising."""
        assert Architecture.parse("sparc64") is None
        assert Architecture.parse("") is None

    def test_x86_64_uses_x64_token(self):
        """Test x86_64 maps to esbuild's x64 package suffix."""
        assert Architecture.X86_64.registry_token == "x64"
        assert Architecture.X64.registry_token == "x64"

    @pytest.mark.parametrize(
        "arch",
        [
            Architecture.ARM,
            Architecture.ARM64,
            Architecture.ARMV7,
            Architecture.IA32,
            Architecture.PPC64,
            Architecture.RISCV64,
            Architecture.S390X,
        ],
    )
    def test_token_equals_value(self, arch):
        """Test most architectures use their own name as token."""
        assert arch.registry_token == arch.value

    def test_unpublished_architectures_have_empty_token(self):
        """Test loong64 and mips64el have no package token."""
        assert Architecture.LOONG64.registry_token == ""
        assert Architecture.MIPS64EL.registry_token == ""


class TestDetectOS:
    """Tests for detect_os()."""

    @pytest.mark.parametrize(
        "system,expected",
        [
            ("Windows", "windows"),
            ("Linux", "linux"),
            ("Darwin", "darwin"),
            ("FreeBSD", "darwin"),
        ],
    )
    def test_detect_os(self, system, expected):
        """Test platform.system() values map to package OS names."""
        with patch("esbuildkit.core.platform.platform.system", return_value=system):
            assert detect_os() == expected


class TestUnameArchitectureDetector:
    """Tests for UnameArchitectureDetector."""

    def _completed(self, stdout="", returncode=0):
        result = MagicMock()
        result.stdout = stdout
        result.returncode = returncode
        return result

    @patch("esbuildkit.core.platform.platform.system", return_value="Linux")
    def test_detect_from_uname(self, _system):
        """Test uname -m output is parsed."""
        with patch(
            "esbuildkit.core.platform.subprocess.run",
            return_value=self._completed("aarch64\n"),
        ) as run:
            assert UnameArchitectureDetector().detect() is Architecture.ARM64

        assert run.call_args[0][0] == ["uname", "-m"]

    @patch("esbuildkit.core.platform.platform.system", return_value="Linux")
    def test_unknown_machine_returns_none(self, _system):
        """Test an unknown machine string yields None."""
        with patch(
            "esbuildkit.core.platform.subprocess.run",
            return_value=self._completed("vax\n"),
        ):
            assert UnameArchitectureDetector().detect() is None

    @patch("esbuildkit.core.platform.platform.system", return_value="Linux")
    def test_nonzero_exit_returns_none(self, _system):
        """Test a failing uname yields None."""
        with patch(
            "esbuildkit.core.platform.subprocess.run",
            return_value=self._completed("", returncode=1),
        ):
            assert UnameArchitectureDetector().detect() is None

    @patch("esbuildkit.core.platform.platform.system", return_value="Linux")
    def test_missing_uname_returns_none(self, _system):
        """Test a missing uname binary yields None instead of raising."""
        with patch(
            "esbuildkit.core.platform.subprocess.run",
            side_effect=FileNotFoundError("uname"),
        ):
            assert UnameArchitectureDetector().detect() is None

    @patch("esbuildkit.core.platform.platform.system", return_value="Linux")
    def test_uname_timeout_returns_none(self, _system):
        """Test a hanging uname yields None."""
        with patch(
            "esbuildkit.core.platform.subprocess.run",
            side_effect=subprocess.TimeoutExpired(["uname", "-m"], 5),
        ):
            assert UnameArchitectureDetector().detect() is None

    def test_windows_uses_platform_machine(self):
        """Test Windows reads platform.machine() instead of running uname."""
        with patch(
            "esbuildkit.core.platform.platform.system", return_value="Windows"
        ), patch(
            "esbuildkit.core.platform.platform.machine", return_value="AMD64"
        ), patch("esbuildkit.core.platform.subprocess.run") as run:
            assert UnameArchitectureDetector().detect() is Architecture.X86_64

        run.assert_not_called()
