"""
Integration tests against the real npm registry and esbuild binaries.

Run with: pytest --integration
"""

import logging

import pytest

from esbuildkit.core.exceptions import ProcessExitError, VersionNotFoundError
from esbuildkit.core.platform import UnameArchitectureDetector
from esbuildkit.esbuild.downloader import Downloader
from esbuildkit.esbuild.options import Bundle, Format, Outfile
from esbuildkit.esbuild.versions import ESBuildVersion
from esbuildkit.esbuild.wrapper import ESBuild

pytestmark = pytest.mark.integration

PINNED_VERSION = "0.19.11"


@pytest.fixture
def project(tmp_path):
    """Two-module project where a.js imports b.js."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.js").write_text('import { greet } from "./b.js";\ngreet();\n')
    (src / "b.js").write_text('export function greet() {\n  console.log("esbuild");\n}\n')
    return src


@pytest.fixture(scope="module")
def shared_cache(tmp_path_factory):
    return tmp_path_factory.mktemp("esbuild-cache")


class TestDownloaderIntegration:
    """Provisioning from registry.npmjs.org."""

    def test_download_pinned_version(self, shared_cache):
        path = Downloader().download(ESBuildVersion.fixed(PINNED_VERSION), shared_cache)

        assert path == shared_cache / PINNED_VERSION / "esbuild"
        assert path.is_file()

    def test_download_latest(self, tmp_path):
        path = Downloader(verify_checksum=True).download(ESBuildVersion.latest(), tmp_path)

        assert path.is_file()
        assert path.parent.parent == tmp_path

    def test_unknown_version(self, tmp_path):
        with pytest.raises(VersionNotFoundError):
            Downloader().download(ESBuildVersion.fixed("0.0.0-does-not-exist"), tmp_path)

    def test_host_architecture_detected(self):
        assert UnameArchitectureDetector().detect() is not None


class TestESBuildIntegration:
    """Bundling with a real esbuild."""

    def test_bundle(self, project, shared_cache, caplog):
        caplog.set_level(logging.INFO)
        esbuild = ESBuild(version=ESBuildVersion.fixed(PINNED_VERSION), directory=shared_cache)
        out = project.parent / "dist" / "out.js"

        esbuild.run_with(project / "a.js", Bundle(), Format("esm"), Outfile(str(out)))

        bundle = out.read_text()
        assert 'console.log("esbuild")' in bundle
        assert "import" not in bundle
        assert any(r.getMessage().startswith("ESBuild: ") for r in caplog.records)

    def test_failing_build(self, project, shared_cache):
        (project / "broken.js").write_text("import './missing.js';\n")
        esbuild = ESBuild(version=ESBuildVersion.fixed(PINNED_VERSION), directory=shared_cache)

        with pytest.raises(ProcessExitError):
            esbuild.run_with(project / "broken.js", Bundle())
