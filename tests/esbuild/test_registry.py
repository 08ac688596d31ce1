"""
Unit tests for the npm registry client.

Tests cover:
- Package naming
- Metadata parsing and validation
- Request headers
- Error mapping (HTTP status, connection errors, oversized bodies, bad JSON)
"""

import json

import pytest
import responses
from requests.exceptions import ConnectTimeout

from esbuildkit.core.exceptions import MetadataParseError, RegistryRequestError
from esbuildkit.esbuild.registry import (
    DistInfo,
    NpmRegistryClient,
    PackageMetadata,
    package_name_for,
)
from tests.mocks.esbuild import PACKAGE_NAME, PACKAGE_URL


def test_package_name_for():
    """Test package names follow @esbuild/<os>-<arch>."""
    assert package_name_for("darwin", "arm64") == "@esbuild/darwin-arm64"
    assert package_name_for("linux", "x64") == "@esbuild/linux-x64"


class TestPackageMetadata:
    """Tests for PackageMetadata.from_dict()."""

    def test_parses_registry_payload(self, linux_x64_metadata):
        """Test name, latest tag and version dists are read."""
        metadata = PackageMetadata.from_dict(linux_x64_metadata, PACKAGE_NAME)

        assert metadata.name == PACKAGE_NAME
        assert metadata.latest == "0.19.11"
        assert set(metadata.versions) == {"0.19.10", "0.19.11"}
        assert metadata.dist("0.19.11").tarball.endswith("/linux-x64-0.19.11.tgz")

    def test_optional_digests(self):
        """Test shasum and integrity are carried when present."""
        data = {
            "name": PACKAGE_NAME,
            "dist-tags": {"latest": "1.0.0"},
            "versions": {
                "1.0.0": {
                    "dist": {
                        "tarball": "https://example.com/a.tgz",
                        "shasum": "abc",
                        "integrity": "sha512-xyz",
                    }
                }
            },
        }

        dist = PackageMetadata.from_dict(data).dist("1.0.0")

        assert dist == DistInfo("https://example.com/a.tgz", "abc", "sha512-xyz")

    def test_dist_of_unknown_version(self, linux_x64_metadata):
        assert PackageMetadata.from_dict(linux_x64_metadata).dist("9.9.9") is None

    @pytest.mark.parametrize(
        "data,reason",
        [
            ([], "not a JSON object"),
            ({"dist-tags": {"latest": "1"}, "versions": {}}, "missing 'name'"),
            ({"name": "x", "versions": {}}, "dist-tags.latest"),
            ({"name": "x", "dist-tags": {"latest": "1"}}, "missing 'versions'"),
            (
                {"name": "x", "dist-tags": {"latest": "1"}, "versions": {"1": {}}},
                "has no 'dist.tarball'",
            ),
        ],
    )
    def test_malformed_payloads(self, data, reason):
        """Test structurally invalid payloads raise MetadataParseError."""
        with pytest.raises(MetadataParseError, match=reason):
            PackageMetadata.from_dict(data, PACKAGE_NAME)


class TestNpmRegistryClient:
    """Tests for NpmRegistryClient.fetch_metadata()."""

    def test_package_url(self):
        client = NpmRegistryClient("https://registry.example.com/")

        assert client.package_url(PACKAGE_NAME) == "https://registry.example.com/@esbuild/linux-x64"

    @responses.activate
    def test_fetch_metadata(self, linux_x64_metadata):
        """Test metadata is fetched and parsed."""
        responses.add(responses.GET, PACKAGE_URL, json=linux_x64_metadata, status=200)

        metadata = NpmRegistryClient().fetch_metadata(PACKAGE_NAME)

        assert metadata.latest == "0.19.11"
        assert len(responses.calls) == 1

    @responses.activate
    def test_request_headers(self, linux_x64_metadata):
        """Test the request identifies itself and asks for JSON."""
        responses.add(responses.GET, PACKAGE_URL, json=linux_x64_metadata, status=200)

        NpmRegistryClient().fetch_metadata(PACKAGE_NAME)

        request = responses.calls[0].request
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["User-Agent"] == "esbuildkit"

    @responses.activate
    def test_http_error(self):
        """Test a non-2xx status raises RegistryRequestError."""
        responses.add(responses.GET, PACKAGE_URL, json={"error": "Not found"}, status=404)

        with pytest.raises(RegistryRequestError) as exc_info:
            NpmRegistryClient().fetch_metadata(PACKAGE_NAME)

        assert exc_info.value.url == PACKAGE_URL
        assert "404" in exc_info.value.reason

    @responses.activate
    def test_timeout(self):
        """Test a timeout raises RegistryRequestError."""
        responses.add(responses.GET, PACKAGE_URL, body=ConnectTimeout("timed out"))

        with pytest.raises(RegistryRequestError, match="timed out"):
            NpmRegistryClient(timeout=1).fetch_metadata(PACKAGE_NAME)

    @responses.activate
    def test_oversized_body(self, linux_x64_metadata):
        """Test bodies over the cap are refused."""
        responses.add(responses.GET, PACKAGE_URL, json=linux_x64_metadata, status=200)

        with pytest.raises(RegistryRequestError, match="exceeds 64 bytes"):
            NpmRegistryClient(max_body_bytes=64).fetch_metadata(PACKAGE_NAME)

    @responses.activate
    def test_body_at_cap_is_accepted(self, linux_x64_metadata):
        """Test a body exactly at the cap is accepted."""
        body = json.dumps(linux_x64_metadata).encode()
        responses.add(responses.GET, PACKAGE_URL, body=body, status=200)

        metadata = NpmRegistryClient(max_body_bytes=len(body)).fetch_metadata(PACKAGE_NAME)

        assert metadata.name == PACKAGE_NAME

    @responses.activate
    def test_invalid_json(self):
        """Test a non-JSON body raises MetadataParseError."""
        responses.add(responses.GET, PACKAGE_URL, body=b"<html>oops</html>", status=200)

        with pytest.raises(MetadataParseError, match="invalid JSON"):
            NpmRegistryClient().fetch_metadata(PACKAGE_NAME)

    @responses.activate
    def test_custom_registry(self, linux_x64_metadata):
        """Test a mirror registry URL is used."""
        url = "https://npm.mirror.example/@esbuild/linux-x64"
        responses.add(responses.GET, url, json=linux_x64_metadata, status=200)

        NpmRegistryClient("https://npm.mirror.example").fetch_metadata(PACKAGE_NAME)

        assert responses.calls[0].request.url == url
