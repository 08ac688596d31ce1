"""
npm registry client for esbuild's platform packages.

esbuild publishes one package per OS and architecture, e.g.
https://registry.npmjs.org/@esbuild/darwin-arm64. The package metadata lists
every published version with the URL of its tarball:

    {
      "name": "@esbuild/darwin-arm64",
      "dist-tags": {"latest": "0.19.11"},
      "versions": {
        "0.19.11": {"dist": {"tarball": "...", "shasum": "...", "integrity": "..."}}
      }
    }
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException

from esbuildkit.core.exceptions import (
    MetadataParseError,
    RegistryRequestError,
)

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
PACKAGE_SCOPE = "@esbuild"
USER_AGENT = "esbuildkit"
DEFAULT_TIMEOUT = 30
MAX_METADATA_BYTES = 1024 * 1024


@dataclass(frozen=True)
class DistInfo:
    """Download descriptor of one published version."""

    tarball: str
    shasum: str = ""
    integrity: str = ""


@dataclass
class PackageMetadata:
    """Registry metadata of one esbuild platform package."""

    name: str
    latest: str
    versions: Dict[str, DistInfo] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, package_name: str = "") -> "PackageMetadata":
        """
        Build metadata from a decoded registry payload.

        Args:
            data: Decoded JSON payload
            package_name: Package name used in error messages

        Raises:
            MetadataParseError: If required fields are missing or mistyped
        """
        label = package_name or "package"
        if not isinstance(data, dict):
            raise MetadataParseError(label, "payload is not a JSON object")

        name = data.get("name")
        if not isinstance(name, str):
            raise MetadataParseError(label, "missing 'name'")

        dist_tags = data.get("dist-tags")
        if not isinstance(dist_tags, dict) or not isinstance(
            dist_tags.get("latest"), str
        ):
            raise MetadataParseError(label, "missing 'dist-tags.latest'")

        raw_versions = data.get("versions")
        if not isinstance(raw_versions, dict):
            raise MetadataParseError(label, "missing 'versions'")

        versions = {}
        for version, entry in raw_versions.items():
            dist = entry.get("dist") if isinstance(entry, dict) else None
            if not isinstance(dist, dict) or not isinstance(dist.get("tarball"), str):
                raise MetadataParseError(label, f"version {version} has no 'dist.tarball'")
            versions[version] = DistInfo(
                tarball=dist["tarball"],
                shasum=dist.get("shasum") or "",
                integrity=dist.get("integrity") or "",
            )

        return cls(name=name, latest=dist_tags["latest"], versions=versions)

    def dist(self, version: str) -> Optional[DistInfo]:
        """Get the download descriptor of a version, or None."""
        return self.versions.get(version)


def package_name_for(os_name: str, arch_token: str) -> str:
    """
    Build the platform package name.

    Example:
        >>> package_name_for("darwin", "arm64")
        '@esbuild/darwin-arm64'
    """
    return f"{PACKAGE_SCOPE}/{os_name}-{arch_token}"


class NpmRegistryClient:
    """
    Fetches package metadata from an npm registry.

    Every fetch opens its own HTTP session and closes it on success and on
    failure. The response body is capped at max_body_bytes.
    """

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_body_bytes: int = MAX_METADATA_BYTES,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize registry client.

        Args:
            registry_url: Base URL of the registry
            timeout: Request timeout in seconds
            max_body_bytes: Largest accepted metadata response
            logger: Logger for request tracing
        """
        self.registry_url = registry_url.rstrip("/")
        self.timeout = timeout
        self.max_body_bytes = max_body_bytes
        self.logger = logger or logging.getLogger(__name__)

    def package_url(self, package_name: str) -> str:
        return f"{self.registry_url}/{package_name}"

    def fetch_metadata(self, package_name: str) -> PackageMetadata:
        """
        Fetch and parse the metadata of a package.

        Args:
            package_name: Scoped package name, e.g. '@esbuild/linux-x64'

        Returns:
            Parsed PackageMetadata

        Raises:
            RegistryRequestError: On timeout, connection failure, non-2xx
                status or an oversized body
            MetadataParseError: If the body isn't valid package metadata
        """
        url = self.package_url(package_name)
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        self.logger.debug(f"Getting the package metadata from {url}")

        try:
            with requests.Session() as session:
                with session.get(
                    url, headers=headers, timeout=self.timeout, stream=True
                ) as response:
                    response.raise_for_status()
                    body = self._read_body(url, response)
        except RequestException as e:
            raise RegistryRequestError(url, str(e)) from e

        try:
            data = json.loads(body)
        except ValueError as e:
            raise MetadataParseError(package_name, f"invalid JSON: {e}") from e

        return PackageMetadata.from_dict(data, package_name)

    def _read_body(self, url: str, response: requests.Response) -> bytes:
        """Read the response body, refusing anything over max_body_bytes."""
        chunks = []
        size = 0
        for chunk in response.iter_content(chunk_size=64 * 1024):
            size += len(chunk)
            if size > self.max_body_bytes:
                raise RegistryRequestError(
                    url, f"response body exceeds {self.max_body_bytes} bytes"
                )
            chunks.append(chunk)
        return b"".join(chunks)


__all__ = [
    "DEFAULT_REGISTRY_URL",
    "PACKAGE_SCOPE",
    "DistInfo",
    "PackageMetadata",
    "NpmRegistryClient",
    "package_name_for",
]
