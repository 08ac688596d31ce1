"""
esbuild version requests and their resolution against registry metadata.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from esbuildkit.core.exceptions import VersionNotFoundError

if TYPE_CHECKING:
    from esbuildkit.esbuild.registry import PackageMetadata

TAG_PREFIX = "v"
LATEST = "latest"


@dataclass(frozen=True)
class ESBuildVersion:
    """
    The esbuild version to use: either the latest release or a fixed one.

    Example:
        >>> ESBuildVersion.latest().is_latest
        True
        >>> ESBuildVersion.fixed("0.19.11").tag
        'v0.19.11'
    """

    value: Optional[str] = None

    @classmethod
    def latest(cls) -> "ESBuildVersion":
        return cls(None)

    @classmethod
    def fixed(cls, version: str) -> "ESBuildVersion":
        """
        Pin a specific version.

        Raises:
            ValueError: If version is empty
        """
        version = version.strip()
        if not version or version == TAG_PREFIX:
            raise ValueError("Fixed version cannot be empty")
        return cls(version)

    @classmethod
    def parse(cls, text: Optional[str]) -> "ESBuildVersion":
        """Parse 'latest' (or nothing) as Latest, anything else as Fixed."""
        if text is None or text.strip().lower() in ("", LATEST):
            return cls.latest()
        return cls.fixed(text)

    @property
    def is_latest(self) -> bool:
        return self.value is None

    @property
    def tag(self) -> Optional[str]:
        """The fixed version normalized with the 'v' prefix, None for Latest."""
        if self.value is None:
            return None
        if self.value.startswith(TAG_PREFIX):
            return self.value
        return f"{TAG_PREFIX}{self.value}"

    def candidates(self) -> List[str]:
        """
        Registry keys a fixed version may be published under, in lookup order.

        The 'v'-prefixed tag comes first, then the bare version. Latest has no
        candidates until metadata is available.
        """
        tag = self.tag
        if tag is None:
            return []
        return [tag, tag[len(TAG_PREFIX):]]

    def resolve(self, metadata: "PackageMetadata") -> str:
        """
        Resolve to the concrete version string used by the registry.

        Args:
            metadata: Package metadata fetched from the registry

        Returns:
            The dist-tags 'latest' value for Latest, otherwise the matching
            version key

        Raises:
            VersionNotFoundError: If a fixed version isn't in the metadata
        """
        if self.is_latest:
            return metadata.latest

        for candidate in self.candidates():
            if candidate in metadata.versions:
                return candidate

        raise VersionNotFoundError(self.tag, metadata.name)

    def __str__(self) -> str:
        return LATEST if self.value is None else self.value


__all__ = [
    "ESBuildVersion",
]
