"""
Test doubles for esbuildkit components.

This package provides stand-ins for the architecture detector, extractor,
downloader and executor capabilities, plus builders for registry payloads
and npm-style tarballs.
"""

from .esbuild import (
    FakeArchitectureDetector,
    RecordingExtractor,
    EmptyExtractor,
    FailingExtractor,
    FakeDownloader,
    RecordingExecutor,
    build_esbuild_tarball,
    registry_payload,
    tarball_url,
)

__all__ = [
    "FakeArchitectureDetector",
    "RecordingExtractor",
    "EmptyExtractor",
    "FailingExtractor",
    "FakeDownloader",
    "RecordingExecutor",
    "build_esbuild_tarball",
    "registry_payload",
    "tarball_url",
]
