"""
Main interface to lazily download and run esbuild from Python.

Usage:
    from esbuildkit import ESBuild, ESBuildVersion
    from esbuildkit.esbuild.options import Bundle, Outfile

    esbuild = ESBuild(version=ESBuildVersion.fixed("0.19.11"))
    esbuild.run_with(Path("src/app.js"), Bundle(), Outfile("dist/app.js"))
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Union

from esbuildkit.core.interfaces import BinaryDownloader, ProcessExecutor
from esbuildkit.esbuild.downloader import Downloader
from esbuildkit.esbuild.executor import Executor
from esbuildkit.esbuild.options import RunOption, options_to_arguments
from esbuildkit.esbuild.versions import ESBuildVersion

if TYPE_CHECKING:
    from esbuildkit.config.parser import ESBuildKitConfig


class ESBuild:
    """
    Downloads esbuild on first use and runs it with typed options.

    Attributes:
        version: esbuild version to use
        directory: Cache root the executable is downloaded into
    """

    def __init__(
        self,
        version: Optional[ESBuildVersion] = None,
        directory: Optional[Union[str, Path]] = None,
        downloader: Optional[BinaryDownloader] = None,
        executor: Optional[ProcessExecutor] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the wrapper.

        Args:
            version: Fixed version or latest (default: latest)
            directory: Cache root (default: <temp dir>/esbuildkit)
            downloader: Provisioning capability (default: Downloader)
            executor: Process capability (default: Executor)
            logger: Logger handed to the default downloader and executor
        """
        self.logger = logger or logging.getLogger(__name__)
        self.version = version or ESBuildVersion.latest()
        self.directory = (
            Path(directory) if directory else Downloader.default_download_directory()
        )
        self.downloader = downloader or Downloader(logger=self.logger)
        self.executor = executor or Executor(logger=self.logger)

    @classmethod
    def from_config(
        cls, config: "ESBuildKitConfig", logger: Optional[logging.Logger] = None
    ) -> "ESBuild":
        """
        Build a wrapper from parsed configuration.

        Args:
            config: Parsed esbuildkit.yaml
            logger: Logger for all components
        """
        from esbuildkit.esbuild.registry import NpmRegistryClient

        logger = logger or logging.getLogger(__name__)
        registry = NpmRegistryClient(
            registry_url=config.registry.url,
            timeout=config.registry.timeout,
            max_body_bytes=config.registry.max_metadata_bytes,
            logger=logger,
        )
        downloader = Downloader(
            registry=registry,
            verify_checksum=config.download.verify_checksum,
            lock_timeout=config.download.lock_timeout,
            download_timeout=config.registry.timeout,
            logger=logger,
        )
        return cls(
            version=ESBuildVersion.parse(config.esbuild.version),
            directory=config.esbuild.cache_dir,
            downloader=downloader,
            logger=logger,
        )

    def download(self) -> Path:
        """Download the executable if it isn't cached and return its path."""
        return self.downloader.download(self.version, self.directory)

    def arguments(self, entry_point: Union[str, Path], options: Iterable[RunOption]) -> List[str]:
        """Arguments esbuild is invoked with: the entry point, then option flags."""
        return [str(entry_point)] + options_to_arguments(options)

    def run(
        self,
        entry_point: Union[str, Path],
        options: Iterable[RunOption] = (),
        directory: Optional[Union[str, Path]] = None,
    ) -> None:
        """
        Download esbuild if needed and run it on an entry point.

        Args:
            entry_point: Entry module esbuild starts traversing the module graph from
            options: Options passed to esbuild, in order
            directory: Working directory (default: the entry point's directory)

        Raises:
            ESBuildKitError: Whatever the download or execution raises
        """
        entry_point = Path(entry_point)
        working_dir = Path(directory) if directory else entry_point.parent
        executable_path = self.download()
        self.executor.run(executable_path, working_dir, self.arguments(entry_point, options))

    def run_with(
        self,
        entry_point: Union[str, Path],
        *options: RunOption,
        directory: Optional[Union[str, Path]] = None,
    ) -> None:
        """
        Inline form of run().

        Example:
            >>> esbuild.run_with("a.js", Bundle(), Outfile("out.js"))
        """
        self.run(entry_point, options, directory=directory)


__all__ = [
    "ESBuild",
]
