"""
Process runner for the esbuild executable.

Standard output and standard error are streamed line by line to the logger
while the process runs. Both go out at INFO: esbuild writes warnings and
build summaries to stderr, which are not failures.
"""

import logging
import queue
import subprocess
import threading
from pathlib import Path
from typing import IO, List, Optional

from esbuildkit.core.exceptions import ProcessExitError, ProcessLaunchError
from esbuildkit.core.interfaces import ProcessExecutor

# How long the caller's thread blocks on the output queue before checking
# again; keeps it responsive to KeyboardInterrupt.
POLL_INTERVAL = 0.1


class Executor(ProcessExecutor):
    """
    Runs esbuild as a child process and streams its output to a logger.

    Reader threads drain stdout and stderr so neither pipe fills up, and the
    caller's thread only waits on a queue. If the caller is interrupted the
    child is terminated (killed after terminate_timeout) and the exception
    propagates.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        terminate_timeout: float = 5.0,
    ):
        """
        Initialize executor.

        Args:
            logger: Sink for esbuild's output (default: module logger)
            terminate_timeout: Seconds to wait after SIGTERM before killing
        """
        self.logger = logger or logging.getLogger(__name__)
        self.terminate_timeout = terminate_timeout

    def run(self, executable_path: Path, directory: Path, arguments: List[str]) -> None:
        command = [str(executable_path)] + [str(arg) for arg in arguments]
        self.logger.info(f"ESBuild: {' '.join(command)}")

        try:
            proc = subprocess.Popen(
                command,
                cwd=str(directory),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ProcessLaunchError(command, str(e)) from e

        with proc:
            try:
                self._stream_output(proc)
                returncode = proc.wait()
            except BaseException:
                self._terminate(proc)
                raise

        if returncode != 0:
            raise ProcessExitError(command, returncode)

    def _stream_output(self, proc: subprocess.Popen) -> None:
        """Log stdout and stderr lines as they arrive until both streams close."""
        output_queue: "queue.Queue[Optional[str]]" = queue.Queue()

        readers = [
            threading.Thread(
                target=_read_lines, args=(stream, output_queue), daemon=True
            )
            for stream in (proc.stdout, proc.stderr)
        ]
        for reader in readers:
            reader.start()

        streams_closed = 0
        while streams_closed < len(readers):
            try:
                line = output_queue.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                continue
            if line is None:
                streams_closed += 1
            elif line:
                self.logger.info(line)

        for reader in readers:
            reader.join(timeout=1)

    def _terminate(self, proc: subprocess.Popen) -> None:
        if proc.poll() is not None:
            return

        self.logger.debug(f"Terminating esbuild (pid {proc.pid})")
        proc.terminate()
        try:
            proc.wait(timeout=self.terminate_timeout)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()


def _read_lines(stream: IO[str], output_queue: "queue.Queue[Optional[str]]") -> None:
    """Push each line of stream onto the queue, then None once it closes."""
    try:
        for line in stream:
            output_queue.put(line.rstrip("\r\n"))
    finally:
        output_queue.put(None)


__all__ = [
    "Executor",
]
