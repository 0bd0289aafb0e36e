"""
Runs one external conversion process to completion.

The child's stdout carries the progress protocol and its stderr carries free-form
diagnostics. Both pipes have a bounded OS buffer, so both must be drained at the
same time: stderr is read by a dedicated thread while the calling thread feeds
stdout through the progress parser. The exit status is only collected once both
streams have reached end-of-stream, so the captured diagnostics are complete when
a failure is reported.
"""

import subprocess
import threading
from typing import IO, List, Optional, Sequence

from loguru import logger

from ..config.common import STDERR_READ_CHUNK_SIZE
from ..domain.exceptions import ProtocolException, SpawnException
from ..domain.models import ProcessOutcome
from ..utils.ffmpeg_utils import format_cmd
from .progress_parser import ProgressCallback, parse_progress


def _trim_trailing_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


class ProcessSupervisor:
    """
    Supervises a single subprocess.

    Each instance is used for one run. `on_progress` is called on the thread that
    calls `run()`, once per snapshot, in the order the snapshots were emitted.
    """

    def __init__(self, cmd: Sequence[str], on_progress: ProgressCallback):
        self.cmd: List[str] = [str(part) for part in cmd]
        self.on_progress = on_progress
        self.snapshot_count = 0
        self._process: Optional[subprocess.Popen] = None
        self._stderr_chunks: List[str] = []
        self._lock = threading.Lock()
        self._terminated = False

    def _drain(self, stream: IO[str]):
        for chunk in iter(lambda: stream.read(STDERR_READ_CHUNK_SIZE), ""):
            self._stderr_chunks.append(chunk)

    def _spawn(self) -> subprocess.Popen:
        logger.debug(f"Executing command: {format_cmd(self.cmd)}")
        try:
            return subprocess.Popen(
                self.cmd,
                stdin=subprocess.DEVNULL,  # The child must never wait on input.
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error(f"Could not start '{self.cmd[0]}': {e}")
            raise SpawnException(f"Could not start '{self.cmd[0]}': {e}") from e

    def run(self) -> ProcessOutcome:
        """
        Spawns the process, streams its progress and waits for it to exit.

        Returns:
            A `ProcessOutcome` holding the exit status and the full stderr text
            with one trailing line break removed.

        Raises:
            SpawnException: If the process could not be created.
            ProtocolException: If the progress stream is malformed. The process
                is killed immediately in that case.
        """
        process = self._spawn()
        with self._lock:
            self._process = process
            if self._terminated:
                process.kill()

        with process:
            stderr_thread = threading.Thread(
                target=self._drain,
                args=(process.stderr,),
                name=f"{threading.current_thread().name}-stderr",
                daemon=True,
            )
            stderr_thread.start()
            try:
                self.snapshot_count = parse_progress(process.stdout, self.on_progress)
            except ProtocolException as e:
                logger.error(f"Malformed progress output from '{self.cmd[0]}', killing process: {e}")
                process.kill()
                raise
            except BaseException:
                # Nobody reads stdout any more, so the child could block forever.
                process.kill()
                raise
            finally:
                # Runs before Popen.__exit__ closes the pipes and waits.
                stderr_thread.join()

            returncode = process.wait()

        stderr_text = _trim_trailing_newline("".join(self._stderr_chunks))
        if returncode != 0:
            logger.debug(f"Command stderr (error, rc={returncode}): {stderr_text}")
        elif stderr_text:
            logger.trace(f"Command stderr (non-error, rc={returncode}): {stderr_text}")
        return ProcessOutcome(returncode=returncode, stderr=stderr_text)

    def terminate(self):
        """Kills the process if it is running, or prevents it from running if not started yet."""
        with self._lock:
            self._terminated = True
            if self._process is not None and self._process.poll() is None:
                logger.warning(f"Killing '{self.cmd[0]}' (pid {self._process.pid})")
                self._process.kill()


def run_process(cmd: Sequence[str], on_progress: ProgressCallback) -> ProcessOutcome:
    """Convenience wrapper around `ProcessSupervisor(cmd, on_progress).run()`."""
    return ProcessSupervisor(cmd, on_progress).run()
