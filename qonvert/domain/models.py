"""
Defines the value objects passed between the parser, the supervisor and the pipeline.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from ..config.common import PROGRESS_FRAME_KEY, PROGRESS_STATE_KEY
from .exceptions import (
    MalformedProgressValueException,
    MissingProgressKeyException,
    ProcessFailedException,
    QonvertException,
)


@dataclass(frozen=True)
class Job:
    """A single source-to-destination conversion."""

    input_path: Path
    output_path: Path
    codec: Optional[str] = None


class ProgressPhase(Enum):
    CONTINUE = "continue"
    END = "end"


@dataclass(frozen=True)
class Progress:
    """
    One snapshot decoded from FFmpeg's `-progress` stream.

    Attributes:
        frame (int): The number of frames encoded so far.
        phase (ProgressPhase): `CONTINUE` while encoding, `END` for the last snapshot.
    """

    frame: int
    phase: ProgressPhase

    @property
    def is_end(self) -> bool:
        return self.phase is ProgressPhase.END

    @classmethod
    def from_parsed_progress(cls, parsed_progress: Mapping[str, str]) -> "Progress":
        """
        Builds a snapshot from one accumulated cycle of key=value pairs.

        Raises:
            MissingProgressKeyException: If `frame` or `progress` is absent.
            MalformedProgressValueException: If `frame` is not a non-negative
                integer or `progress` is neither `continue` nor `end`.
        """
        for key in (PROGRESS_FRAME_KEY, PROGRESS_STATE_KEY):
            if key not in parsed_progress:
                raise MissingProgressKeyException(key)

        frame_str = parsed_progress[PROGRESS_FRAME_KEY]
        if not (frame_str.isascii() and frame_str.isdigit()):
            raise MalformedProgressValueException(PROGRESS_FRAME_KEY, frame_str)

        state_str = parsed_progress[PROGRESS_STATE_KEY]
        try:
            phase = ProgressPhase(state_str)
        except ValueError:
            raise MalformedProgressValueException(PROGRESS_STATE_KEY, state_str) from None

        return cls(frame=int(frame_str), phase=phase)


@dataclass(frozen=True)
class ProcessOutcome:
    """The exit status and captured stderr of one supervised process."""

    returncode: int
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def raise_for_status(self):
        """Raises `ProcessFailedException` if the process did not succeed."""
        if not self.success:
            raise ProcessFailedException(self.returncode, self.stderr)


@dataclass
class JobOutcome:
    """
    Pairs a job with the terminal result of running it.

    `error` is None on success. On failure it holds the job-scoped exception that
    stopped the job: a resolution error, a protocol error, or a process error.
    """

    job: Job
    error: Optional[QonvertException] = None
    frame_count: Optional[int] = None
    elapsed: timedelta = field(default_factory=timedelta)

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def diagnostics(self) -> str:
        if self.error is None:
            return ""
        if isinstance(self.error, ProcessFailedException):
            return self.error.stderr
        return str(self.error)


@dataclass(frozen=True)
class CodecPolicy:
    """
    Chooses the video codec for each job.

    Precedence: the job's own codec, then the explicit override, then the default
    for the output file extension. `None` leaves the choice to FFmpeg.
    """

    override: Optional[str] = None
    defaults: Mapping[str, str] = field(default_factory=dict)

    def codec_for_extension(self, extension: str) -> Optional[str]:
        if self.override:
            return self.override
        return self.defaults.get(extension.lstrip(".").lower())

    def codec_for(self, job: Job) -> Optional[str]:
        if job.codec:
            return job.codec
        return self.codec_for_extension(job.output_path.suffix)
