"""
Decodes FFmpeg's `-progress` output into `Progress` snapshots.

FFmpeg writes blocks of `key=value` lines and closes every block with a
`progress=continue` or `progress=end` line. The parser accumulates the pairs of
one block, builds a snapshot when the `progress` key arrives, hands it to the
caller and starts over with an empty buffer.
"""

from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple

from loguru import logger

from ..config.common import PROGRESS_STATE_KEY
from ..domain.exceptions import ProgressOrderException
from ..domain.models import Progress

ProgressCallback = Callable[[Progress], None]


def parse_key_value_pair(line: str) -> Optional[Tuple[str, str]]:
    """
    Splits a `key=value` line on its first `=`, trimming both sides.

    Returns None for blank lines and lines without an `=`.
    """
    key, sep, value = line.partition("=")
    if not sep:
        return None
    key = key.strip()
    if not key:
        return None
    return key, value.strip()


def iter_progress(lines: Iterable[str]) -> Iterator[Progress]:
    """
    Lazily yields one `Progress` per `progress` key found in `lines`.

    An incomplete block at the end of the stream is discarded.

    Raises:
        ProtocolException: If a block is missing a required key, holds a
            value that cannot be parsed, or breaks the snapshot order (a
            decreasing frame count or anything after `end`). Parsing stops at
            the first error.
    """
    parsed_progress: Dict[str, str] = {}
    previous: Optional[Progress] = None
    for line in lines:
        pair = parse_key_value_pair(line)
        if pair is None:
            continue
        key, value = pair
        parsed_progress[key] = value

        if key == PROGRESS_STATE_KEY:
            progress = Progress.from_parsed_progress(parsed_progress)
            parsed_progress.clear()
            if previous is not None:
                if previous.is_end:
                    raise ProgressOrderException(f"Progress snapshot (frame {progress.frame}) after the end snapshot")
                if progress.frame < previous.frame:
                    raise ProgressOrderException(f"Frame count went backwards from {previous.frame} to {progress.frame}")
            previous = progress
            yield progress

    if parsed_progress:
        logger.trace(f"Discarding incomplete progress block: {parsed_progress}")


def parse_progress(lines: Iterable[str], on_progress: ProgressCallback) -> int:
    """
    Feeds every snapshot decoded from `lines` to `on_progress`.

    The callback runs before the next line is read, so snapshots arrive in the
    order FFmpeg wrote them and none is held in memory.

    Returns:
        The number of snapshots delivered.
    """
    count = 0
    for progress in iter_progress(lines):
        on_progress(progress)
        count += 1
    return count
