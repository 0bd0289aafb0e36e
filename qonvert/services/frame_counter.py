"""
Counts the frames of an input file with ffprobe.

The count is the total that the progress display measures a conversion against.
Packets of the first video stream are counted, which for video equals the number
of frames and does not require decoding.
"""

from pathlib import Path
from typing import Optional

import ffmpeg
from loguru import logger

from ..domain.exceptions import FrameCountException
from ..utils.ffmpeg_utils import get_ffprobe_path


def count_frames(path: Path, ffprobe_path: Optional[str] = None) -> int:
    """
    Returns the number of frames in the first video stream of `path`.

    Raises:
        FrameCountException: If ffprobe cannot run, fails, or reports no usable count.
    """
    path = Path(path)
    try:
        probe = ffmpeg.probe(
            str(path),
            cmd=ffprobe_path or get_ffprobe_path(),
            v="error",
            select_streams="v:0",
            count_packets=None,
        )
    except ffmpeg.Error as e:
        stderr = e.stderr.decode("utf-8", errors="replace").strip() if e.stderr else ""
        logger.error(f"ffprobe failed for {path}: {stderr}")
        raise FrameCountException(f"ffprobe failed for {path}: {stderr}") from e
    except OSError as e:
        logger.error(f"Could not run ffprobe for {path}: {e}")
        raise FrameCountException(f"Could not run ffprobe for {path}: {e}") from e
    except ValueError as e:
        raise FrameCountException(f"Could not parse ffprobe output for {path}: {e}") from e

    streams = probe.get("streams") or []
    if not streams:
        raise FrameCountException(f"No video stream found in {path}")

    count_str = str(streams[0].get("nb_read_packets", "")).strip()
    if not (count_str.isascii() and count_str.isdigit()):
        raise FrameCountException(f"Could not read frame count of {path}: {count_str!r}")

    frame_count = int(count_str)
    logger.debug(f"{path.name}: {frame_count} frames")
    return frame_count
