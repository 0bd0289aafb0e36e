"""
This module provides utility functions related to FFmpeg and ffprobe.
It locates the executables, verifies that they can run, builds the conversion
command for a job and formats command lines for logging.
"""

import os
import shlex
import subprocess
import sys
from typing import List, Optional, Sequence

from loguru import logger

from ..config.codecs import CODEC_EXTRA_ARGS, COMMON_OUTPUT_ARGS
from ..config.common import FFMPEG_EXECUTABLE, FFPROBE_EXECUTABLE, MODULE_PATH
from ..domain.models import Job


def format_cmd(cmd_list: Sequence[str]) -> str:
    """Returns a display-friendly, correctly quoted version of a command list."""
    cmd_list = [str(part) for part in cmd_list]
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def get_executable_path(name: str) -> str:
    """
    Determines the executable to use for an external tool.

    It prioritizes the directory from the user configuration (`ffmpeg_dir`).
    If that is not set or the executable is missing there, it falls back to the
    bare name, which relies on the system's PATH. Handles the '.exe' suffix on
    Windows.

    Args:
        name: The tool name, e.g. "ffmpeg" or "ffprobe".

    Returns:
        The absolute path to the executable, or its bare name.
    """
    exe_name = f"{name}.exe" if sys.platform == "win32" else name

    if MODULE_PATH and MODULE_PATH.is_dir():
        configured_path = MODULE_PATH / exe_name
        if configured_path.is_file():
            return str(configured_path)
        logger.warning(f"`ffmpeg_dir` is configured, but '{exe_name}' was not found there. Falling back to system PATH.")

    return name


def get_ffmpeg_path() -> str:
    return get_executable_path(FFMPEG_EXECUTABLE)


def get_ffprobe_path() -> str:
    return get_executable_path(FFPROBE_EXECUTABLE)


def verify_tool(executable: str) -> bool:
    """
    Verifies that a tool is installed, accessible and can be executed.

    Runs `<executable> -version` and logs the first line of the output on
    success, or a detailed error message otherwise.

    Returns:
        True if the version check succeeded.
    """
    try:
        result = subprocess.run(
            [executable, "-version"],
            check=True,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.CalledProcessError as e:
        logger.error(f"{executable} version command failed (return code {e.returncode}):\n{e.stderr}")
        return False
    except OSError:
        logger.error(
            f"{executable} command not found. Please ensure FFmpeg is installed and accessible.\n"
            "You can either add it to your system's PATH or specify its location in the 'config.user.yaml' file."
        )
        return False

    version_output_lines = result.stdout.splitlines()
    logger.info(f"{executable} version check successful: {version_output_lines[0] if version_output_lines else ''}")
    return True


def verify_tools() -> bool:
    """Checks both FFmpeg and ffprobe. Returns True if both are usable."""
    ffmpeg_ok = verify_tool(get_ffmpeg_path())
    ffprobe_ok = verify_tool(get_ffprobe_path())
    return ffmpeg_ok and ffprobe_ok


def build_ffmpeg_command(job: Job, codec: Optional[str], ffmpeg_path: Optional[str] = None) -> List[str]:
    """
    Builds the FFmpeg command list that converts `job` and reports progress on stdout.

    Args:
        job: The job to convert.
        codec: The video codec, or None to let FFmpeg choose from the output extension.
        ffmpeg_path: The FFmpeg executable. Defaults to the configured one.
    """
    cmd_list = [
        ffmpeg_path or get_ffmpeg_path(),
        # Emit key=value progress blocks to stdout, and keep the stats line off stderr.
        "-progress", "pipe:1",
        "-nostats",
        # Overwrite the output file.
        "-y",
        "-i", str(job.input_path),
    ]
    if codec:
        cmd_list.extend(["-c:v", codec])
        cmd_list.extend(CODEC_EXTRA_ARGS.get(codec, ()))
    cmd_list.extend(COMMON_OUTPUT_ARGS)
    cmd_list.append(str(job.output_path))
    return cmd_list
