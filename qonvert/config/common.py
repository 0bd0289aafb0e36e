"""
Common configuration settings used throughout the application.

This module contains globally shared configuration settings and constants that are
used across the whole of qonvert. It centralizes parameters for logging, the
location of the external tools, and the progress protocol. It also handles the
loading of user-specific configuration from an external YAML file, allowing the
location of FFmpeg to be customized without modifying the source code.
"""
import os
from pathlib import Path

import yaml
from loguru import logger

# --- User-Defined Path Configuration ---
# This block loads user-specific paths from a 'config.user.yaml' file located
# at the project root, or from the file named by the QONVERT_CONFIG environment
# variable. This allows users to specify the location of FFmpeg and ffprobe
# without hardcoding paths.

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = Path(os.environ.get("QONVERT_CONFIG", PROJECT_ROOT / "config.user.yaml"))

# The directory containing the FFmpeg and ffprobe executables. This is loaded from
# the user config. If not provided or None, the executables are looked up on the
# system's PATH.
MODULE_PATH: Path | None = None

if USER_CONFIG_PATH.is_file():
    try:
        with USER_CONFIG_PATH.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
        if user_config and "paths" in user_config:
            paths_config = user_config.get("paths") or {}
            ffmpeg_dir_str = paths_config.get("ffmpeg_dir")
            if ffmpeg_dir_str:
                MODULE_PATH = Path(ffmpeg_dir_str)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{USER_CONFIG_PATH}': {e}")
else:
    logger.debug(f"User config '{USER_CONFIG_PATH}' not found. Relying on system PATH for executables.")


# --- Logging Configuration ---

# The format string for the Loguru logger. It includes the thread name, since
# every conversion runs on its own worker thread.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{thread.name} - <level>{message}</level>"
)

# The length of the random string appended to dated success log files, so two
# runs on the same day never write to the same file.
SUCCESS_LOG_RANDOM_LENGTH = 10

# The filename of the YAML file that aggregates the success logs of every run.
COMPLETED_LOG_FILE_NAME = "combined_log.yaml"

# Default filename of the plain text error log.
ERROR_LOG_FILE_NAME = "error.txt"


# --- External Tools ---

FFMPEG_EXECUTABLE = "ffmpeg"
FFPROBE_EXECUTABLE = "ffprobe"

# Size of each read from the diagnostic (stderr) pipe.
STDERR_READ_CHUNK_SIZE = 4096


# --- Progress Protocol ---
# Keys of the `-progress` key=value stream that a snapshot is built from.

PROGRESS_FRAME_KEY = "frame"
PROGRESS_STATE_KEY = "progress"
