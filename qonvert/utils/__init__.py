"""
Utilities Package for qonvert.

This package contains helper modules that provide reusable functionality across
the application.

Modules:
    - ffmpeg_utils.py: Locates and verifies FFmpeg/ffprobe, builds conversion
      commands and formats command lines for logging.
    - format_utils.py: Contains helper functions for formatting elapsed times and
      frame positions into human-readable strings.
"""
