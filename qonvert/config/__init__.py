"""
Configuration Package for qonvert.

This package centralizes the static configuration settings for the application.
By separating configuration from the application logic, it becomes easier to manage
and modify parameters without changing the core code.

This package includes settings for:
- Common application settings like the logging format and log file names.
- User-overridable paths for external tools like FFmpeg and ffprobe.
- Codec policy data: default codecs per output extension and per-codec arguments.
"""
