"""
Services Package for qonvert.

This package contains the "service layer" of the application. A service performs
one well-defined task and is coordinated by the pipeline.

- **Progress parsing (`progress_parser`):** decodes FFmpeg's `-progress` key=value
  stream into `Progress` snapshots.

- **Process supervision (`process_supervisor`):** runs one FFmpeg process with
  piped streams, drains stdout and stderr concurrently and returns its outcome.

- **Path resolution (`path_resolver`) and frame counting (`frame_counter`):**
  turn command-line inputs into jobs and find each job's total frame count.

- **Presentation (`presentation`):** live progress bars and colored outcome lines.

- **Logging Service (`ErrorLog`, `SuccessLog`):** on-disk error reports (plain
  text) and success records (YAML), separate from the real-time console logging.
"""
