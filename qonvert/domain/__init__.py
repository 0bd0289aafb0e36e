"""
This package contains the core domain models of qonvert.

The domain layer represents the fundamental concepts of a batch conversion: the
job to run, the progress snapshots decoded from FFmpeg, and the outcome of each
process and job. It is independent of the CLI, the terminal display and the
external tools.

Modules:
    exceptions.py: Defines the error taxonomy (protocol, process and resolution
                   errors), all rooted at `QonvertException`.
    models.py: Contains the immutable value objects `Job`, `Progress`,
               `ProcessOutcome`, `JobOutcome` and the `CodecPolicy`.
"""
