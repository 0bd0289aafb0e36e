"""
Defines custom exception types for qonvert.

These exceptions allow for more specific and expressive error handling throughout
the conversion pipeline. Instead of catching a generic `Exception`, the pipeline
catches `QonvertException` at the boundary of each job and records it as that
job's outcome, so one broken file never takes its siblings down with it.

All custom exceptions inherit from the base `QonvertException`.
"""


class QonvertException(Exception):
    """Base class for all custom exceptions in qonvert."""

    pass


# --- Progress Protocol Exceptions ---
class ProtocolException(QonvertException):
    """
    Raised when the `-progress` stream violates the key=value contract.

    A malformed progress stream signals a mismatch with the external tool and is
    a different fault from a non-zero exit code.
    """

    pass


class MissingProgressKeyException(ProtocolException):
    """Raised when a required key is absent at the time a snapshot is built."""

    def __init__(self, key: str):
        super().__init__(f"Could not find key '{key}' in FFmpeg progress output")
        self.key = key


class MalformedProgressValueException(ProtocolException):
    """Raised when a required key holds a value that cannot be interpreted."""

    def __init__(self, key: str, value: str):
        super().__init__(f"Could not parse key '{key}' from FFmpeg progress output: {value!r}")
        self.key = key
        self.value = value


class ProgressOrderException(ProtocolException):
    """
    Raised when a snapshot breaks the order of the stream.

    Frame counts never decrease, and nothing may follow the `end` snapshot.
    """

    pass


# --- Process Exceptions ---
class ProcessException(QonvertException):
    """Base class for exceptions raised while running the external process."""

    pass


class SpawnException(ProcessException):
    """
    Raised when the subprocess could not be created at all.

    This usually means the executable was not found or is not executable.
    """

    pass


class ProcessFailedException(ProcessException):
    """
    Raised when the subprocess exited with a non-success status.

    Carries the exit status and the full diagnostic (stderr) text.
    """

    def __init__(self, returncode: int, stderr: str):
        super().__init__(f"FFmpeg execution failed with status {returncode}:\n{stderr}")
        self.returncode = returncode
        self.stderr = stderr


# --- Resolution Exceptions ---
class ResolutionException(QonvertException):
    """
    Base class for errors raised before a process is supervised.

    These come from resolving input/output paths or from counting frames.
    """

    pass


class InvalidDirectoryException(ResolutionException):
    """Raised when the output directory does not exist."""

    def __init__(self, path):
        super().__init__(f"'{path}' is not a valid directory")
        self.path = path


class MultipleInputDirectoriesException(ResolutionException):
    """Raised when a directory is given together with other input paths."""

    def __init__(self):
        super().__init__("Either a single directory or multiple files can be used as input")


class DuplicateOutputPathException(ResolutionException):
    """
    Raised when several inputs would be converted into the same output file.

    This happens for inputs that share a stem, like `clip.mov` and `clip.gif`.
    """

    def __init__(self, output_path, input_paths):
        inputs = ", ".join(f"'{p}'" for p in input_paths)
        super().__init__(f"{inputs} would all be converted to '{output_path}'")
        self.output_path = output_path
        self.input_paths = list(input_paths)


class FrameCountException(ResolutionException):
    """Raised when the frame count of an input file cannot be determined."""

    pass
