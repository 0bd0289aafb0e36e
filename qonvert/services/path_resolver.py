"""
Resolves command-line input locations into concrete conversion jobs.

Either a single directory (whose regular files become the inputs) or any number
of individual files may be given. Every output lands in one output directory,
named after its input file with the new extension.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from ..domain.exceptions import (
    DuplicateOutputPathException,
    InvalidDirectoryException,
    MultipleInputDirectoriesException,
)
from ..domain.models import Job


def get_input_file_paths(input_paths: Sequence[Path]) -> List[Path]:
    """
    Expands the input locations into a list of file paths.

    If there is exactly one path and it is a directory, all the files directly
    inside it are returned (sorted, subdirectories skipped). Otherwise every path
    is taken as a file.

    Raises:
        MultipleInputDirectoriesException: If several paths are given and one of
            them is a directory.
    """
    input_paths = [Path(p).absolute() for p in input_paths]

    if len(input_paths) == 1 and input_paths[0].is_dir():
        directory = input_paths[0]
        files = sorted(p for p in directory.iterdir() if not p.is_dir())
        logger.debug(f"Found {len(files)} file(s) in {directory}")
        return files

    for path in input_paths:
        if path.is_dir():
            raise MultipleInputDirectoriesException()
    return input_paths


def get_output_file_paths(output_directory: Path, input_file_paths: Iterable[Path], output_file_type: str) -> List[Path]:
    """
    Derives one output path per input, inside `output_directory`.

    Raises:
        InvalidDirectoryException: If `output_directory` is not an existing directory.
        DuplicateOutputPathException: If two inputs share a stem and would be
            written to the same output file.
    """
    output_directory = Path(output_directory)
    if not output_directory.is_dir():
        raise InvalidDirectoryException(output_directory)

    output_directory = output_directory.resolve()
    extension = output_file_type.lstrip(".")

    inputs_by_output: Dict[Path, List[Path]] = {}
    for path in input_file_paths:
        output_path = output_directory / f"{Path(path).stem}.{extension}"
        inputs_by_output.setdefault(output_path, []).append(Path(path))

    for output_path, sources in inputs_by_output.items():
        if len(sources) > 1:
            raise DuplicateOutputPathException(output_path, sources)
    return list(inputs_by_output)


def build_jobs(
    input_paths: Sequence[Path],
    output_directory: Path,
    output_file_type: str,
    codec: Optional[str] = None,
) -> List[Job]:
    """Resolves inputs and outputs and pairs them up into jobs, in input order."""
    input_file_paths = get_input_file_paths(input_paths)
    output_file_paths = get_output_file_paths(output_directory, input_file_paths, output_file_type)
    return [
        Job(input_path=input_path, output_path=output_path, codec=codec)
        for input_path, output_path in zip(input_file_paths, output_file_paths)
    ]
