"""
Command-Line Interface (CLI) setup for qonvert.

This module uses Python's `argparse` to define and parse the command-line
arguments that control the application's behavior.
"""
import argparse
from pathlib import Path
from typing import Optional, Sequence


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def get_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for qonvert.

    Args:
        argv: The arguments to parse. Defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: An object containing the parsed command-line
                            arguments as attributes.
    """
    parser = argparse.ArgumentParser(prog="qonvert", description="A tiny CLI for batch video conversion with FFmpeg.")
    parser.add_argument(
        "input_paths", nargs="+", type=Path, help="The files to be converted, or a single directory."
    )
    parser.add_argument(
        "-o", "--output-directory", type=Path, default=Path("."), help="The directory for the converted files."
    )
    parser.add_argument(
        "-t", "--output-file-type", required=True, help="The file extension of the converted files (e.g. mp4)."
    )
    parser.add_argument(
        "-c", "--codec", default=None, help="The FFmpeg video codec to use for conversion."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show FFmpeg's output for failed conversions and debug logs."
    )
    parser.add_argument(
        "-l", "--limit", type=_positive_int, default=None,
        help="Maximum number of concurrent FFmpeg processes (default: no limit)."
    )
    parser.add_argument(
        "--log-level", type=str, default="WARNING", choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level."
    )
    parser.add_argument(
        "--error-log-dir", type=Path, default=None,
        help="Append the details of every failed conversion to error.txt in this directory."
    )
    parser.add_argument(
        "--success-log-dir", type=Path, default=None,
        help="Record successful conversions as YAML in this directory."
    )

    args = parser.parse_args(argv)
    args.output_file_type = args.output_file_type.lstrip(".")
    if not args.output_file_type:
        parser.error("The output file type must not be empty.")
    return args
