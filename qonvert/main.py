"""
Main entry point for qonvert.

This script parses command-line arguments, configures logging, resolves the
input files into jobs and runs the batch conversion pipeline with a live
progress display.
"""

import sys
from datetime import datetime
from typing import Optional, Sequence

from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from .cli import get_args
from .config.codecs import DEFAULT_CODECS
from .config.common import LOGGER_FORMAT
from .domain.exceptions import ResolutionException
from .domain.models import CodecPolicy
from .pipeline.batch_pipeline import BatchConversionPipeline
from .services.logging_service import ErrorLog, SuccessLog
from .services.path_resolver import build_jobs
from .services.presentation import OutcomeReporter, ProgressDisplay
from .utils.ffmpeg_utils import verify_tools


def configure_logger(level: str, console: Console):
    """
    Routes loguru through the rich console.

    Log lines are then printed above the live progress bars instead of
    tearing them apart.
    """

    def console_sink(message):
        console.print(Text.from_ansi(str(message).rstrip("\n")))

    logger.remove()
    logger.add(console_sink, level=level, format=LOGGER_FORMAT, colorize=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Runs a batch conversion.

    Returns:
        The process exit status: 0 when the batch could be set up and run (even if
        some conversions failed), 1 when the inputs or outputs could not be
        resolved, 130 when interrupted.
    """
    args = get_args(argv)
    console = Console()

    effective_log_level = args.log_level
    if args.verbose and args.log_level not in ("TRACE", "DEBUG"):
        effective_log_level = "DEBUG"
    configure_logger(effective_log_level, console)
    logger.debug(f"Parsed arguments: {args}")

    verify_tools()

    codec_policy = CodecPolicy(override=args.codec, defaults=DEFAULT_CODECS)
    reporter = OutcomeReporter(console)

    try:
        jobs = build_jobs(args.input_paths, args.output_directory, args.output_file_type)
    except ResolutionException as e:
        logger.error(f"Could not resolve input/output paths: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    reporter.header(codec_policy.codec_for_extension(args.output_file_type))

    error_log = ErrorLog(args.error_log_dir) if args.error_log_dir else None
    success_log = SuccessLog(args.success_log_dir) if args.success_log_dir else None

    start = datetime.now()
    try:
        with ProgressDisplay(console) as display:
            pipeline = BatchConversionPipeline(
                jobs,
                codec_policy,
                verbose=args.verbose,
                max_workers=args.limit,
                display=display,
                reporter=reporter,
                error_log=error_log,
                success_log=success_log,
            )
            outcomes = pipeline.run()
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted.[/yellow]")
        return 130

    reporter.summary(outcomes, datetime.now() - start)
    logger.success("qonvert finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
