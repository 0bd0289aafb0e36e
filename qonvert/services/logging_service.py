"""
This module provides classes for writing on-disk conversion logs.

It separates logging concerns into specific classes for failures (ErrorLog) and
successes (SuccessLog). Success logs are written in a machine-readable YAML
format, which facilitates automated processing and reporting, while error logs
are in a human-readable text format for easy debugging.

These files complement the console logging done with loguru: they survive the
terminal session and keep the full FFmpeg diagnostics of every failed job.
"""

import random
import string
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, List

import yaml
from loguru import logger

from ..config.common import (
    COMPLETED_LOG_FILE_NAME,
    ERROR_LOG_FILE_NAME,
    SUCCESS_LOG_RANDOM_LENGTH,
)


def _dump_yaml(entries: List[Dict], path: Path):
    with path.open("w", encoding="utf-8") as f:
        yaml.dump(
            entries,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=4,
            width=220,
        )


class Log:
    """
    A base class for the on-disk logs.

    Handles the log directory, which is created if necessary, and the lock that
    serializes writes coming from concurrent conversion threads.
    """

    # A decorative separator line used in text-based logs for better readability.
    linesep_marker: str = "=" * 50

    def __init__(self, log_dir: Path):
        self.log_file_path: Path  # To be defined by the subclass.
        self.log_dir: Path = Path(log_dir).resolve()
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def write(self, *args):
        raise NotImplementedError("Subclasses must implement the write() method.")

    @staticmethod
    def generate_random_string(length: int = SUCCESS_LOG_RANDOM_LENGTH) -> str:
        """Generates a random string of uppercase letters and digits."""
        return "".join(random.choices(string.ascii_uppercase + string.digits, k=length))


class ErrorLog(Log):
    """
    Appends human-readable failure reports to a plain text file.

    Each call to `write` adds one block followed by a separator line, making the
    file a chronological record of failed conversions.
    """

    def __init__(self, error_log_dir: Path, filename: str = ERROR_LOG_FILE_NAME):
        super().__init__(error_log_dir)
        self.log_file_path = self.log_dir / filename

    def write(self, *error_messages: str):
        """
        Writes one or more error messages to the log file, one per line.

        Args:
            *error_messages: The pieces of the error report.
        """
        if not error_messages:
            return

        content_to_write = "\n".join(error_messages) + "\n" + self.linesep_marker + "\n"

        try:
            with self._lock, self.log_file_path.open("a", encoding="utf-8") as f:
                f.write(content_to_write)
        except OSError as e:
            # Fall back to the console so the report is not lost.
            logger.error(f"Failed to write to error log {self.log_file_path}: {e}")
            for msg in error_messages:
                logger.error(f"  - {msg}")


class SuccessLog(Log):
    """
    Records successful conversions as a YAML list.

    Every run writes to its own dated, randomized file (`log_YYYYMMDD_XXXXXXXXXX.yaml`).
    `generate_combined_log_yaml` later folds those files into a single
    `combined_log.yaml` sorted by completion time.
    """

    def __init__(self, success_log_dir: Path):
        super().__init__(success_log_dir)
        date_str = datetime.now().strftime("%Y%m%d")
        random_str = self.generate_random_string()
        self.log_file_path = self.log_dir / f"log_{date_str}_{random_str}.yaml"
        self.log_entries: List[Dict] = []

    def write(self, new_log_entry: dict):
        """
        Appends a structured entry and rewrites the whole file.

        The file is rewritten each time, so it is always a valid YAML list even if
        the run is interrupted.
        """
        with self._lock:
            new_log_entry["index"] = len(self.log_entries) + 1
            self.log_entries.append(new_log_entry)
            try:
                _dump_yaml(self.log_entries, self.log_file_path)
            except OSError as e:
                logger.error(f"Failed to write to success log {self.log_file_path}: {e}")

    @classmethod
    def generate_combined_log_yaml(cls, log_dir: Path) -> Path | None:
        """
        Combines all per-run success logs in `log_dir` into `combined_log.yaml`.

        Entries of an existing combined log are kept. All entries are sorted by
        `ended_datetime` and re-indexed; the per-run files are deleted once merged.
        Run logs that cannot be read are left in place for a later run.

        Returns:
            The path of the combined log, or None if there was nothing to combine.
        """
        log_dir = Path(log_dir)
        if not log_dir.is_dir():
            logger.error(f"Cannot generate combined log: Invalid log directory provided: {log_dir}")
            return None

        all_entries: List[Dict] = []
        final_combined_log_path = log_dir / COMPLETED_LOG_FILE_NAME
        if final_combined_log_path.is_file():
            try:
                with final_combined_log_path.open("r", encoding="utf-8") as f:
                    existing = yaml.safe_load(f)
                if isinstance(existing, list):
                    all_entries.extend(existing)
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Error reading existing combined log {final_combined_log_path}: {e}")
                return None

        # Only run logs that were read successfully are merged and deleted.
        merged_run_logs: List[Path] = []
        for run_log in sorted(log_dir.glob("log_????????_*.yaml")):
            try:
                with run_log.open("r", encoding="utf-8") as f:
                    content = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Error processing success log {run_log}, keeping it: {e}")
                continue
            if content is not None and not isinstance(content, list):
                logger.error(f"Unexpected content in success log {run_log}, keeping it.")
                continue
            all_entries.extend(content or [])
            merged_run_logs.append(run_log)

        if not merged_run_logs:
            logger.debug("No new log entries found to combine.")
            return None

        sortable = [e for e in all_entries if isinstance(e, dict) and "ended_datetime" in e]
        unsortable = [e for e in all_entries if not (isinstance(e, dict) and "ended_datetime" in e)]
        sortable.sort(key=lambda e: str(e["ended_datetime"]))
        combined = sortable + unsortable
        for i, entry in enumerate(combined, start=1):
            if isinstance(entry, dict):
                entry["index"] = i

        try:
            _dump_yaml(combined, final_combined_log_path)
        except OSError as e:
            logger.error(f"Failed to write combined log {final_combined_log_path}: {e}")
            return None

        for run_log in merged_run_logs:
            run_log.unlink(missing_ok=True)
        logger.info(f"Generated combined log: {final_combined_log_path} with {len(combined)} entries.")
        return final_combined_log_path
