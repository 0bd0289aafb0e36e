import concurrent.futures
import threading
import traceback
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set

from loguru import logger
from rich.progress import TaskID

from ..domain.exceptions import QonvertException
from ..domain.models import CodecPolicy, Job, JobOutcome, Progress
from ..services.frame_counter import count_frames
from ..services.logging_service import ErrorLog, SuccessLog
from ..services.presentation import OutcomeReporter, ProgressDisplay
from ..services.process_supervisor import ProcessSupervisor
from ..utils.ffmpeg_utils import build_ffmpeg_command, format_cmd
from ..utils.format_utils import format_frames, format_timedelta

FrameCounter = Callable[[Path], int]
CommandBuilder = Callable[[Job, Optional[str]], List[str]]


class BatchConversionPipeline:
    """
    Converts a batch of jobs concurrently.

    Every job runs on its own worker thread: count the input frames, start FFmpeg
    under a `ProcessSupervisor`, and feed its progress into the job's own bar.
    Errors are caught at the job boundary and recorded as that job's outcome, so
    one failing file never cancels or blocks the others. Failed jobs are not retried.

    By default every job is started at once; `max_workers` caps the number of
    conversions running at the same time.
    """

    def __init__(
        self,
        jobs: Sequence[Job],
        codec_policy: Optional[CodecPolicy] = None,
        *,
        verbose: bool = False,
        max_workers: Optional[int] = None,
        frame_counter: FrameCounter = count_frames,
        command_builder: CommandBuilder = build_ffmpeg_command,
        display: Optional[ProgressDisplay] = None,
        reporter: Optional[OutcomeReporter] = None,
        error_log: Optional[ErrorLog] = None,
        success_log: Optional[SuccessLog] = None,
    ):
        self.jobs: List[Job] = list(jobs)
        self.codec_policy = codec_policy or CodecPolicy()
        self.verbose = verbose
        self.max_workers = max_workers
        self.frame_counter = frame_counter
        self.command_builder = command_builder
        self.display = display
        self.reporter = reporter
        self.error_log = error_log
        self.success_log = success_log

        self._active: Set[ProcessSupervisor] = set()
        self._active_lock = threading.Lock()
        self._cancelled = threading.Event()

    def _progress_callback(self, job: Job, frame_count: int, task_id: Optional[TaskID]) -> Callable[[Progress], None]:
        def on_progress(progress: Progress):
            logger.trace(f"{job.input_path.name}: {format_frames(progress.frame, frame_count)} {progress.phase.value}")
            if self.display is not None and task_id is not None:
                self.display.update(task_id, progress)

        return on_progress

    def _supervise(self, supervisor: ProcessSupervisor):
        with self._active_lock:
            if self._cancelled.is_set():
                supervisor.terminate()
            self._active.add(supervisor)
        try:
            supervisor.run().raise_for_status()
        finally:
            with self._active_lock:
                self._active.discard(supervisor)

    def process_single_job(self, job: Job) -> JobOutcome:
        """Runs one job to completion and returns its outcome. Never raises `QonvertException`."""
        start = datetime.now()
        outcome = JobOutcome(job=job)
        codec = self.codec_policy.codec_for(job)
        cmd: List[str] = []
        task_id: Optional[TaskID] = None

        logger.debug(f"Job started for: {job.input_path.name}")
        try:
            outcome.frame_count = self.frame_counter(job.input_path)
            if self.display is not None:
                task_id = self.display.add_job(job, outcome.frame_count)

            cmd = self.command_builder(job, codec)
            supervisor = ProcessSupervisor(cmd, self._progress_callback(job, outcome.frame_count, task_id))
            self._supervise(supervisor)
        except QonvertException as e:
            outcome.error = e
            logger.error(f"Conversion failed for {job.input_path}: {type(e).__name__}")
            logger.debug(f"Failure details for {job.input_path.name}:\n{outcome.diagnostics}")
        finally:
            outcome.elapsed = datetime.now() - start
            if self.display is not None and task_id is not None:
                self.display.finish_job(task_id, outcome.success)

        if outcome.success:
            logger.info(
                f"Converted {job.input_path.name} -> {job.output_path} "
                f"({outcome.frame_count} frames) in {format_timedelta(outcome.elapsed)}"
            )
        self._record(outcome, codec, cmd)
        return outcome

    def _record(self, outcome: JobOutcome, codec: Optional[str], cmd: List[str]):
        job = outcome.job
        if not outcome.success and self.error_log is not None:
            self.error_log.write(
                f"Failed job: {job.input_path} -> {job.output_path}",
                f"Failed command: {format_cmd(cmd) if cmd else 'N/A'}",
                f"Error: {type(outcome.error).__name__}",
                f"Diagnostics:\n{outcome.diagnostics}",
            )
        elif outcome.success and self.success_log is not None:
            self.success_log.write(
                {
                    "input_file": str(job.input_path),
                    "output_file": str(job.output_path),
                    "codec": codec or "default",
                    "frame_count": outcome.frame_count,
                    "elapsed": format_timedelta(outcome.elapsed),
                    "ended_datetime": datetime.now().isoformat(),
                }
            )

    def cancel(self):
        """Stops every running process; jobs that have not started yet will fail immediately."""
        self._cancelled.set()
        with self._active_lock:
            for supervisor in self._active:
                supervisor.terminate()

    def _unexpected_failure(self, job: Job, exc: Exception) -> JobOutcome:
        tb_str = "".join(traceback.format_exception(exc))
        logger.error(
            f"Unhandled error while converting {job.input_path.name}:\n"
            f"Exception type: {type(exc).__name__}\n"
            f"Exception message: {exc}\n"
            f"Traceback: {tb_str}"
        )
        return JobOutcome(job=job, error=QonvertException(f"Unexpected error: {type(exc).__name__}: {exc}"))

    def run(self) -> List[JobOutcome]:
        """
        Runs every job and waits for all of them to finish.

        Returns:
            One `JobOutcome` per job, in the order the jobs were given.
        """
        if not self.jobs:
            logger.info("No files to convert.")
            return []

        max_workers = max(1, self.max_workers or len(self.jobs))
        logger.info(f"Converting {len(self.jobs)} file(s) using {max_workers} worker thread(s).")

        outcomes: Dict[int, JobOutcome] = {}
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="job")
        try:
            futures = {executor.submit(self.process_single_job, job): i for i, job in enumerate(self.jobs)}
            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                try:
                    outcome = future.result()
                except Exception as exc:
                    outcome = self._unexpected_failure(self.jobs[index], exc)
                outcomes[index] = outcome
                if self.reporter is not None:
                    self.reporter.report(outcome, verbose=self.verbose)
        except KeyboardInterrupt:
            logger.warning("Conversion interrupted by user. Stopping all running processes.")
            self.cancel()
            executor.shutdown(wait=True, cancel_futures=True)
            raise
        finally:
            executor.shutdown(wait=True)

        self.post_actions()
        return [outcomes[i] for i in range(len(self.jobs))]

    def post_actions(self):
        if self.success_log is not None:
            SuccessLog.generate_combined_log_yaml(self.success_log.log_dir)
