"""
Search orchestrator - the brain of the key search.

This module implements the job lifecycle:
1. Validate preconditions and assign a new job id
2. Partition the key-length range across a fixed pool of workers
3. Merge progress and results, discarding anything from stale jobs
4. Rank the merged candidates once every worker has finished
"""

import asyncio
import logging
import math
import multiprocessing
import os
import queue
import threading
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import AsyncIterator, ClassVar, Literal

from vigenere_analyzer.core.config import Settings
from vigenere_analyzer.core.exceptions import (
    AnalysisError,
    InvalidAlphabetError,
    InvalidKeyLengthRangeError,
    JobSupersededError,
    NoCandidatesError,
    ValidationError,
)
from vigenere_analyzer.services.analysis.language_model import LanguageModel
from vigenere_analyzer.services.pipeline.models import AnalysisOptions, CandidateResult
from vigenere_analyzer.services.pipeline.ranker import ResultRanker
from vigenere_analyzer.services.pipeline.worker import (
    WorkerProgress,
    WorkerReport,
    WorkerTask,
    run_worker,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressUpdate:
    """Merged progress of the current job, in percent."""

    type: ClassVar[str] = "progress"

    job_id: int
    progress: float


@dataclass(frozen=True)
class AnalysisCompleted:
    """Ranked candidates of a finished job."""

    type: ClassVar[str] = "completed"

    job_id: int
    results: list[CandidateResult]


@dataclass(frozen=True)
class AnalysisFailed:
    """A job that ended without a ranking."""

    type: ClassVar[str] = "failed"

    NO_CANDIDATES: ClassVar[str] = "no_candidates"
    SUPERSEDED: ClassVar[str] = "superseded"

    job_id: int
    reason: str
    message: str


AnalysisEvent = ProgressUpdate | AnalysisCompleted | AnalysisFailed


class SearchOrchestrator:
    """
    Distributes a key search over a fixed pool of parallel workers.

    Every job gets an id one greater than the previous job's. Starting a
    job makes all older jobs stale: their workers are told to stop, their
    progress and results are discarded on arrival and their streams end
    with a "superseded" failure. Supersession is per orchestrator, so each
    client session gets its own.
    """

    DEFAULT_WORKER_COUNT: ClassVar[int] = 4

    def __init__(
        self,
        model: LanguageModel,
        max_workers: int | None = None,
        backend: Literal["process", "thread"] = "process",
        poll_interval: float = 0.05,
    ):
        self.model = model
        self.worker_count = max_workers or os.cpu_count() or self.DEFAULT_WORKER_COUNT
        self.backend = backend
        self.poll_interval = poll_interval
        self.ranker = ResultRanker()
        self._current_job_id = 0
        # Cancel signal of the newest job whose workers may still be running
        self._running_cancel = None

    @classmethod
    def from_settings(cls, settings: Settings, model: LanguageModel) -> "SearchOrchestrator":
        return cls(
            model,
            max_workers=settings.max_workers,
            backend=settings.worker_backend,
            poll_interval=settings.progress_poll_interval,
        )

    @property
    def current_job_id(self) -> int:
        return self._current_job_id

    def is_current(self, job_id: int) -> bool:
        return job_id == self._current_job_id

    def validate(self, options: AnalysisOptions) -> None:
        """
        Check the preconditions of a job.

        Raises:
            ValidationError: If the job cannot start
        """
        if not options.ciphertext:
            raise ValidationError("Please enter ciphertext")
        if len(options.alphabet) < 2:
            raise InvalidAlphabetError(options.alphabet)
        if options.min_key_length < 1 or options.min_key_length > options.max_key_length:
            raise InvalidKeyLengthRangeError(options.min_key_length, options.max_key_length)

    def partition(self, key_lengths: list[int]) -> list[list[int]]:
        """Split key lengths into contiguous chunks, at most one per worker."""
        per_worker = math.ceil(len(key_lengths) / self.worker_count)
        chunks = [
            key_lengths[i * per_worker:(i + 1) * per_worker]
            for i in range(self.worker_count)
        ]
        return [chunk for chunk in chunks if chunk]

    async def start_analysis(self, options: AnalysisOptions) -> AsyncIterator[AnalysisEvent]:
        """
        Run a key search and stream its events.

        Yields zero or more ProgressUpdate events followed by exactly one
        AnalysisCompleted or AnalysisFailed.

        Raises:
            ValidationError: Before any job is created, if preconditions fail
            AnalysisError: If a worker crashed
        """
        self.validate(options)

        self._current_job_id += 1
        job_id = self._current_job_id
        if self._running_cancel is not None:
            self._running_cancel.set()

        chunks = self.partition(options.key_lengths)
        logger.info(
            f"Job {job_id}: searching key lengths {options.min_key_length}-"
            f"{options.max_key_length} on {len(chunks)} {self.backend} worker(s)"
        )

        loop = asyncio.get_running_loop()
        manager = None
        if self.backend == "process":
            manager = multiprocessing.Manager()
            channel = manager.Queue()
            cancel = manager.Event()
            executor: Executor = ProcessPoolExecutor(max_workers=len(chunks))
        else:
            channel = queue.Queue()
            cancel = threading.Event()
            executor = ThreadPoolExecutor(
                max_workers=len(chunks),
                thread_name_prefix=f"search-job-{job_id}",
            )
        self._running_cancel = cancel

        pending: set[asyncio.Future] = set()
        try:
            pending = {
                loop.run_in_executor(
                    executor,
                    run_worker,
                    WorkerTask(job_id, index, chunk, options, self.model, cancel),
                    channel,
                )
                for index, chunk in enumerate(chunks)
            }
            worker_progress = [0] * len(chunks)
            last_progress = 0.0
            reports: dict[int, WorkerReport] = {}

            while pending:
                done, pending = await asyncio.wait(pending, timeout=self.poll_interval)

                if not self.is_current(job_id):
                    yield self._superseded(job_id)
                    return

                for message in self._drain(channel):
                    if not self.is_current(message.job_id):
                        continue
                    worker_progress[message.worker_index] = max(
                        worker_progress[message.worker_index], message.progress
                    )

                progress = sum(worker_progress) / len(worker_progress)
                if progress > last_progress:
                    last_progress = progress
                    yield ProgressUpdate(job_id, progress)

                for future in done:
                    try:
                        report = future.result()
                    except Exception as e:
                        raise AnalysisError(
                            f"Search worker failed: {e}", {"job_id": job_id}
                        ) from e
                    if self.is_current(report.job_id):
                        reports[report.worker_index] = report

            if not self.is_current(job_id):
                yield self._superseded(job_id)
                return

            results = [
                result
                for index in sorted(reports)
                for result in reports[index].results
            ]

            if not results:
                logger.info(f"Job {job_id}: no candidates met the thresholds")
                yield AnalysisFailed(
                    job_id, AnalysisFailed.NO_CANDIDATES, NoCandidatesError.MESSAGE
                )
                return

            ranked = self.ranker.rank(results, options.sort_by)
            logger.info(
                f"Job {job_id}: {len(ranked)} candidate(s), best key '{ranked[0].key}'"
            )
            yield AnalysisCompleted(job_id, ranked)

        finally:
            # Running workers stop at their next check; queued ones never start
            cancel.set()
            if self._running_cancel is cancel:
                self._running_cancel = None
            executor.shutdown(wait=False, cancel_futures=True)
            if manager is not None:
                self._release_manager(manager, executor, pending)

    async def run_analysis(self, options: AnalysisOptions) -> AnalysisCompleted:
        """
        Run a key search to completion and return its ranking.

        Raises:
            ValidationError: If preconditions fail
            NoCandidatesError: If no candidate met the thresholds
            JobSupersededError: If a newer job started before this one finished
            AnalysisError: If a worker crashed
        """
        final: AnalysisCompleted | AnalysisFailed | None = None
        async for event in self.start_analysis(options):
            if not isinstance(event, ProgressUpdate):
                final = event

        if final is None:
            raise AnalysisError("Analysis stream ended without a result")
        if isinstance(final, AnalysisFailed):
            if final.reason == AnalysisFailed.SUPERSEDED:
                raise JobSupersededError(final.job_id, self._current_job_id)
            raise NoCandidatesError(final.job_id, options.min_key_length, options.max_key_length)
        return final

    def _superseded(self, job_id: int) -> AnalysisFailed:
        logger.info(f"Job {job_id}: superseded by job {self._current_job_id}")
        error = JobSupersededError(job_id, self._current_job_id)
        return AnalysisFailed(job_id, AnalysisFailed.SUPERSEDED, error.message)

    @staticmethod
    def _release_manager(manager, executor: Executor, pending: set[asyncio.Future]) -> None:
        """Shut the manager down once no worker can still reach its queue or event."""
        if all(future.done() for future in pending):
            manager.shutdown()
            return

        def release() -> None:
            executor.shutdown(wait=True)
            manager.shutdown()

        threading.Thread(target=release, name="search-manager-release", daemon=True).start()

    @staticmethod
    def _drain(channel) -> list[WorkerProgress]:
        messages = []
        while True:
            try:
                messages.append(channel.get_nowait())
            except queue.Empty:
                return messages
