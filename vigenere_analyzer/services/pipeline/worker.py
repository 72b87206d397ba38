"""
Search worker.

Runs the key search for one statically assigned chunk of key lengths.
Workers share nothing but the read-only language model; they post
progress messages on a channel and return their candidates as a report.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from vigenere_analyzer.services.analysis.key_estimator import KeyEstimator
from vigenere_analyzer.services.analysis.language_model import LanguageModel
from vigenere_analyzer.services.engines.vigenere import decrypt
from vigenere_analyzer.services.pipeline.filter import CandidateFilter
from vigenere_analyzer.services.pipeline.models import AnalysisOptions, CandidateResult
from vigenere_analyzer.services.pipeline.scorer import CandidateScorer

logger = logging.getLogger(__name__)


class ProgressChannel(Protocol):
    def put(self, item: "WorkerProgress") -> None: ...


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class WorkerTask:
    """One worker's share of a job."""

    job_id: int
    worker_index: int
    key_lengths: list[int]
    options: AnalysisOptions
    model: LanguageModel
    # threading.Event for threads, a Manager Event for processes
    cancel: CancelSignal | None = None


@dataclass(frozen=True)
class WorkerProgress:
    """Progress message tagged with the job it belongs to."""

    job_id: int
    worker_index: int
    progress: int


@dataclass
class WorkerReport:
    """Everything a worker found for its chunk."""

    job_id: int
    worker_index: int
    results: list[CandidateResult] = field(default_factory=list)
    keys_tested: int = 0
    rejected: int = 0
    cancelled: bool = False


def run_worker(task: WorkerTask, channel: ProgressChannel | None = None) -> WorkerReport:
    """
    Search every key length of the task's chunk.

    With a crib, each key length yields a partial key whose unresolved
    positions are expanded; a crib that settles the whole key leaves nothing
    to search for that length. Without a crib, frequency matching yields
    exactly one key per length.

    The task's cancel signal is checked before every key length and every
    crib candidate; once set, the worker returns what it has so far.

    Progress is an approximation: the estimated total is alphabet_size**3
    per key length, each crib candidate counts 1 and each frequency-matched
    length counts alphabet_size**key_length.
    """
    options = task.options
    alphabet = options.alphabet
    alpha_len = len(alphabet)

    estimator = KeyEstimator(alphabet, task.model.letter_frequencies)
    scorer = CandidateScorer(task.model)
    gate = CandidateFilter(options.use_ic, options.use_ngrams, options.use_dict)
    report = WorkerReport(job_id=task.job_id, worker_index=task.worker_index)

    total_work = len(task.key_lengths) * alpha_len ** 3
    work_done = 0
    last_progress = 0

    def report_progress() -> None:
        nonlocal last_progress
        progress = min(100, work_done * 100 // total_work) if total_work else 100
        if progress > last_progress:
            last_progress = progress
            if channel is not None:
                channel.put(WorkerProgress(task.job_id, task.worker_index, progress))

    def test_key(key: str, key_length: int, method: str) -> None:
        plaintext = decrypt(options.ciphertext, key, alphabet)
        scores = scorer.score(
            plaintext, alphabet, options.use_ic, options.use_ngrams, options.use_dict
        )
        report.keys_tested += 1

        reason = gate.reject_reason(scores)
        if reason is not None:
            report.rejected += 1
            logger.debug(f"Job {task.job_id}: rejected key '{key}' ({reason})")
            return

        report.results.append(CandidateResult(
            key=key,
            plaintext=plaintext,
            ic=scores.ic,
            ngram_score=scores.ngram_score,
            dict_score=scores.dict_score,
            key_length=key_length,
            method=method,
        ))

    def stop_requested() -> bool:
        if task.cancel is not None and task.cancel.is_set():
            report.cancelled = True
        return report.cancelled

    for key_length in task.key_lengths:
        if stop_requested():
            break

        if options.known_plaintext:
            partial_key = estimator.find_partial_key(
                options.ciphertext, options.known_plaintext, key_length
            )
            if partial_key is None or partial_key.is_resolved:
                continue

            for key in estimator.generate_key_candidates(partial_key):
                if stop_requested():
                    break
                test_key(key, key_length, "known_plaintext")
                work_done += 1
                report_progress()
        else:
            key = estimator.find_likely_key(options.ciphertext, key_length)
            test_key(key, key_length, "frequency_analysis")
            work_done += alpha_len ** key_length
            report_progress()

    if report.cancelled:
        logger.debug(
            f"Job {task.job_id}: worker {task.worker_index} cancelled after "
            f"{report.keys_tested} keys"
        )
        return report

    logger.debug(
        f"Job {task.job_id}: worker {task.worker_index} tested {report.keys_tested} keys, "
        f"kept {len(report.results)}"
    )
    return report
