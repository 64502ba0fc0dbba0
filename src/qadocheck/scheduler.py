"""
Concurrent evaluation of candidate queries.

One task per candidate is submitted to a thread pool. A task probes the
endpoints, turns the probe result into a check record and hands it to the
sink. Completions are collected in the calling thread, which is the only
place the run summary and the progress callback are touched.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Sequence

from .models import CandidateQuery, CheckRecord, ProbeResult, RunSummary
from .prober import EndpointProber

__all__ = [
    "EvaluationScheduler",
    "default_worker_count",
    "to_check_record",
]

logger = logging.getLogger(__name__)

Sink = Callable[[CheckRecord], None]
Progress = Callable[[int], object]


def default_worker_count() -> int:
    """Number of CPUs available, 1 if unknown."""
    return os.cpu_count() or 1


def to_check_record(query: CandidateQuery, result: ProbeResult) -> CheckRecord:
    """Turn the probe result for a query into the record to store.

    The endpoint is kept for definitive answers, positive or negative, and
    is absent when no endpoint decided.
    """
    return CheckRecord(query_id=query.id, status=result.status, endpoint=result.endpoint)


class EvaluationScheduler:
    """Evaluates candidate queries on a fixed-size thread pool."""

    def __init__(self, prober: EndpointProber, workers: Optional[int] = None) -> None:
        self.prober = prober
        self.workers = workers or default_worker_count()

    def evaluate(self, query: CandidateQuery, sink: Sink) -> CheckRecord:
        """Probe one query and pass its record to ``sink``.

        Exceptions raised by the sink propagate to the caller.
        """
        result = self.prober.probe(query.text)
        record = to_check_record(query, result)
        sink(record)
        return record

    def run(
        self,
        queries: Sequence[CandidateQuery],
        sink: Sink,
        progress: Optional[Progress] = None,
    ) -> RunSummary:
        """
        Evaluate all queries and block until every task has finished.

        Args:
            queries: Candidates to evaluate, duplicates included
            sink: Called once per query with its check record, from a
                worker thread
            progress: Called with ``1`` each time a task finishes

        Returns:
            Counts of outcomes and of tasks whose sink raised
        """
        summary = RunSummary(total=len(queries))
        logger.info(f"Using {self.workers} threads...")

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="qadocheck") as pool:
            futures: dict[Future[CheckRecord], CandidateQuery] = {
                pool.submit(self.evaluate, query, sink): query for query in queries
            }
            for future in as_completed(futures):
                query = futures[future]
                try:
                    summary.add(future.result())
                except Exception as e:
                    summary.write_errors += 1
                    logger.error(f"Check of {query.id} failed: {e}")
                if progress is not None:
                    progress(1)

        return summary
