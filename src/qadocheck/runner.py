"""Run a complete check: fetch candidates, evaluate, store the records."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .config import CheckConfig
from .models import CandidateQuery, RunSummary
from .prober import EndpointProber
from .scheduler import EvaluationScheduler, Progress
from .store import QadoStore

__all__ = [
    "evaluate_candidates",
    "run_checks",
]

logger = logging.getLogger(__name__)


def evaluate_candidates(
    config: CheckConfig,
    candidates: Sequence[CandidateQuery],
    store: QadoStore,
    progress: Optional[Progress] = None,
) -> RunSummary:
    """Evaluate fetched candidates and write one check record per candidate.

    Args:
        config: Run settings (endpoints, probe timeout, workers)
        candidates: Queries to check
        store: Client used for probing and for writing the records
        progress: Optional callback, called with ``1`` per finished query

    Returns:
        Summary of the run
    """
    prober = EndpointProber(store, config.endpoints, timeout=config.probe_timeout)
    scheduler = EvaluationScheduler(prober, workers=config.workers)
    summary = scheduler.run(candidates, store.record, progress=progress)

    logger.info(
        f"Checked {summary.total} queries: {summary.succeeded} succeeded, "
        f"{summary.failed} failed ({summary.unresolved} without a working endpoint), "
        f"{summary.write_errors} not stored"
    )
    return summary


def run_checks(config: CheckConfig, progress: Optional[Progress] = None) -> RunSummary:
    """Check every candidate query of a QADO store.

    Raises:
        FetchError: If the candidates could not be fetched; nothing is
            evaluated in that case
    """
    with QadoStore.from_config(config) as store:
        candidates = store.fetch_candidates()
        logger.info(f"Found {len(candidates)} queries to check")
        return evaluate_candidates(config, candidates, store, progress=progress)
