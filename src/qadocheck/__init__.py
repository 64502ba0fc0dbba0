"""QADOCheck: validation of the SPARQL queries stored in a QADO triplestore.

Main modules:
- store: QadoStore client for fetching candidate queries and writing check records
- classifier: decides what a knowledge-graph answer says about a query
- prober: EndpointProber, tries the knowledge graphs in order of precedence
- scheduler: EvaluationScheduler, evaluates all candidates on a thread pool
- runner: run_checks, the complete fetch / evaluate / store run
"""

from .classifier import classify
from .config import CHECK_ENDPOINTS, CheckConfig, build_fetch_query
from .errors import (
    FetchError,
    ProbeParseError,
    ProbeTransportError,
    QadoCheckError,
    WriteError,
)
from .models import CandidateQuery, CheckRecord, CheckStatus, ProbeResult, RunSummary
from .prober import EndpointProber
from .runner import evaluate_candidates, run_checks
from .scheduler import EvaluationScheduler
from .store import QadoStore, build_update

# Import version information
from .version import VERSION

__all__ = [
    "CHECK_ENDPOINTS",
    "VERSION",
    "CandidateQuery",
    "CheckConfig",
    "CheckRecord",
    "CheckStatus",
    "EndpointProber",
    "EvaluationScheduler",
    "FetchError",
    "ProbeParseError",
    "ProbeResult",
    "ProbeTransportError",
    "QadoCheckError",
    "QadoStore",
    "RunSummary",
    "WriteError",
    "build_fetch_query",
    "build_update",
    "classify",
    "evaluate_candidates",
    "run_checks",
]
