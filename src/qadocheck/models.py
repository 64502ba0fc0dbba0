"""
Data models for QADO query checks.

Two families of models live here:

* Pydantic models describing the SPARQL JSON documents exchanged with the
  QADO store and the knowledge-graph endpoints. Decoding a response is a
  single validation against a closed set of shapes.
* Plain dataclasses for the values computed during a run (candidates,
  probe outcomes, check records and the run summary).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, Field, RootModel, StrictBool

__all__ = [
    "AskResult",
    "CandidateQuery",
    "CheckRecord",
    "CheckStatus",
    "EvidenceKind",
    "FetchResponse",
    "ProbeOutcome",
    "ProbeResponse",
    "ProbeResult",
    "RunSummary",
    "SelectResult",
    "Verdict",
]

# ── Wire models ───────────────────────────────────────────────────


class SelectBindings(BaseModel):
    """The ``results`` member of a SELECT response."""

    bindings: list[dict[str, Any]]


class SelectResult(BaseModel):
    """SPARQL JSON result of a SELECT query."""

    results: SelectBindings


class AskResult(BaseModel):
    """SPARQL JSON result of an ASK query."""

    boolean: StrictBool


class ProbeResponse(RootModel):
    """A probe response body: SELECT shape first, then ASK shape."""

    root: Annotated[Union[SelectResult, AskResult], Field(union_mode="left_to_right")]


class BindingValue(BaseModel):
    """One RDF term in a SPARQL JSON binding."""

    value: str
    type: Optional[str] = None


class CandidateBinding(BaseModel):
    """A row of the candidate fetch query."""

    query: BindingValue
    text: BindingValue


class FetchResults(BaseModel):
    bindings: list[CandidateBinding]


class FetchResponse(BaseModel):
    """SPARQL JSON result of the candidate fetch query."""

    results: FetchResults


# ── Run values ────────────────────────────────────────────────────


class Verdict(str, Enum):
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    INCONCLUSIVE = "inconclusive"


class EvidenceKind(str, Enum):
    """What in a response body decided the verdict."""

    NON_EMPTY_BINDINGS = "non-empty-bindings"
    EMPTY_BINDINGS = "empty-bindings"
    BOOLEAN_TRUE = "boolean-true"
    BOOLEAN_FALSE = "boolean-false"


class CheckStatus(str, Enum):
    """Outcome of a check, valued with the QADO property recording it."""

    SUCCEEDED = "testedSuccessfullyAt"
    FAILED = "didNotWorkAt"

    @property
    def property_name(self) -> str:
        return self.value


@dataclass(frozen=True)
class CandidateQuery:
    """A stored SPARQL query under test."""

    id: str
    text: str


@dataclass(frozen=True)
class ProbeOutcome:
    """Classification of one endpoint response.

    ``endpoint`` is empty when the outcome comes straight from the
    classifier; the prober fills it in for the endpoint it asked.
    """

    verdict: Verdict
    evidence: Optional[EvidenceKind] = None
    endpoint: Optional[str] = None

    @classmethod
    def confirmed(cls, evidence: EvidenceKind) -> ProbeOutcome:
        return cls(Verdict.CONFIRMED, evidence)

    @classmethod
    def rejected(cls, evidence: EvidenceKind) -> ProbeOutcome:
        return cls(Verdict.REJECTED, evidence)

    @classmethod
    def inconclusive(cls) -> ProbeOutcome:
        return cls(Verdict.INCONCLUSIVE)

    @property
    def is_definitive(self) -> bool:
        return self.verdict is not Verdict.INCONCLUSIVE


@dataclass(frozen=True)
class ProbeResult:
    """Result of probing all endpoints for one query.

    ``endpoint`` is None when no endpoint gave a definitive answer.
    """

    status: CheckStatus
    endpoint: Optional[str] = None
    evidence: Optional[EvidenceKind] = None

    @property
    def unresolved(self) -> bool:
        return self.endpoint is None


@dataclass(frozen=True)
class CheckRecord:
    """The check fact written back to the QADO store."""

    query_id: str
    status: CheckStatus
    endpoint: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def timestamp_literal(self) -> str:
        """Lexical form of the timestamp for an ``xsd:dateTime`` literal."""
        return self.timestamp.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")


@dataclass
class RunSummary:
    """Counts for a finished run."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    unresolved: int = 0
    write_errors: int = 0

    @property
    def written(self) -> int:
        return self.total - self.write_errors

    def add(self, record: CheckRecord) -> None:
        if record.status is CheckStatus.SUCCEEDED:
            self.succeeded += 1
        else:
            self.failed += 1
            if record.endpoint is None:
                self.unresolved += 1
