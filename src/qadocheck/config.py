"""Configuration and constants for qadocheck."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from rdflib import Namespace

from .version import VERSION

__all__ = [
    "CHECK_ENDPOINTS",
    "CheckConfig",
    "DEFAULT_FETCH_TIMEOUT",
    "DEFAULT_PROBE_TIMEOUT",
    "DEFAULT_UPDATE_TIMEOUT",
    "QADO",
    "RDFS",
    "USER_AGENT",
    "XSD",
    "build_fetch_query",
]

QADO = Namespace("http://purl.com/qado/ontology.ttl#")
RDFS = Namespace("http://www.w3.org/2000/01/rdf-schema#")
XSD = Namespace("http://www.w3.org/2001/XMLSchema#")

# Knowledge graphs in order of precedence
CHECK_ENDPOINTS: tuple[str, ...] = (
    "https://dbpedia.org/sparql",
    "https://query.wikidata.org/sparql",
)

DEFAULT_FETCH_TIMEOUT = 60.0
DEFAULT_PROBE_TIMEOUT = 90.0
DEFAULT_UPDATE_TIMEOUT = 60.0

USER_AGENT = f"qadocheck/{VERSION} (SPARQL client)"

_FETCH_QUERY = """PREFIX qado: <{qado}>
PREFIX rdfs: <{rdfs}>
select ?query ?text where {{
  {question_pattern}
  ?query a qado:Query ; qado:hasQueryText ?text .
}} ORDER BY ?query"""

_SUBCLASS_PATTERN = (
    "?question a ?class ; qado:hasSparqlQuery ?query .\n"
    "  ?class rdfs:subClassOf qado:Question ."
)
_EXACT_CLASS_PATTERN = "?question a qado:Question ; qado:hasSparqlQuery ?query ."


def build_fetch_query(exact_class: bool = False) -> str:
    """Build the SELECT query listing the candidate queries of a QADO store.

    Args:
        exact_class: Select questions typed exactly ``qado:Question``
            instead of instances of its subclasses (the benchmark
            specific question classes).

    Returns:
        SPARQL SELECT query binding ``?query`` and ``?text``
    """
    pattern = _EXACT_CLASS_PATTERN if exact_class else _SUBCLASS_PATTERN
    return _FETCH_QUERY.format(qado=str(QADO), rdfs=str(RDFS), question_pattern=pattern)


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


@dataclass
class CheckConfig:
    """Settings for a single check run."""

    fetch_url: str
    update_url: str
    endpoints: tuple[str, ...] = field(default_factory=lambda: CHECK_ENDPOINTS)
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    update_timeout: float = DEFAULT_UPDATE_TIMEOUT
    # None means one worker per available CPU
    workers: Optional[int] = None
    exact_class: bool = False

    def __post_init__(self):
        if not self.endpoints:
            raise ValueError("At least one knowledge-graph endpoint is required")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be positive, got {self.workers}")

    @property
    def fetch_query(self) -> str:
        """The candidate query selection for this run."""
        return build_fetch_query(self.exact_class)

    @classmethod
    def from_env(cls, fetch_url: str, update_url: str, **overrides) -> "CheckConfig":
        """Create a config, taking timeouts and worker count from the environment.

        Explicit keyword overrides that are not None win over the
        environment.
        """
        workers = os.getenv("QADOCHECK_WORKERS")
        values = {
            "fetch_timeout": _env_float("QADOCHECK_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
            "probe_timeout": _env_float("QADOCHECK_PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT),
            "update_timeout": _env_float("QADOCHECK_UPDATE_TIMEOUT", DEFAULT_UPDATE_TIMEOUT),
            "workers": int(workers) if workers else None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(fetch_url=fetch_url, update_url=update_url, **values)
