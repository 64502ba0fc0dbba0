"""
QADO store client - read candidate queries, write check records.

The client talks plain SPARQL 1.1 protocol over HTTP:

- ``GET <fetch_url>?query=...`` for the candidate SELECT
- ``POST <update_url>`` with a form-encoded ``update`` for each record

Every thread gets its own ``requests.Session`` so workers never share
connection state.

Usage:
    from qadocheck.store import QadoStore

    with QadoStore("http://localhost:7200/repositories/qado",
                   "http://localhost:7200/repositories/qado/statements") as store:
        for candidate in store.fetch_candidates():
            print(candidate.id)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import requests
from pydantic import ValidationError
from rdflib import URIRef

from .config import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_UPDATE_TIMEOUT,
    QADO,
    USER_AGENT,
    XSD,
    CheckConfig,
    build_fetch_query,
)
from .errors import FetchError, WriteError
from .models import CandidateQuery, CheckRecord, FetchResponse

__all__ = [
    "MimeTypes",
    "QadoStore",
    "build_update",
]

logger = logging.getLogger(__name__)


class MimeTypes:
    """MIME types used when talking to SPARQL endpoints."""

    SPARQL_JSON = "application/sparql-results+json"
    JSON = "application/json"
    FORM = "application/x-www-form-urlencoded"


def _iri(value: str) -> str:
    try:
        return URIRef(value).n3()
    except Exception as e:
        raise ValueError(f"Cannot write {value!r} as an IRI: {e}") from e


def build_update(check: CheckRecord) -> str:
    """
    Build the SPARQL UPDATE that stores a check record.

    The update only inserts: a blank ``qado:SPARQLCheck`` node hung off the
    query, carrying the status property with the check time, plus the
    ``qado:correspondsToKnowledgeGraph`` link when an endpoint answered.

    Args:
        check: The record to store

    Returns:
        SPARQL 1.1 Update string

    Raises:
        ValueError: If the query id or endpoint is not a usable IRI
    """
    subject = _iri(check.query_id)
    lines = [
        f"PREFIX qado: <{QADO}>",
        f"PREFIX xsd: <{XSD}>",
        "insert {",
        f"  {subject} qado:hasSPARQLCheck [",
        "    a qado:SPARQLCheck ;",
        f'    qado:{check.status.property_name} "{check.timestamp_literal}"^^xsd:dateTime',
        "  ] .",
    ]
    if check.endpoint:
        lines.append(f"  {subject} qado:correspondsToKnowledgeGraph {_iri(check.endpoint)} .")
    lines.append("} where {}")
    return "\n".join(lines)


class QadoStore:
    """
    Client for the QADO triplestore and the HTTP primitive used for probing.

    Attributes:
        fetch_url: SPARQL query endpoint of the QADO store
        update_url: SPARQL update endpoint of the QADO store
        fetch_timeout: Timeout for the candidate fetch (seconds)
        update_timeout: Timeout for each update (seconds)
        fetch_query: SELECT query listing the candidates
    """

    def __init__(
        self,
        fetch_url: str,
        update_url: str,
        *,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        update_timeout: float = DEFAULT_UPDATE_TIMEOUT,
        fetch_query: Optional[str] = None,
    ) -> None:
        self.fetch_url = fetch_url
        self.update_url = update_url
        self.fetch_timeout = fetch_timeout
        self.update_timeout = update_timeout
        self.fetch_query = fetch_query or build_fetch_query()

        self._local = threading.local()
        self._lock = threading.Lock()
        self._sessions: list[requests.Session] = []

    @classmethod
    def from_config(cls, config: CheckConfig) -> QadoStore:
        return cls(
            config.fetch_url,
            config.update_url,
            fetch_timeout=config.fetch_timeout,
            update_timeout=config.update_timeout,
            fetch_query=config.fetch_query,
        )

    @property
    def session(self) -> requests.Session:
        """The calling thread's session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def get(self, url: str, query: str, *, accept: str, timeout: float) -> requests.Response:
        """
        Send a SPARQL query with HTTP GET.

        The query goes into the ``query`` parameter and is URL-encoded by
        requests. The status is not checked here.

        Raises:
            requests.exceptions.RequestException: On transport failure or timeout
        """
        return self.session.get(
            url,
            params={"query": query},
            headers={"Accept": accept},
            timeout=timeout,
        )

    def fetch_candidates(self, query: Optional[str] = None) -> list[CandidateQuery]:
        """
        Fetch the queries to check from the QADO store.

        Args:
            query: SELECT binding ``?query`` and ``?text`` (default: the
                configured fetch query)

        Returns:
            Candidates in the order the store returned them

        Raises:
            FetchError: On transport failure, HTTP error or a malformed body
        """
        try:
            response = self.get(
                self.fetch_url,
                query or self.fetch_query,
                accept=MimeTypes.SPARQL_JSON,
                timeout=self.fetch_timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Fetching candidate queries from {self.fetch_url} failed: {e}")
            raise FetchError(f"Fetching candidate queries failed: {e}") from e

        try:
            parsed = FetchResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Unexpected answer from {self.fetch_url}: {e}")
            raise FetchError(f"Malformed candidate query results: {e}") from e

        candidates = [
            CandidateQuery(id=binding.query.value, text=binding.text.value)
            for binding in parsed.results.bindings
        ]
        logger.debug(f"Fetched {len(candidates)} candidate queries")
        return candidates

    def record(self, check: CheckRecord) -> None:
        """
        Insert a check record into the QADO store.

        Raises:
            WriteError: If the update could not be built or was not accepted
        """
        try:
            update = build_update(check)
        except ValueError as e:
            raise WriteError(str(e)) from e

        try:
            response = self.session.post(
                self.update_url,
                data={"update": update},
                headers={"Content-Type": MimeTypes.FORM},
                timeout=self.update_timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise WriteError(f"Storing check for {check.query_id} failed: {e}") from e

        logger.debug(
            f"Stored {check.status.property_name} for {check.query_id}"
            + (f" at {check.endpoint}" if check.endpoint else "")
        )

    def close(self) -> None:
        """Close every session opened by this client."""
        with self._lock:
            for session in self._sessions:
                session.close()
            self._sessions.clear()
        self._local = threading.local()

    def __enter__(self) -> QadoStore:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"QadoStore({self.fetch_url!r}, {self.update_url!r})"
