"""Probe knowledge-graph endpoints with a candidate query."""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable

import requests

from .classifier import classify
from .config import CHECK_ENDPOINTS, DEFAULT_PROBE_TIMEOUT
from .errors import ProbeTransportError
from .models import CheckStatus, ProbeOutcome, ProbeResult, Verdict
from .store import MimeTypes, QadoStore

__all__ = [
    "EndpointProber",
]

logger = logging.getLogger(__name__)


class EndpointProber:
    """
    Runs a query against knowledge-graph endpoints in order of precedence.

    The first endpoint giving a definitive answer decides the result, be it
    positive (bindings, ``true``) or negative (no bindings, ``false``).
    Endpoints that cannot be reached, answer with an HTTP error or send a
    body that is not a SPARQL result are skipped.

    Example:
        >>> prober = EndpointProber(store)
        >>> result = prober.probe("ASK { ?s ?p ?o }")
        >>> result.status, result.endpoint
        (<CheckStatus.SUCCEEDED: 'testedSuccessfullyAt'>, 'https://dbpedia.org/sparql')
    """

    def __init__(
        self,
        store: QadoStore,
        endpoints: Iterable[str] = CHECK_ENDPOINTS,
        *,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        self.store = store
        self.endpoints = tuple(endpoints)
        self.timeout = timeout

        if not self.endpoints:
            raise ValueError("EndpointProber needs at least one endpoint")

    def probe_endpoint(self, endpoint: str, query_text: str) -> ProbeOutcome:
        """
        Ask a single endpoint and classify its answer.

        Raises:
            ProbeTransportError: If the endpoint could not be reached in time
        """
        try:
            response = self.store.get(
                endpoint, query_text, accept=MimeTypes.JSON, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise ProbeTransportError(f"Request to {endpoint} failed! {e}") from e

        outcome = classify(response.status_code, response.content)
        return dataclasses.replace(outcome, endpoint=endpoint)

    def probe(self, query_text: str) -> ProbeResult:
        """
        Find the first endpoint with a definitive answer to a query.

        Args:
            query_text: SPARQL query, sent as is

        Returns:
            ``SUCCEEDED`` or ``FAILED`` with the deciding endpoint, or
            ``FAILED`` without endpoint when no endpoint decided
        """
        for endpoint in self.endpoints:
            try:
                outcome = self.probe_endpoint(endpoint, query_text)
            except ProbeTransportError as e:
                logger.warning(str(e))
                continue

            if not outcome.is_definitive:
                logger.debug(f"No usable answer from {endpoint}, trying next endpoint")
                continue

            status = (
                CheckStatus.SUCCEEDED
                if outcome.verdict is Verdict.CONFIRMED
                else CheckStatus.FAILED
            )
            return ProbeResult(status=status, endpoint=endpoint, evidence=outcome.evidence)

        return ProbeResult(status=CheckStatus.FAILED)
