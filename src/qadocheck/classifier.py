"""Classify knowledge-graph responses to a probed query."""

from __future__ import annotations

import logging
from typing import Union

from pydantic import ValidationError

from .errors import ProbeParseError
from .models import AskResult, EvidenceKind, ProbeOutcome, ProbeResponse, SelectResult

__all__ = [
    "classify",
    "decode_response",
]

logger = logging.getLogger(__name__)


def decode_response(body: Union[bytes, str]) -> Union[SelectResult, AskResult]:
    """Decode a SPARQL JSON body into a SELECT or an ASK result.

    Args:
        body: Raw response body

    Returns:
        The decoded result, SELECT shape preferred

    Raises:
        ProbeParseError: If the body matches neither shape
    """
    try:
        return ProbeResponse.model_validate_json(body).root
    except ValidationError as e:
        raise ProbeParseError(
            f"Invalid answer provided: {e.error_count()} validation error(s), "
            f"first: {e.errors()[0]['msg']}"
        ) from e


def classify(status_code: int, body: Union[bytes, str]) -> ProbeOutcome:
    """Decide whether a response shows the endpoint holds the queried knowledge.

    A non-success status or an undecodable body is inconclusive. Empty
    bindings and ``false`` are definitive negative answers.
    """
    if not 200 <= status_code < 300:
        logger.warning(f"Endpoint answered with HTTP {status_code}")
        return ProbeOutcome.inconclusive()

    try:
        result = decode_response(body)
    except ProbeParseError as e:
        logger.warning(str(e))
        return ProbeOutcome.inconclusive()

    if isinstance(result, SelectResult):
        if result.results.bindings:
            return ProbeOutcome.confirmed(EvidenceKind.NON_EMPTY_BINDINGS)
        return ProbeOutcome.rejected(EvidenceKind.EMPTY_BINDINGS)

    if result.boolean:
        return ProbeOutcome.confirmed(EvidenceKind.BOOLEAN_TRUE)
    return ProbeOutcome.rejected(EvidenceKind.BOOLEAN_FALSE)
