"""Exceptions raised while checking QADO queries."""

from __future__ import annotations


class QadoCheckError(Exception):
    """Base exception for qadocheck errors."""

    pass


class FetchError(QadoCheckError):
    """Raised when the candidate queries cannot be fetched from the QADO store.

    Covers transport failures, non-success HTTP status and bodies that are
    not SPARQL JSON results with ``query``/``text`` bindings.
    """

    pass


class WriteError(QadoCheckError):
    """Raised when a check record could not be posted to the update endpoint."""

    pass


class ProbeTransportError(QadoCheckError):
    """Raised when a knowledge-graph endpoint could not be reached."""

    pass


class ProbeParseError(QadoCheckError):
    """Raised when a probe response is neither a SELECT nor an ASK result."""

    pass
