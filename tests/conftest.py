"""Shared fixtures for qadocheck tests."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

FETCH_URL = "http://qado.example.org/sparql"
UPDATE_URL = "http://qado.example.org/update"
ENDPOINT_A = "http://kg-a.example.org/sparql"
ENDPOINT_B = "http://kg-b.example.org/sparql"


def build_response(status_code=200, body=b"", url="http://example.org/sparql"):
    """A real ``requests.Response`` with the given status and body.

    Dicts and lists are serialized as JSON.
    """
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response.url = url
    return response


def select_body(*rows):
    return {"head": {"vars": ["s"]}, "results": {"bindings": list(rows)}}


def candidate_body(*pairs):
    """Fetch query result for ``(query_id, text)`` pairs."""
    return {
        "head": {"vars": ["query", "text"]},
        "results": {
            "bindings": [
                {
                    "query": {"type": "uri", "value": query_id},
                    "text": {"type": "literal", "value": text},
                }
                for query_id, text in pairs
            ]
        },
    }


@pytest.fixture()
def make_response():
    return build_response


@pytest.fixture()
def mock_session():
    """Patch ``requests.Session`` in the store module with one shared mock."""
    with patch("qadocheck.store.requests.Session") as mock_session_cls:
        session = MagicMock()
        mock_session_cls.return_value = session
        yield session
