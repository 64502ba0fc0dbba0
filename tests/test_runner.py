"""End-to-end tests for a check run."""

from __future__ import annotations

import threading
from unittest.mock import patch

import pytest
import requests

from conftest import (
    ENDPOINT_A,
    ENDPOINT_B,
    FETCH_URL,
    UPDATE_URL,
    build_response,
    candidate_body,
    select_body,
)
from qadocheck.config import CheckConfig
from qadocheck.errors import FetchError
from qadocheck.runner import run_checks


class FakeServers:
    """Routes session calls to canned QADO store and knowledge-graph answers."""

    def __init__(self, fetch, endpoints, update_status=200):
        self.fetch = fetch
        self.endpoints = endpoints
        self.update_status = update_status
        self.probed = []
        self.updates = []
        self._lock = threading.Lock()

    def get(self, url, params=None, headers=None, timeout=None):
        if url == FETCH_URL:
            if isinstance(self.fetch, Exception):
                raise self.fetch
            return self.fetch
        with self._lock:
            self.probed.append(url)
        answer = self.endpoints[url]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def post(self, url, data=None, headers=None, timeout=None):
        assert url == UPDATE_URL
        with self._lock:
            self.updates.append(data["update"])
        return build_response(self.update_status)

    def install(self, session):
        session.get.side_effect = self.get
        session.post.side_effect = self.post


@pytest.fixture()
def config():
    return CheckConfig(FETCH_URL, UPDATE_URL, endpoints=(ENDPOINT_A, ENDPOINT_B), workers=2)


class TestRunChecks:
    """Test complete runs against fake servers."""

    def test_ask_confirmed_at_first_endpoint(self, mock_session, config):
        servers = FakeServers(
            build_response(200, candidate_body(("q1", "ASK { ?s ?p ?o }"))),
            {ENDPOINT_A: build_response(200, {"boolean": True})},
        )
        servers.install(mock_session)

        summary = run_checks(config)

        assert len(servers.updates) == 1
        update = servers.updates[0]
        assert "<q1> qado:hasSPARQLCheck" in update
        assert "qado:testedSuccessfullyAt" in update
        assert f"<q1> qado:correspondsToKnowledgeGraph <{ENDPOINT_A}>" in update
        assert servers.probed == [ENDPOINT_A]
        assert summary.succeeded == 1

    def test_timeout_then_empty_result(self, mock_session, config):
        servers = FakeServers(
            build_response(200, candidate_body(("q1", "SELECT * WHERE { ?s ?p ?o }"))),
            {
                ENDPOINT_A: requests.exceptions.Timeout("read timed out"),
                ENDPOINT_B: build_response(200, select_body()),
            },
        )
        servers.install(mock_session)

        summary = run_checks(config)

        assert len(servers.updates) == 1
        assert "qado:didNotWorkAt" in servers.updates[0]
        assert f"qado:correspondsToKnowledgeGraph <{ENDPOINT_B}>" in servers.updates[0]
        assert summary.failed == 1
        assert summary.unresolved == 0

    def test_no_endpoint_works(self, mock_session, config):
        servers = FakeServers(
            build_response(200, candidate_body(("http://example.org/q1", "ASK {}"))),
            {
                ENDPOINT_A: requests.exceptions.ConnectionError("refused"),
                ENDPOINT_B: requests.exceptions.ConnectionError("refused"),
            },
        )
        servers.install(mock_session)

        summary = run_checks(config)

        assert len(servers.updates) == 1
        assert "qado:didNotWorkAt" in servers.updates[0]
        assert "correspondsToKnowledgeGraph" not in servers.updates[0]
        assert summary.unresolved == 1

    def test_one_write_per_candidate(self, mock_session, config):
        pairs = [(f"http://example.org/q{i}", "ASK {}") for i in range(12)]
        servers = FakeServers(
            build_response(200, candidate_body(*pairs)),
            {ENDPOINT_A: build_response(200, {"boolean": True})},
        )
        servers.install(mock_session)
        steps = []

        summary = run_checks(config, progress=steps.append)

        assert len(servers.updates) == 12
        for query_id, _ in pairs:
            assert sum(f"<{query_id}> qado:hasSPARQLCheck" in u for u in servers.updates) == 1
        assert summary.total == 12
        assert len(steps) == 12

    def test_failed_writes_counted(self, mock_session, config):
        servers = FakeServers(
            build_response(200, candidate_body(("http://example.org/q1", "ASK {}"))),
            {ENDPOINT_A: build_response(200, {"boolean": True})},
            update_status=500,
        )
        servers.install(mock_session)

        summary = run_checks(config)

        assert summary.write_errors == 1
        assert summary.succeeded == 0

    def test_no_candidates(self, mock_session, config):
        servers = FakeServers(build_response(200, candidate_body()), {})
        servers.install(mock_session)

        summary = run_checks(config)

        assert summary.total == 0
        assert servers.updates == []

    @pytest.mark.parametrize(
        "fetch",
        [
            build_response(500, "Internal Server Error"),
            requests.exceptions.ConnectionError("refused"),
            build_response(200, "<html></html>"),
        ],
    )
    def test_fetch_failure_aborts(self, mock_session, config, fetch):
        servers = FakeServers(fetch, {})
        servers.install(mock_session)

        with patch("qadocheck.scheduler.ThreadPoolExecutor") as pool_cls:
            with pytest.raises(FetchError):
                run_checks(config)

        pool_cls.assert_not_called()
        assert servers.updates == []
        assert servers.probed == []
