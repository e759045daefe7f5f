"""
Tests for manup.io.http module.

Tests policy document retrieval including:
- Successful JSON retrieval
- HTTP, connection and decoding failures
- Header expansion from the environment
- JSONPath extraction
"""

from __future__ import annotations

import pytest
import requests
import requests_mock

from manup import __version__
from manup.exceptions import ConfigError, NetworkError
from manup.io import get_json, make_session
from manup.io.http import expand_headers, extract_path


class TestGetJson:
    """Tests for get_json."""

    def test_returns_decoded_body(self, metadata_url, sample_document):
        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            assert get_json(metadata_url) == sample_document

    def test_sends_default_headers(self, metadata_url):
        with requests_mock.Mocker() as m:
            m.get(metadata_url, json={})
            get_json(metadata_url)

            request = m.request_history[0]
            assert request.headers["User-Agent"] == f"manup/{__version__}"
            assert request.headers["Accept"] == "application/json"

    def test_uses_given_session(self, metadata_url):
        session = requests.Session()
        session.headers["X-Test"] = "1"

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json={})
            get_json(metadata_url, session=session)
            assert m.request_history[0].headers["X-Test"] == "1"

    @pytest.mark.parametrize("status", [403, 404, 500])
    def test_http_error(self, metadata_url, status):
        with requests_mock.Mocker() as m:
            m.get(metadata_url, status_code=status)
            with pytest.raises(NetworkError, match=str(status)):
                get_json(metadata_url)

    def test_connection_error(self, metadata_url):
        with requests_mock.Mocker() as m:
            m.get(metadata_url, exc=requests.exceptions.ConnectionError("refused"))
            with pytest.raises(NetworkError, match="failed to fetch metadata"):
                get_json(metadata_url)

    def test_invalid_json(self, metadata_url):
        with requests_mock.Mocker() as m:
            m.get(metadata_url, text="not json at all")
            with pytest.raises(NetworkError, match="invalid JSON response"):
                get_json(metadata_url)

    def test_metadata_path(self, metadata_url):
        with requests_mock.Mocker() as m:
            m.get(metadata_url, json={"result": {"policy": {"ios": None}}})
            document = get_json(metadata_url, metadata_path="$.result.policy")
        assert document == {"ios": None}

    def test_headers_expanded(self, metadata_url, monkeypatch):
        monkeypatch.setenv("MANUP_TEST_TOKEN", "secret")

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json={})
            get_json(metadata_url, headers={"Authorization": "${MANUP_TEST_TOKEN}"})
            assert m.request_history[0].headers["Authorization"] == "secret"


class TestHelpers:
    def test_expand_headers_drops_unset(self, monkeypatch):
        monkeypatch.delenv("MANUP_UNSET_VAR", raising=False)
        monkeypatch.setenv("MANUP_SET_VAR", "value")

        assert expand_headers(
            {"A": "${MANUP_UNSET_VAR}", "B": "${MANUP_SET_VAR}", "C": "plain"}
        ) == {"B": "value", "C": "plain"}

    def test_extract_path_no_match(self):
        with pytest.raises(NetworkError, match="did not match"):
            extract_path({"a": 1}, "$.b")

    def test_extract_path_invalid_expression(self):
        with pytest.raises(ConfigError, match="invalid metadata_path"):
            extract_path({"a": 1}, "$[[")

    def test_make_session_retries(self):
        session = make_session()
        adapter = session.get_adapter("https://example.com")

        assert adapter.max_retries.total == 3
        assert 503 in adapter.max_retries.status_forcelist
