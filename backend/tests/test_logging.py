"""
Tests for the structlog setup: renderer selection and page_info truncation.
"""
import io
import json
import logging
from urllib.parse import parse_qs, urlsplit

import pytest
import structlog

from tvcatalog.middleware.structlog_config import (
    PAGE_INFO_LOG_CHARS,
    configure,
    resolve_format,
    truncate_page_info,
)

TOKEN = "eyJ2IjoxLCJkaXIiOiJuZXh0IiwidmFsdWVzIjp7ImlkIjo1fX0"


class _Terminal(io.StringIO):
    def isatty(self):
        return True


@pytest.fixture
def log_stream(monkeypatch):
    """Route logging into a buffer as JSON, restoring the root handlers afterwards."""
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    stream = io.StringIO()
    configure("INFO", "json", stream=stream)
    yield stream
    root.handlers[:] = handlers
    root.setLevel(level)


def _events(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestTruncatePageInfo:
    def test_top_level(self):
        event = truncate_page_info(None, "warning", {"event": "x", "page_info": TOKEN})
        assert event["page_info"] == TOKEN[:PAGE_INFO_LOG_CHARS] + "..."

    def test_inside_query_params(self):
        params = {"limit": "2", "page_info": TOKEN}
        event = truncate_page_info(None, "info", {"event": "x", "query_params": params})
        assert event["query_params"] == {"limit": "2", "page_info": TOKEN[:PAGE_INFO_LOG_CHARS] + "..."}
        # the caller's dict is left alone
        assert params["page_info"] == TOKEN

    def test_short_and_missing_values_untouched(self):
        event = {"event": "x", "page_info": "abc", "query_params": {"limit": "2"}}
        assert truncate_page_info(None, "info", dict(event)) == event

    def test_non_string_ignored(self):
        assert truncate_page_info(None, "info", {"page_info": None}) == {"page_info": None}


class TestResolveFormat:
    @pytest.mark.parametrize("value", ["json", "JSON", "console"])
    def test_explicit(self, value):
        assert resolve_format(value, io.StringIO()) == value.lower()

    def test_auto_on_pipe(self):
        assert resolve_format("auto", io.StringIO()) == "json"
        assert resolve_format(None, io.StringIO()) == "json"

    def test_auto_on_terminal(self):
        assert resolve_format("auto", _Terminal()) == "console"

    def test_unknown(self):
        with pytest.raises(ValueError, match="LOG_FORMAT"):
            resolve_format("xml", io.StringIO())


class TestConfigure:
    def test_json_lines(self, log_stream):
        structlog.get_logger("tvcatalog.test").warning("invalid_page_info", page_info=TOKEN, reason="schema")
        event = _events(log_stream)[-1]
        assert event["event"] == "invalid_page_info"
        assert event["level"] == "warning"
        assert event["logger"] == "tvcatalog.test"
        assert event["page_info"] == TOKEN[:PAGE_INFO_LOG_CHARS] + "..."
        assert "timestamp" in event

    def test_level_filter(self, log_stream):
        structlog.get_logger("tvcatalog.test").debug("page_planned")
        assert _events(log_stream) == []

    def test_stdlib_records_rendered(self, log_stream):
        logging.getLogger("tvcatalog.stdlib").warning("plain %s", "record")
        event = _events(log_stream)[-1]
        assert event["event"] == "plain record"
        assert event["logger"] == "tvcatalog.stdlib"

    def test_format_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "console")
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        try:
            configure("INFO", stream=io.StringIO())
            renderer = root.handlers[0].formatter.processors[-1]
            assert isinstance(renderer, structlog.dev.ConsoleRenderer)
        finally:
            root.handlers[:] = handlers
            root.setLevel(level)

    def test_request_log_hides_token(self, client, base_url, log_stream):
        response = client.get(f"{base_url}/actors", params={"limit": "2"})
        token = parse_qs(urlsplit(response.links["next"]["url"]).query)["page_info"][0]
        assert len(token) > PAGE_INFO_LOG_CHARS

        client.get(response.links["next"]["url"])
        completed = [e for e in _events(log_stream) if e["event"] == "request_completed"]
        assert completed[-1]["query_params"]["page_info"] == token[:PAGE_INFO_LOG_CHARS] + "..."
        assert token not in log_stream.getvalue()
