"""Tests for how hashurl logs"""

import logging

from hashurl import modify_url_query, parse_search, parse_url


def test_nothing_is_printed(capsys):
    modify_url_query("https://example.com?old=1", {"new": "value"})
    parse_url("not-a-valid-url")
    parse_url(b"/a?b=1")
    parse_search("=x&a=1")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_degradation_is_logged_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="hashurl")
    parse_url("not-a-valid-url")
    parse_search("=x&a=1")
    messages = [(record.name, record.levelno, record.getMessage()) for record in caplog.records]
    assert any(name == "hashurl.parse" and level == logging.DEBUG and "opaque url" in message for name, level, message in messages)
    assert any(name == "hashurl.query" and "empty key" in message for name, _, message in messages)


def test_a_successful_edit_logs_nothing(caplog):
    caplog.set_level(logging.DEBUG, logger="hashurl")
    modify_url_query("https://example.com?old=1", {"new": "value"})
    assert caplog.records == []
