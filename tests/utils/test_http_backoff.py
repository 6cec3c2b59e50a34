from __future__ import annotations

import pytest

from microcap.utils import http


@pytest.mark.parametrize(
    "attempt, expected",
    [(0, 0.5), (1, 1.0), (2, 2.0), (3, 4.0)],
)
def test_compute_backoff_delay_doubles(attempt, expected):
    assert http.compute_backoff_delay(attempt, 500) == expected


def test_compute_backoff_delay_never_negative():
    assert http.compute_backoff_delay(2, -100) == 0.0


def test_body_snippet_trims_and_bounds():
    assert http.body_snippet("  hello  ") == "hello"
    assert http.body_snippet(None) == ""
    assert http.body_snippet(b"bytes body") == "bytes body"
    assert len(http.body_snippet("y" * 500)) == http.BODY_SNIPPET_LIMIT


def test_ensure_ua_merges_headers():
    headers = http.ensure_ua({"X-Trace": "1"}, "microcap-test/1.0")
    assert headers["User-Agent"] == "microcap-test/1.0"
    assert headers["Accept"] == "application/json"
    assert headers["X-Trace"] == "1"


def test_is_success_boundaries():
    assert http.is_success(200)
    assert http.is_success(299)
    assert not http.is_success(199)
    assert not http.is_success(300)
    assert not http.is_success(429)
