"""
Unit Tests for TokenSession.

These tests verify:
1. A held token short-circuits authentication
2. Concurrent callers trigger a single authentication
3. A failed authentication leaves the session empty
"""

import threading
import time

import pytest

from pezesha.infrastructure.clients import TokenSession


def test_starts_empty():
    assert TokenSession().token is None


def test_ensure_authenticates_once():
    session = TokenSession()
    calls = []

    def authenticate():
        calls.append(1)
        session.store("tok")

    assert session.ensure(authenticate) == "tok"
    assert session.ensure(authenticate) == "tok"
    assert len(calls) == 1


def test_concurrent_callers_share_one_authentication():
    session = TokenSession()
    calls = []
    results = []

    def authenticate():
        calls.append(1)
        time.sleep(0.05)
        session.store("tok")

    def worker():
        results.append(session.ensure(authenticate))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert results == ["tok"] * 8


def test_failed_authentication_leaves_session_empty():
    session = TokenSession()

    def authenticate():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        session.ensure(authenticate)

    assert session.token is None


def test_empty_token_counts_as_missing():
    session = TokenSession()
    session.store("")
    calls = []

    def authenticate():
        calls.append(1)
        session.store("tok")

    assert session.ensure(authenticate) == "tok"
    assert len(calls) == 1
