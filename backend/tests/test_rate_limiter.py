"""
Unit tests for the in-memory fixed-window rate limiter.
"""
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from bureau.utils import rate_limiter
from bureau.utils.rate_limiter import rate_limit


def request_from(ip):
    return SimpleNamespace(client=SimpleNamespace(host=ip))


@pytest.fixture
def clock(monkeypatch):
    now = {"t": 1000.0}
    monkeypatch.setattr(rate_limiter, "time", SimpleNamespace(time=lambda: now["t"]))
    return now


def test_limit_then_new_window(clock):
    limiter = rate_limit("login", 2, 60)
    assert limiter(request_from("10.0.0.1")) is True
    assert limiter(request_from("10.0.0.1")) is True
    with pytest.raises(HTTPException) as exc:
        limiter(request_from("10.0.0.1"))
    assert exc.value.status_code == 429

    clock["t"] += 61
    assert limiter(request_from("10.0.0.1")) is True


def test_scopes_and_addresses_are_counted_separately(clock):
    login = rate_limit("login", 1, 60)
    claim = rate_limit("access_claim", 1, 60)
    assert login(request_from("10.0.0.1")) is True
    assert claim(request_from("10.0.0.1")) is True
    assert login(request_from("10.0.0.2")) is True


def test_expired_windows_are_evicted(clock):
    limiter = rate_limit("login", 5, 60)
    for i in range(3):
        limiter(request_from(f"10.0.0.{i}"))
    other_scope = rate_limit("access_claim", 5, 600)
    other_scope(request_from("10.0.0.9"))
    assert len(rate_limiter._rate_limit_store) == 4

    clock["t"] += 61
    limiter(request_from("10.0.0.50"))

    assert set(rate_limiter._rate_limit_store) == {
        ("login", "10.0.0.50"),
        ("access_claim", "10.0.0.9"),
    }
