"""Unit tests for per-request deadlines."""

from __future__ import annotations

import pytest

from knowledge_rag.deadline import Deadline
from knowledge_rag.errors import RequestTimeoutError


def test_unbounded_never_expires() -> None:
    d = Deadline.unbounded()
    assert d.remaining() is None
    assert not d.expired
    d.check("anything")
    assert d.timeout_for(30) == 30


def test_fresh_deadline_passes_check() -> None:
    d = Deadline(60)
    d.check("embedding")
    assert 0 < d.remaining() <= 60


def test_zero_budget_is_expired() -> None:
    d = Deadline(0)
    assert d.expired
    assert d.remaining() == 0.0
    with pytest.raises(RequestTimeoutError) as info:
        d.check("embedding")
    assert info.value.status_code == 408
    assert info.value.message == "Request timeout. Please try again."
    assert "embedding" in info.value.details


def test_timeout_for_is_bounded_by_remaining() -> None:
    assert Deadline(5).timeout_for(60) <= 5
    assert Deadline(120).timeout_for(60) == 60
