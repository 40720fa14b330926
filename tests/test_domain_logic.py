from __future__ import annotations

import json
from datetime import timedelta

import pytest
from pydantic import ValidationError

from pastebin.domain.models import Paste
from pastebin.domain.state_machine import (
    ExpiryReason,
    PasteState,
    ViewLimitExhausted,
    consume_view,
    evaluate_liveness,
)
from pastebin.repositories.paste_repository import (
    PasteRepository,
    decode_paste,
    encode_paste,
    ttl_hint,
)

from tests.conftest import T0, BrokenBackend, RecordingBackend


def _paste(**kwargs) -> Paste:
    fields = {"id": "abc12345", "content": "hello", "created_at": T0}
    fields.update(kwargs)
    return Paste(**fields)


# ---------------------------------------------------------------------------
# Paste model
# ---------------------------------------------------------------------------


def test_paste_content_is_immutable() -> None:
    paste = _paste()

    with pytest.raises(ValidationError):
        paste.content = "new content"  # type: ignore[misc]


def test_expiry_must_follow_creation() -> None:
    with pytest.raises(ValidationError):
        _paste(expires_at=T0)


def test_remaining_views_cannot_be_negative() -> None:
    with pytest.raises(ValidationError):
        _paste(remaining_views=-1)


# ---------------------------------------------------------------------------
# Liveness
# ---------------------------------------------------------------------------


def test_unlimited_paste_is_always_live() -> None:
    paste = _paste()
    assert evaluate_liveness(paste, T0 + timedelta(days=3650)).is_live


def test_time_boundary_is_inclusive() -> None:
    paste = _paste(expires_at=T0 + timedelta(seconds=5))

    assert evaluate_liveness(paste, T0 + timedelta(seconds=5)).is_live
    late = evaluate_liveness(paste, T0 + timedelta(seconds=5, microseconds=1))
    assert late.state is PasteState.EXPIRED
    assert late.reason is ExpiryReason.TIME


def test_zero_remaining_views_is_expired_before_any_decrement() -> None:
    result = evaluate_liveness(_paste(remaining_views=0), T0)

    assert result.state is PasteState.EXPIRED
    assert result.reason is ExpiryReason.VIEWS


def test_time_expiry_reported_first_when_both_apply() -> None:
    paste = _paste(expires_at=T0 + timedelta(seconds=1), remaining_views=0)
    assert evaluate_liveness(paste, T0 + timedelta(seconds=2)).reason is ExpiryReason.TIME


def test_consume_view_decrements_by_exactly_one() -> None:
    paste = _paste(remaining_views=2)

    once = consume_view(paste)
    twice = consume_view(once)

    assert once.remaining_views == 1
    assert twice.remaining_views == 0
    # The input record is untouched.
    assert paste.remaining_views == 2


def test_consume_view_leaves_unlimited_paste_alone() -> None:
    paste = _paste()
    assert consume_view(paste) is paste


def test_consume_view_refuses_exhausted_paste() -> None:
    with pytest.raises(ViewLimitExhausted):
        consume_view(_paste(remaining_views=0))


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


def test_encoded_value_uses_epoch_ms_and_nulls() -> None:
    paste = _paste(expires_at=T0 + timedelta(seconds=5), remaining_views=3)

    data = json.loads(encode_paste(paste))

    assert data == {
        "content": "hello",
        "created_at": 1767268800000,
        "expires_at": 1767268805000,
        "remaining_views": 3,
    }
    assert json.loads(encode_paste(_paste()))["expires_at"] is None


def test_decode_restores_the_record_under_its_key() -> None:
    paste = _paste(content="ünïcode <b>", expires_at=T0 + timedelta(seconds=5))
    assert decode_paste("abc12345", encode_paste(paste)) == paste


def test_repository_namespaces_keys() -> None:
    backend = RecordingBackend()
    repo = PasteRepository(backend)

    repo.save(_paste(), ttl_seconds=7)

    key, _, ttl = backend.writes[0]
    assert key == "paste:abc12345"
    assert ttl == 7
    assert repo.get("abc12345") == _paste()
    assert repo.get("other") is None


def test_repository_remove_is_best_effort() -> None:
    repo = PasteRepository(BrokenBackend())
    assert repo.remove("abc12345") is False


def test_ttl_hint_rounds_up_and_never_drops_below_one() -> None:
    expires_at = T0 + timedelta(seconds=60)

    assert ttl_hint(None, T0) is None
    assert ttl_hint(expires_at, T0) == 60
    assert ttl_hint(expires_at, T0 + timedelta(seconds=10, milliseconds=500)) == 50
    assert ttl_hint(expires_at, expires_at) == 1
