"""Tests for access tokens and anti-forgery nonces."""

import pytest

from core import create_access_token, create_nonce, decode_token, verify_nonce
from core.config import settings

ACTION = "stellarwp-admin-notice-dismiss"
NOW = 1_700_000_000.0


def test_access_token_round_trip() -> None:
    payload = decode_token(create_access_token("user-1"))

    assert payload["sub"] == "user-1"
    assert payload["type"] == "access"
    assert payload["exp"] > payload["iat"]


def test_decode_token_rejects_garbage_and_expired_tokens() -> None:
    with pytest.raises(ValueError):
        decode_token("not-a-token")
    with pytest.raises(ValueError):
        decode_token(create_access_token("user-1", expires_minutes=-5))


def test_nonce_is_short_hex_and_deterministic_within_a_tick() -> None:
    nonce = create_nonce(ACTION, "42", now=NOW)

    assert len(nonce) == 10
    int(nonce, 16)
    assert create_nonce(ACTION, "42", now=NOW + 1) == nonce


def test_nonce_verifies_for_two_half_lifetimes() -> None:
    half_life = settings.nonce_lifetime_seconds / 2
    nonce = create_nonce(ACTION, "42", now=NOW)

    assert verify_nonce(nonce, ACTION, "42", now=NOW) == 1
    assert verify_nonce(nonce, ACTION, "42", now=NOW + half_life) == 2
    assert verify_nonce(nonce, ACTION, "42", now=NOW + 2 * half_life) == 0


def test_nonce_is_bound_to_user_and_action() -> None:
    nonce = create_nonce(ACTION, "42", now=NOW)

    assert verify_nonce(nonce, ACTION, "43", now=NOW) == 0
    assert verify_nonce(nonce, "some-other-action", "42", now=NOW) == 0
    assert verify_nonce(nonce, ACTION, None, now=NOW) == 0


@pytest.mark.parametrize("candidate", ["", "short", "0123456789abcdef", "zzzzzzzzzz"])
def test_malformed_nonces_fail(candidate: str) -> None:
    assert verify_nonce(candidate, ACTION, "42", now=NOW) == 0


def test_nonce_depends_on_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    nonce = create_nonce(ACTION, "42", now=NOW)
    monkeypatch.setattr(settings, "secret_key", "rotated-secret")

    assert verify_nonce(nonce, ACTION, "42", now=NOW) == 0
