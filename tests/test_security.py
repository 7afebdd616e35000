"""Device key derivation and token issuer tests."""

import hashlib
import hmac
import time

import pytest

from gardenauth.errors import TokenVerificationError
from gardenauth.utils.security import derive_key, issue_token, keys_match, verify_token


def test_derive_key_is_deterministic():
    assert derive_key("abc123", "secret") == derive_key("abc123", "secret")


def test_derive_key_depends_on_serial_and_secret():
    base = derive_key("abc123", "secret")
    assert derive_key("abc124", "secret") != base
    assert derive_key("abc123", "other") != base


def test_derive_key_uses_compact_json_as_hmac_key():
    expected = hmac.new(
        b'{"serial":"abc123","signingKey":"secret"}', b"", hashlib.sha256
    ).hexdigest()
    assert derive_key("abc123", "secret") == expected


def test_derive_key_is_hex_sha256():
    key = derive_key("abc123", "secret")
    assert len(key) == 64
    int(key, 16)


def test_keys_match():
    assert keys_match("abc", "abc")
    assert not keys_match("abc", "abd")
    assert not keys_match("", "abc")


def test_issue_and_verify_round_trip(config):
    token = issue_token("acc_1", {"claimedGardens": ["g1"]}, config)
    verified = verify_token(token, config)
    assert verified.subject == "acc_1"
    assert verified.claims == {"claimedGardens": ["g1"]}


def test_verify_rejects_expired_token(config):
    issued_at = int(time.time()) - config.token_lifetime_seconds - 60
    token = issue_token("acc_1", {}, config, issued_at=issued_at)
    with pytest.raises(TokenVerificationError):
        verify_token(token, config)


def test_verify_rejects_foreign_signature(config):
    token = issue_token("acc_1", {}, config.model_copy(update={"jwt_secret": "someone-else-" * 4}))
    with pytest.raises(TokenVerificationError):
        verify_token(token, config)


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
def test_verify_rejects_malformed_token(config, token):
    with pytest.raises(TokenVerificationError):
        verify_token(token, config)
