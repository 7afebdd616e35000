"""Security utilities: device key derivation, JWT tokens."""

import hashlib
import hmac
import json
import time
from dataclasses import dataclass, field

import jwt

from gardenauth.config import Settings
from gardenauth.errors import TokenVerificationError

# Registered JWT claims; everything else in a payload is a custom claim.
_RESERVED_CLAIMS = {"sub", "iat", "exp", "nbf", "iss", "aud", "jti"}


# --- Device Keys ---

def derive_key(serial: str, signing_key: str) -> str:
    """Derive the shared secret a controller presents for its serial.

    The JSON text must stay byte-identical to what provisioned keys were
    generated from: fields in this order, no whitespace, non-ASCII unescaped.
    That text is the HMAC key and the message is empty.
    """
    unique_key = json.dumps(
        {"serial": serial, "signingKey": signing_key},
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hmac.new(unique_key.encode("utf-8"), b"", hashlib.sha256).hexdigest()


def keys_match(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


# --- JWT Tokens ---

@dataclass
class VerifiedToken:
    subject: str
    claims: dict = field(default_factory=dict)


def issue_token(subject: str, claims: dict, config: Settings, issued_at: int | None = None) -> str:
    """Sign a token for ``subject`` carrying ``claims`` as top-level fields."""
    iat = int(time.time()) if issued_at is None else issued_at
    payload = {
        **claims,
        "sub": subject,
        "iat": iat,
        "exp": iat + config.token_lifetime_seconds,
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def verify_token(token: str, config: Settings) -> VerifiedToken:
    """Decode and validate a token. Raises TokenVerificationError on any failure."""
    try:
        payload = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as e:
        raise TokenVerificationError(str(e)) from e

    subject = payload.get("sub")
    if not subject:
        raise TokenVerificationError("Token has no subject")

    claims = {k: v for k, v in payload.items() if k not in _RESERVED_CLAIMS}
    return VerifiedToken(subject=subject, claims=claims)
