"""Decode compact JWTs without verifying their signature.

This is the decode capability the normalizers depend on. It only splits and
parses the token; signature checks live in :mod:`vcjwt.verifier`.
"""

import json
from typing import Any, NamedTuple

from joserfc import jws
from joserfc.errors import JoseError


class DecodeError(ValueError):
    """Raised when a compact JWT cannot be decoded."""


class DecodedJWT(NamedTuple):
    header: dict[str, Any]
    payload: dict[str, Any]
    signature: str


def decode_jwt(token: str) -> DecodedJWT:
    """Split a compact JWT into its header, claims payload and signature.

    The header must name an ``alg`` (RFC 7515 section 4.1.1); joserfc rejects
    tokens without one, so they fail here even though the signature is never
    checked.

    Args:
        token: Compact JWT string (header.payload.signature).

    Returns:
        DecodedJWT with the parsed header and payload dicts.

    Raises:
        DecodeError: If the token is malformed or its payload is not a JSON object.
    """
    if not isinstance(token, str) or not token:
        raise DecodeError("JWT must be a non-empty string")

    try:
        result = jws.extract_compact(token.encode("utf-8"))
    except (JoseError, ValueError, TypeError) as e:
        raise DecodeError(f"Invalid JWT: {e}") from e

    try:
        payload = json.loads(result.payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Invalid JWT payload JSON: {e}") from e

    if not isinstance(payload, dict):
        raise DecodeError("JWT payload is not a JSON object")

    return DecodedJWT(dict(result.headers()), payload, token.rsplit(".", 1)[-1])
