"""Classify credential/presentation inputs and route them to a normalizer.

Inputs arrive in one of four shapes:

- ``JWT``: a compact JWT string
- ``JSON``: any other string, parsed as JSON text
- ``PROOF_JWT``: a mapping carrying ``proof.jwt``
- ``PAYLOAD``: any other mapping (JWT claims, JSON-LD or legacy attestation)
"""

import json
import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from vcjwt._utils import deep_copy
from vcjwt.constants import DEFAULT_JWT_PROOF_TYPE, JWT_FORMAT
from vcjwt.decoder import DecodeError, decode_jwt

logger = logging.getLogger(__name__)


class FormatError(ValueError):
    """Raised when an input is not a recognizable credential or presentation."""


class InputKind(Enum):
    JWT = "jwt"
    JSON = "json"
    PROOF_JWT = "proof_jwt"
    PAYLOAD = "payload"


def classify_input(value: Any, kind: str = "credential") -> InputKind:
    """Determine which representation ``value`` is in.

    Args:
        value: The raw input.
        kind: "credential" or "presentation", used in error messages.

    Raises:
        FormatError: If ``value`` is neither a string nor a mapping.
    """
    if isinstance(value, str):
        return InputKind.JWT if JWT_FORMAT.fullmatch(value) else InputKind.JSON
    if isinstance(value, Mapping):
        proof = value.get("proof")
        if isinstance(proof, Mapping) and proof.get("jwt"):
            return InputKind.PROOF_JWT
        return InputKind.PAYLOAD
    raise FormatError(f"unknown {kind} format")


def parse_json_input(text: str, kind: str = "credential") -> Any:
    """Strictly parse JSON text, mapping parse failures to FormatError."""
    try:
        return json.loads(text)
    except ValueError as e:
        raise FormatError(f"unknown {kind} format") from e


def decode_claims(token: str, kind: str = "credential") -> dict:
    """Decode a compact JWT and return its claims payload."""
    try:
        return decode_jwt(token).payload
    except DecodeError as e:
        logger.debug("Failed to decode %s JWT: %s", kind, e)
        raise FormatError(f"unknown {kind} format") from e


def normalize_input(
    value: Any,
    normalize_payload: Callable[[dict], dict],
    kind: str = "credential",
) -> dict:
    """Normalize any supported input shape and attach its ``proof``.

    Args:
        value: JWT string, JSON text, or a payload/JSON-LD mapping.
        normalize_payload: Field reconciliation for decoded claims.
        kind: "credential" or "presentation", used in error messages.

    Returns:
        The canonical object with a ``proof`` entry.
    """
    input_kind = classify_input(value, kind)
    logger.debug("Classified %s input as %s", kind, input_kind.value)

    if input_kind is InputKind.JWT:
        return _normalize_jwt(value, normalize_payload, kind)

    if input_kind is InputKind.JSON:
        parsed = parse_json_input(value, kind)
        return normalize_input(parsed, normalize_payload, kind)

    if input_kind is InputKind.PROOF_JWT:
        proof = value["proof"]
        result = _normalize_jwt(proof["jwt"], normalize_payload, kind)
        # Keep app specific proof properties
        result["proof"] = deep_copy(proof)
        return result

    return {"proof": {}, **normalize_payload(value)}


def _normalize_jwt(
    token: str,
    normalize_payload: Callable[[dict], dict],
    kind: str,
) -> dict:
    claims = decode_claims(token, kind)
    result = normalize_payload(claims)
    result["proof"] = {"type": DEFAULT_JWT_PROOF_TYPE, "jwt": token}
    return result
