"""Convert Verifiable Credentials between JWT claims and W3C JSON-LD shapes.

``normalize_credential`` accepts a compact JWT, JSON text, a JWT claims
payload, a JSON-LD credential, a legacy attestation or a credential carrying
``proof.jwt``, and returns the canonical W3C shape with a ``proof``.
``transform_credential_input`` goes the other way and produces JWT claims
with a nested ``vc`` envelope.

Application specific fields are carried through in both directions.

CLI Usage:
    python -m vcjwt.credential --help
    python -m vcjwt.credential normalize --input vc.jwt
    python -m vcjwt.credential transform --input vc.json
"""

import argparse
import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from vcjwt._utils import (
    clean_none,
    deep_copy,
    fill_claims_from_dates,
    fill_dates_from_claims,
    unique,
)
from vcjwt.constants import DEFAULT_CONTEXT, DEFAULT_VC_TYPE
from vcjwt.dispatch import FormatError, normalize_input

logger = logging.getLogger(__name__)


class UnsupportedShapeError(ValueError):
    """Raised when a credential uses a shape that cannot be converted."""


def is_legacy_attestation_format(payload: Any) -> bool:
    """Check for the flat attestation shape that predates the ``vc`` envelope."""
    return isinstance(payload, Mapping) and all(
        payload.get(key) for key in ("sub", "iss", "claim", "iat")
    )


def attestation_to_vc_format(payload: Mapping) -> dict:
    """Convert a legacy attestation payload into a ``vc``-enveloped JWT payload.

    ``claim`` becomes ``vc.credentialSubject`` and ``iat`` becomes ``nbf``
    unless ``nbf`` is already set. An existing ``vc`` is kept as ``issVc``.
    """
    rest = deep_copy(payload)
    iat = rest.pop("iat", None)
    nbf = rest.pop("nbf", None)
    claim = rest.pop("claim", None)
    vc = rest.pop("vc", None)

    result = {
        **rest,
        "nbf": nbf or iat,
        "vc": {
            "@context": [DEFAULT_CONTEXT],
            "type": [DEFAULT_VC_TYPE],
            "credentialSubject": claim,
        },
    }
    if vc is not None:
        result["issVc"] = vc
    return result


def normalize_credential(credential: Any) -> dict:
    """Normalize a credential into an unambiguous W3C credential.

    Args:
        credential: Compact JWT, JSON text, JWT payload, JSON-LD credential,
            legacy attestation, or a credential with a ``proof.jwt``.

    Returns:
        W3C credential dict with a ``proof`` entry. JWT sourced credentials get
        ``{"type": "JwtProof2020", "jwt": <token>}``; a caller supplied proof
        carrying ``jwt`` is kept as-is.

    Raises:
        FormatError: If a string input is neither a decodable JWT nor JSON.
        UnsupportedShapeError: If ``credentialSubject`` is not an object.
    """
    return normalize_input(credential, _normalize_credential_payload, "credential")


def transform_credential_input(credential: Mapping) -> dict:
    """Transform a W3C credential payload into a JWT compatible encoding.

    App specific fields are kept. Existing JWT claims take precedence: an
    explicit ``jti``, ``nbf``, ``exp`` or ``iss`` key, even one set to
    ``None``, is left intact and blocks the matching conversion.

    Args:
        credential: W3C credential, JWT payload or a mix of both.

    Returns:
        JWT claims dict with a nested ``vc`` envelope.

    Raises:
        FormatError: If ``credential`` is not a mapping.
        UnsupportedShapeError: If ``credentialSubject`` is an array.
    """
    if not isinstance(credential, Mapping):
        raise FormatError("unknown credential format")
    if isinstance(credential.get("credentialSubject"), (list, tuple)):
        raise UnsupportedShapeError("credentialSubject of type array not supported")

    source = deep_copy(credential)
    envelope = source.pop("vc", None)
    envelope = dict(envelope) if isinstance(envelope, Mapping) else {}

    subject = {
        **_subject_fields(source.pop("credentialSubject", None)),
        **_subject_fields(envelope.get("credentialSubject")),
    }
    if not credential.get("sub"):
        subject_id = subject.pop("id", None)
        if subject_id is not None:
            source["sub"] = subject_id
    envelope["credentialSubject"] = subject

    envelope["@context"] = unique(
        source.pop("context", None),
        source.pop("@context", None),
        envelope.get("@context"),
    )
    envelope["type"] = unique(source.pop("type", None), envelope.get("type"))

    if credential.get("id") and "jti" not in credential:
        source["jti"] = source.pop("id")

    fill_claims_from_dates(credential, source)

    if "iss" not in credential:
        issuer = source.get("issuer")
        if isinstance(issuer, Mapping):
            remaining = dict(issuer)
            issuer_id = remaining.pop("id", None)
            if issuer_id is not None:
                source["iss"] = issuer_id
            if remaining:
                source["issuer"] = remaining
            else:
                del source["issuer"]
        elif isinstance(issuer, str) and issuer:
            source["iss"] = source.pop("issuer")

    return {**source, "vc": envelope}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _normalize_credential_payload(payload: Mapping) -> dict:
    """Reconcile JWT claims (or an already JSON-LD shaped object) into W3C fields."""
    source = deep_copy(payload)
    if is_legacy_attestation_format(source):
        logger.debug("Converting legacy attestation payload to vc format")
        source = attestation_to_vc_format(source)

    envelope = source.pop("vc") if isinstance(source.get("vc"), Mapping) else {}

    subject = {
        **_subject_fields(source.pop("credentialSubject", None)),
        **_subject_fields(envelope.pop("credentialSubject", None)),
    }
    sub = source.pop("sub", None)
    if sub and not subject.get("id"):
        subject["id"] = sub

    issuer = source.get("issuer")
    if issuer is None or isinstance(issuer, Mapping):
        issuer = clean_none({"id": source.get("iss"), **(issuer or {})})
        if issuer.get("id"):
            source.pop("iss", None)

    if not source.get("id") and source.get("jti"):
        source["id"] = source.pop("jti")

    types = unique(source.pop("type", None), envelope.pop("type", None))
    contexts = unique(
        source.pop("context", None),
        source.pop("@context", None),
        envelope.pop("@context", None),
    )

    fill_dates_from_claims(source)

    result = {
        "@context": contexts,
        "type": types,
        **source,
        "issuer": issuer,
        "credentialSubject": subject,
    }
    if envelope:
        result["vc"] = envelope
    return result


def _subject_fields(subject: Any) -> dict:
    if subject is None:
        return {}
    if isinstance(subject, Mapping):
        return dict(subject)
    raise UnsupportedShapeError(
        f"credentialSubject of type {type(subject).__name__} not supported"
    )


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read().strip()
    return Path(path).read_text().strip()


def _write_output(data: dict, output: str | None) -> None:
    text = json.dumps(data, indent=2, default=str)
    if output:
        Path(output).write_text(text)
        print(f"Result written to {output}", file=sys.stderr)
    else:
        print(text)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point for credential conversion."""
    parser = argparse.ArgumentParser(
        prog="vcjwt.credential",
        description="Convert credentials between JWT claims and W3C JSON-LD",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m vcjwt.credential normalize --input vc.jwt
  python -m vcjwt.credential transform --input vc.json --output claims.json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    norm_parser = subparsers.add_parser(
        "normalize",
        help="Normalize a credential to the W3C shape",
        description="Read a compact JWT or JSON credential and print the W3C shape.",
    )
    norm_parser.add_argument(
        "--input", "-i", required=True, help="Credential file or '-' for stdin"
    )
    norm_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    trans_parser = subparsers.add_parser(
        "transform",
        help="Transform a W3C credential to JWT claims",
        description="Read a JSON credential and print the JWT claims payload.",
    )
    trans_parser.add_argument(
        "--input", "-i", required=True, help="Credential JSON file or '-' for stdin"
    )
    trans_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    text = _read_input(args.input)

    try:
        if args.command == "normalize":
            result = normalize_credential(text)
        else:
            result = transform_credential_input(json.loads(text))
    except (FormatError, UnsupportedShapeError, json.JSONDecodeError) as e:
        print(f"Conversion failed: {e}", file=sys.stderr)
        sys.exit(1)

    _write_output(result, args.output)


if __name__ == "__main__":
    main()
