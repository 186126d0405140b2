"""Convert Verifiable Presentations between JWT claims and W3C JSON-LD shapes.

Mirrors :mod:`vcjwt.credential` for presentations. Each embedded credential
is normalized on the way in; on the way out, credentials that carry a JWT
proof are reduced back to their compact JWT.

CLI Usage:
    python -m vcjwt.presentation --help
    python -m vcjwt.presentation normalize --input vp.jwt
    python -m vcjwt.presentation transform --input vp.json
"""

import argparse
import json
import sys
from collections.abc import Mapping
from typing import Any

from vcjwt._utils import (
    as_array,
    deep_copy,
    fill_claims_from_dates,
    fill_dates_from_claims,
    unique,
)
from vcjwt.credential import (
    UnsupportedShapeError,
    _read_input,
    _write_output,
    normalize_credential,
)
from vcjwt.dispatch import FormatError, normalize_input


def normalize_presentation(presentation: Any) -> dict:
    """Normalize a presentation into an unambiguous W3C presentation.

    Args:
        presentation: Compact JWT, JSON text, JWT payload, JSON-LD
            presentation, or a presentation with a ``proof.jwt``.

    Returns:
        W3C presentation dict with a ``proof`` entry and every embedded
        credential normalized, in their original order.

    Raises:
        FormatError: If the presentation or one of its credentials is not in
            a recognizable format.
    """
    return normalize_input(
        presentation, _normalize_presentation_payload, "presentation"
    )


def transform_presentation_input(presentation: Mapping) -> dict:
    """Transform a W3C presentation payload into a JWT compatible encoding.

    App specific fields are kept. Existing JWT claims take precedence: an
    explicit ``jti``, ``nbf``, ``exp`` or ``iss`` key, even one set to
    ``None``, is left intact and blocks the matching conversion.

    Args:
        presentation: W3C presentation, JWT payload or a mix of both.

    Returns:
        JWT claims dict with a nested ``vp`` envelope. Embedded credentials
        with a ``proof.jwt`` are replaced by that JWT string.

    Raises:
        FormatError: If ``presentation`` is not a mapping.
    """
    if not isinstance(presentation, Mapping):
        raise FormatError("unknown presentation format")

    source = deep_copy(presentation)
    envelope = source.pop("vp", None)
    envelope = dict(envelope) if isinstance(envelope, Mapping) else {}

    envelope["@context"] = unique(
        source.pop("context", None),
        source.pop("@context", None),
        envelope.get("@context"),
    )
    envelope["type"] = unique(source.pop("type", None), envelope.get("type"))

    if presentation.get("id") and "jti" not in presentation:
        source["jti"] = source.pop("id")

    fill_claims_from_dates(presentation, source)

    credentials = _collect_credentials(
        source.pop("verifiableCredential", None),
        envelope.get("verifiableCredential"),
    )
    envelope["verifiableCredential"] = [_compact_credential(c) for c in credentials]

    holder = presentation.get("holder")
    if isinstance(holder, str) and holder and "iss" not in presentation:
        source["iss"] = source.pop("holder")

    if presentation.get("verifier"):
        source["aud"] = unique(source.pop("verifier"), source.get("aud"))

    return {**source, "vp": envelope}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _normalize_presentation_payload(payload: Mapping) -> dict:
    """Reconcile JWT claims (or an already JSON-LD shaped object) into W3C fields."""
    source = deep_copy(payload)
    envelope = source.pop("vp") if isinstance(source.get("vp"), Mapping) else {}

    credentials = _collect_credentials(
        source.pop("verifiableCredential", None),
        envelope.pop("verifiableCredential", None),
    )
    normalized = [normalize_credential(c) for c in credentials]

    if source.get("iss") and not source.get("holder"):
        source["holder"] = source.pop("iss")

    if source.get("aud"):
        source["verifier"] = unique(source.get("verifier"), source.pop("aud"))

    if source.get("jti") and "id" not in source:
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
        "verifiableCredential": normalized,
    }
    if envelope:
        result["vp"] = envelope
    return result


def _collect_credentials(*groups: Any) -> list:
    """Concatenate credential lists in order, dropping ``None`` entries."""
    return [c for group in groups for c in as_array(group) if c is not None]


def _compact_credential(credential: Any) -> Any:
    """Reduce a credential with a JWT proof to its compact JWT."""
    if isinstance(credential, Mapping):
        proof = credential.get("proof")
        if isinstance(proof, Mapping) and proof.get("jwt"):
            return proof["jwt"]
    return credential


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point for presentation conversion."""
    parser = argparse.ArgumentParser(
        prog="vcjwt.presentation",
        description="Convert presentations between JWT claims and W3C JSON-LD",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m vcjwt.presentation normalize --input vp.jwt
  python -m vcjwt.presentation transform --input vp.json --output claims.json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    norm_parser = subparsers.add_parser(
        "normalize",
        help="Normalize a presentation to the W3C shape",
        description="Read a compact JWT or JSON presentation and print the W3C shape.",
    )
    norm_parser.add_argument(
        "--input", "-i", required=True, help="Presentation file or '-' for stdin"
    )
    norm_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    trans_parser = subparsers.add_parser(
        "transform",
        help="Transform a W3C presentation to JWT claims",
        description="Read a JSON presentation and print the JWT claims payload.",
    )
    trans_parser.add_argument(
        "--input", "-i", required=True, help="Presentation JSON file or '-' for stdin"
    )
    trans_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    text = _read_input(args.input)

    try:
        if args.command == "normalize":
            result = normalize_presentation(text)
        else:
            result = transform_presentation_input(json.loads(text))
    except (FormatError, UnsupportedShapeError, json.JSONDecodeError) as e:
        print(f"Conversion failed: {e}", file=sys.stderr)
        sys.exit(1)

    _write_output(result, args.output)


if __name__ == "__main__":
    main()
