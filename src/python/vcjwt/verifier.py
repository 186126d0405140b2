"""Verify JWT-encoded Verifiable Credentials and Presentations.

The JWS signature is checked first; the token is then normalized into the
W3C shape with its ``JwtProof2020`` proof.

CLI Usage:
    python -m vcjwt.verifier --help
    python -m vcjwt.verifier verify-vc --jwt vc.jwt --public-key key.jwk
    python -m vcjwt.verifier verify-vp --jwt vp.jwt --public-key key.jwk
"""

import argparse
import json
import sys
from pathlib import Path

from joserfc import jws

from vcjwt.credential import normalize_credential
from vcjwt.keys import PublicKeyType, import_jose_key, load_public_key, resolve_alg
from vcjwt.presentation import normalize_presentation


class VerificationError(Exception):
    """Raised when a credential/presentation JWT fails verification."""


def verify_credential_jwt(token: str, public_key: PublicKeyType) -> dict:
    """Verify a credential JWT and return the normalized W3C credential.

    Args:
        token: Compact JWS string (header.payload.signature).
        public_key: ES256 (P-256) or EdDSA (Ed25519) public key.

    Returns:
        The normalized credential dict, including its JWT proof.

    Raises:
        VerificationError: If the signature is invalid or the token is malformed.
    """
    _verify_jws(token, public_key)
    try:
        return normalize_credential(token)
    except ValueError as e:
        raise VerificationError(f"Invalid credential: {e}") from e


def verify_presentation_jwt(
    token: str,
    public_key: PublicKeyType,
    *,
    expected_nonce: str | None = None,
    expected_audience: str | None = None,
) -> dict:
    """Verify a presentation JWT and return the normalized W3C presentation.

    Embedded credentials are normalized but their own signatures are not
    checked here; verify them separately with :func:`verify_credential_jwt`.

    Args:
        token: Compact JWS string (header.payload.signature).
        public_key: ES256 (P-256) or EdDSA (Ed25519) public key.
        expected_nonce: If provided, verify the nonce claim matches.
        expected_audience: If provided, verify it is one of the verifiers.

    Returns:
        The normalized presentation dict, including its JWT proof.

    Raises:
        VerificationError: If the signature, nonce, or audience is invalid.
    """
    claims = _verify_jws(token, public_key)

    if expected_nonce is not None:
        actual_nonce = claims.get("nonce")
        if actual_nonce != expected_nonce:
            raise VerificationError(
                f"Nonce mismatch: expected {expected_nonce!r}, got {actual_nonce!r}"
            )

    try:
        presentation = normalize_presentation(token)
    except ValueError as e:
        raise VerificationError(f"Invalid presentation: {e}") from e

    if expected_audience is not None:
        verifiers = presentation.get("verifier") or []
        if expected_audience not in verifiers:
            raise VerificationError(
                f"Audience mismatch: expected {expected_audience!r}, "
                f"got {verifiers!r}"
            )

    return presentation


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _verify_jws(token: str, public_key: PublicKeyType) -> dict:
    """Verify a compact JWS token and return the decoded claims dict."""
    key = import_jose_key(public_key)
    alg = resolve_alg(public_key)

    try:
        result = jws.deserialize_compact(token, key, algorithms=[alg])
    except Exception as e:
        raise VerificationError(f"JWS verification failed: {e}") from e

    try:
        claims = json.loads(result.payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise VerificationError(f"Invalid payload JSON: {e}") from e

    if not isinstance(claims, dict):
        raise VerificationError("JWT payload is not a JSON object")
    return claims


def main():
    """CLI entry point for credential/presentation verification."""
    parser = argparse.ArgumentParser(
        prog="vcjwt.verifier",
        description="Verify credential and presentation JWTs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m vcjwt.verifier verify-vc --jwt vc.jwt --public-key key.jwk
  python -m vcjwt.verifier verify-vp --jwt vp.jwt --public-key key.jwk --nonce abc123
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    vc_parser = subparsers.add_parser(
        "verify-vc",
        help="Verify a credential JWT",
        description="Verify a credential JWT and print the normalized credential.",
    )
    vc_parser.add_argument("--jwt", required=True, help="VC JWT file or '-' for stdin")
    vc_parser.add_argument("--public-key", required=True, help="Public key (JWK file)")

    vp_parser = subparsers.add_parser(
        "verify-vp",
        help="Verify a presentation JWT",
        description="Verify a presentation JWT and print the normalized presentation.",
    )
    vp_parser.add_argument("--jwt", required=True, help="VP JWT file or '-' for stdin")
    vp_parser.add_argument("--public-key", required=True, help="Public key (JWK file)")
    vp_parser.add_argument("--nonce", help="Expected nonce (optional validation)")
    vp_parser.add_argument("--audience", help="Expected audience (optional validation)")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.jwt == "-":
        token = sys.stdin.read().strip()
    else:
        token = Path(args.jwt).read_text().strip()

    public_key = load_public_key(args.public_key)

    try:
        if args.command == "verify-vc":
            result = verify_credential_jwt(token, public_key)
        else:
            result = verify_presentation_jwt(
                token,
                public_key,
                expected_nonce=args.nonce,
                expected_audience=args.audience,
            )
    except VerificationError as e:
        print(f"Verification failed: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
