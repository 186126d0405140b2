"""Sign Verifiable Credentials and Presentations as JWT claims (compact JWS).

The input is converted with :func:`vcjwt.credential.transform_credential_input`
or :func:`vcjwt.presentation.transform_presentation_input` before signing, so
W3C JSON-LD objects, JWT payloads and mixes of both are accepted.

CLI Usage:
    python -m vcjwt.signer --help
    python -m vcjwt.signer sign-vc --credential vc.json --key key.jwk
    python -m vcjwt.signer sign-vp --presentation vp.json --key key.jwk
"""

import argparse
import json
import sys
import time
from collections.abc import Mapping
from pathlib import Path

from joserfc import jws

from vcjwt._utils import clean_none, unique
from vcjwt.constants import DEFAULT_JWT_TYP
from vcjwt.credential import transform_credential_input
from vcjwt.keys import (
    PrivateKey,
    import_jose_key,
    load_private_key,
    public_key_to_did_key,
    resolve_alg,
)
from vcjwt.presentation import transform_presentation_input


def create_credential_jwt(
    credential: Mapping,
    private_key: PrivateKey,
    *,
    alg: str | None = None,
    kid: str | None = None,
    typ: str = DEFAULT_JWT_TYP,
) -> str:
    """Sign a credential as a JWT.

    Args:
        credential: W3C credential or JWT credential payload.
        private_key: ES256 (P-256) or EdDSA (Ed25519) private key.
        alg: Algorithm override. Default: ES256 for P-256, EdDSA for Ed25519.
        kid: Key ID for the JOSE header.
        typ: JOSE header typ.

    Returns:
        Compact JWS string (header.payload.signature).
    """
    claims = transform_credential_input(credential)
    if not claims.get("iss"):
        claims["iss"] = public_key_to_did_key(private_key.public_key())
    if "nbf" not in claims:
        claims["nbf"] = int(time.time())
    return _sign_claims(claims, private_key, alg=alg, kid=kid, typ=typ)


def create_presentation_jwt(
    presentation: Mapping,
    private_key: PrivateKey,
    *,
    alg: str | None = None,
    kid: str | None = None,
    nonce: str | None = None,
    audience: str | list[str] | None = None,
    typ: str = DEFAULT_JWT_TYP,
) -> str:
    """Sign a presentation as a JWT.

    Args:
        presentation: W3C presentation or JWT presentation payload.
        private_key: ES256 (P-256) or EdDSA (Ed25519) private key.
        alg: Algorithm override. Default: ES256 for P-256, EdDSA for Ed25519.
        kid: Key ID for the JOSE header.
        nonce: Challenge nonce for replay protection.
        audience: Intended audience, merged into ``aud``.
        typ: JOSE header typ.

    Returns:
        Compact JWS string (header.payload.signature).

    Raises:
        ValueError: If the presentation holds no credentials.
    """
    claims = transform_presentation_input(presentation)
    if not claims["vp"]["verifiableCredential"]:
        raise ValueError("Presentation must contain at least one verifiableCredential")

    if not claims.get("iss"):
        claims["iss"] = public_key_to_did_key(private_key.public_key())
    if audience is not None:
        claims["aud"] = unique(claims.get("aud"), audience)
    if nonce is not None:
        claims["nonce"] = nonce
    return _sign_claims(claims, private_key, alg=alg, kid=kid, typ=typ)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _sign_claims(
    claims: dict,
    private_key: PrivateKey,
    *,
    alg: str | None,
    kid: str | None,
    typ: str,
) -> str:
    alg = resolve_alg(private_key, alg)
    header = {"alg": alg, "typ": typ}
    if kid is not None:
        header["kid"] = kid

    # Claims explicitly left unset are not serialized
    payload = json.dumps(clean_none(claims), ensure_ascii=False).encode("utf-8")
    key = import_jose_key(private_key)
    return jws.serialize_compact(header, payload, key, algorithms=[alg])


def main():
    """CLI entry point for credential/presentation signing."""
    parser = argparse.ArgumentParser(
        prog="vcjwt.signer",
        description="Sign credentials and presentations as JWTs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m vcjwt.signer sign-vc --credential vc.json --key key.jwk --output vc.jwt
  python -m vcjwt.signer sign-vp --presentation vp.json --key key.jwk --nonce abc123
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    vc_parser = subparsers.add_parser(
        "sign-vc",
        help="Sign a Verifiable Credential as a JWT",
        description="Transform a credential to JWT claims and sign it.",
    )
    vc_parser.add_argument("--credential", "-c", required=True, help="VC JSON file")
    vc_parser.add_argument("--key", "-k", required=True, help="Private key (JWK file)")
    vc_parser.add_argument("--kid", help="Key ID for JOSE header")
    vc_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    vp_parser = subparsers.add_parser(
        "sign-vp",
        help="Sign a Verifiable Presentation as a JWT",
        description="Transform a presentation to JWT claims and sign it.",
    )
    vp_parser.add_argument("--presentation", "-p", required=True, help="VP JSON file")
    vp_parser.add_argument("--key", "-k", required=True, help="Private key (JWK file)")
    vp_parser.add_argument("--kid", help="Key ID for JOSE header")
    vp_parser.add_argument("--nonce", help="Challenge nonce for replay protection")
    vp_parser.add_argument("--audience", help="Intended audience (verifier DID or URL)")
    vp_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    private_key = load_private_key(args.key)

    try:
        if args.command == "sign-vc":
            vc = json.loads(Path(args.credential).read_text())
            jwt = create_credential_jwt(vc, private_key, kid=args.kid)
        else:
            vp = json.loads(Path(args.presentation).read_text())
            jwt = create_presentation_jwt(
                vp,
                private_key,
                kid=args.kid,
                nonce=args.nonce,
                audience=args.audience,
            )
    except ValueError as e:
        print(f"Signing failed: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        Path(args.output).write_text(jwt)
        print(f"Signed JWT written to {args.output}", file=sys.stderr)
    else:
        print(jwt)


if __name__ == "__main__":
    main()
