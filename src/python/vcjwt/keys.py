"""Signing keys for credential JWTs: generation, JWK import/export and did:key.

Supports P-256 (ES256) and Ed25519 (EdDSA).

CLI Usage:
    python -m vcjwt.keys --help
    python -m vcjwt.keys generate --algorithm ES256
    python -m vcjwt.keys did --input key.jwk
"""

import argparse
import base64
import json
import sys
from pathlib import Path

import base58
from cryptography.hazmat.primitives.asymmetric.ec import (
    SECP256R1,
    EllipticCurvePrivateKey,
    EllipticCurvePrivateNumbers,
    EllipticCurvePublicKey,
    EllipticCurvePublicNumbers,
    generate_private_key,
)
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)
from joserfc.jwk import ECKey, OKPKey

# Multicodec prefixes (varint-encoded)
_ED25519_MULTICODEC_PREFIX = b"\xed\x01"  # ed25519-pub 0xed
_P256_MULTICODEC_PREFIX = b"\x80\x24"  # p256-pub 0x1200

PrivateKey = Ed25519PrivateKey | EllipticCurvePrivateKey
PublicKeyType = Ed25519PublicKey | EllipticCurvePublicKey

SUPPORTED_ALGORITHMS = ("ES256", "EdDSA")


def generate_keypair(alg: str = "ES256") -> tuple[PrivateKey, PublicKeyType]:
    """Generate a fresh key pair for ``alg`` ("ES256" or "EdDSA")."""
    if alg == "ES256":
        private_key = generate_private_key(SECP256R1())
    elif alg == "EdDSA":
        private_key = Ed25519PrivateKey.generate()
    else:
        raise ValueError(f"Unsupported algorithm: {alg}")
    return private_key, private_key.public_key()


def resolve_alg(key: PrivateKey | PublicKeyType, alg: str | None = None) -> str:
    """Determine the JWS algorithm for a private or public key."""
    if alg is not None:
        return alg
    if isinstance(key, (EllipticCurvePrivateKey, EllipticCurvePublicKey)):
        return "ES256"
    if isinstance(key, (Ed25519PrivateKey, Ed25519PublicKey)):
        return "EdDSA"
    raise TypeError(f"Unsupported key type: {type(key)}")


# ---------------------------------------------------------------------------
# JWK
# ---------------------------------------------------------------------------


def key_to_jwk(key: PrivateKey | PublicKeyType) -> dict:
    """Export a key as a JWK dict; private keys include ``d``."""
    if isinstance(key, EllipticCurvePrivateKey):
        jwk = key_to_jwk(key.public_key())
        jwk["d"] = _b64url(key.private_numbers().private_value.to_bytes(32, "big"))
        return jwk
    if isinstance(key, EllipticCurvePublicKey):
        numbers = key.public_numbers()
        return {
            "kty": "EC",
            "crv": "P-256",
            "x": _b64url(numbers.x.to_bytes(32, "big")),
            "y": _b64url(numbers.y.to_bytes(32, "big")),
        }
    if isinstance(key, Ed25519PrivateKey):
        jwk = key_to_jwk(key.public_key())
        jwk["d"] = _b64url(
            key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
        )
        return jwk
    if isinstance(key, Ed25519PublicKey):
        return {
            "kty": "OKP",
            "crv": "Ed25519",
            "x": _b64url(key.public_bytes(Encoding.Raw, PublicFormat.Raw)),
        }
    raise TypeError(f"Unsupported key type: {type(key)}")


def import_jose_key(key: PrivateKey | PublicKeyType) -> ECKey | OKPKey:
    """Import a cryptography key into a joserfc JWK."""
    jwk_dict = key_to_jwk(key)
    if jwk_dict["kty"] == "EC":
        return ECKey.import_key(jwk_dict)
    return OKPKey.import_key(jwk_dict)


def jwk_to_key(jwk: dict) -> PrivateKey | PublicKeyType:
    """Rebuild a cryptography key from a JWK dict (private if ``d`` is present)."""
    if jwk.get("kty") == "EC" and jwk.get("crv") == "P-256":
        x = int.from_bytes(_b64url_decode(jwk["x"]), "big")
        y = int.from_bytes(_b64url_decode(jwk["y"]), "big")
        public_numbers = EllipticCurvePublicNumbers(x, y, SECP256R1())
        if "d" in jwk:
            d = int.from_bytes(_b64url_decode(jwk["d"]), "big")
            return EllipticCurvePrivateNumbers(d, public_numbers).private_key()
        return public_numbers.public_key()
    if jwk.get("kty") == "OKP" and jwk.get("crv") == "Ed25519":
        if "d" in jwk:
            return Ed25519PrivateKey.from_private_bytes(_b64url_decode(jwk["d"]))
        return Ed25519PublicKey.from_public_bytes(_b64url_decode(jwk["x"]))
    raise ValueError(f"Unsupported key type: {jwk.get('kty')}/{jwk.get('crv')}")


def load_private_key(jwk_path: str) -> PrivateKey:
    """Load a private key from a JWK file."""
    key = jwk_to_key(json.loads(Path(jwk_path).read_text()))
    if not isinstance(key, (EllipticCurvePrivateKey, Ed25519PrivateKey)):
        raise ValueError(f"{jwk_path} does not contain a private key")
    return key


def load_public_key(jwk_path: str) -> PublicKeyType:
    """Load a public key from a JWK file; a private JWK yields its public half."""
    key = jwk_to_key(json.loads(Path(jwk_path).read_text()))
    if isinstance(key, (EllipticCurvePrivateKey, Ed25519PrivateKey)):
        return key.public_key()
    return key


# ---------------------------------------------------------------------------
# did:key
# ---------------------------------------------------------------------------


def public_key_to_did_key(public_key: PublicKeyType) -> str:
    """Derive a did:key identifier (z6Mk... for Ed25519, zDn... for P-256)."""
    if isinstance(public_key, EllipticCurvePublicKey):
        # Compressed SEC1 encoding (33 bytes)
        raw = public_key.public_bytes(Encoding.X962, PublicFormat.CompressedPoint)
        prefix = _P256_MULTICODEC_PREFIX
    elif isinstance(public_key, Ed25519PublicKey):
        raw = public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)
        prefix = _ED25519_MULTICODEC_PREFIX
    else:
        raise TypeError(f"Unsupported key type: {type(public_key)}")
    return "did:key:z" + base58.b58encode(prefix + raw).decode()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _b64url(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _b64url_decode(s: str) -> bytes:
    """Base64url decode with padding restoration."""
    s += "=" * (-len(s) % 4)
    return base64.urlsafe_b64decode(s)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def main():
    """CLI entry point for key operations."""
    parser = argparse.ArgumentParser(
        prog="vcjwt.keys",
        description="Signing key utilities for credential JWTs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m vcjwt.keys generate --algorithm ES256 --output key.jwk
  python -m vcjwt.keys did --input key.jwk
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a new key pair",
        description="Generate a key pair and print it as a JWK.",
    )
    gen_parser.add_argument(
        "--algorithm",
        "-a",
        choices=SUPPORTED_ALGORITHMS,
        default="ES256",
        help="Key algorithm (default: ES256)",
    )
    gen_parser.add_argument(
        "--public-only", action="store_true", help="Output the public key only"
    )
    gen_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    did_parser = subparsers.add_parser(
        "did",
        help="Derive the did:key of a JWK",
        description="Print the did:key identifier for a public or private JWK.",
    )
    did_parser.add_argument("--input", "-i", required=True, help="JWK file")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "generate":
        private_key, public_key = generate_keypair(args.algorithm)
        jwk = key_to_jwk(public_key if args.public_only else private_key)
        output = json.dumps(jwk, indent=2)
        if args.output:
            Path(args.output).write_text(output)
            print(f"Key written to {args.output}", file=sys.stderr)
        else:
            print(output)

    elif args.command == "did":
        try:
            public_key = load_public_key(args.input)
        except ValueError as e:
            print(f"Key conversion failed: {e}", file=sys.stderr)
            sys.exit(1)
        print(public_key_to_did_key(public_key))


if __name__ == "__main__":
    main()
