"""vcjwt - Normalize Verifiable Credentials between JWT and W3C JSON-LD shapes.

This package reconciles the two encodings of W3C Verifiable Credentials:
- Normalize JWTs, JWT payloads and JSON-LD objects into the W3C shape
- Transform W3C credentials/presentations into JWT claims
- Sign and verify credential/presentation JWTs (ES256, EdDSA)
- Key generation and did:key derivation

Usage:
    from vcjwt import normalize_credential, transform_credential_input
    from vcjwt.presentation import normalize_presentation
    from vcjwt.signer import create_credential_jwt
"""


# Use lazy imports to avoid RuntimeWarning when running modules directly
def __getattr__(name):
    """Lazy import to avoid import cycle when running modules directly."""
    if name in (
        "normalize_credential",
        "transform_credential_input",
        "is_legacy_attestation_format",
        "attestation_to_vc_format",
        "UnsupportedShapeError",
    ):
        from vcjwt import credential

        return getattr(credential, name)
    elif name in ("normalize_presentation", "transform_presentation_input"):
        from vcjwt import presentation

        return getattr(presentation, name)
    elif name in ("FormatError", "InputKind", "classify_input"):
        from vcjwt import dispatch

        return getattr(dispatch, name)
    elif name in ("decode_jwt", "DecodeError", "DecodedJWT"):
        from vcjwt import decoder

        return getattr(decoder, name)
    elif name == "as_array":
        from vcjwt import _utils

        return _utils.as_array
    elif name in ("create_credential_jwt", "create_presentation_jwt"):
        from vcjwt import signer

        return getattr(signer, name)
    elif name in (
        "verify_credential_jwt",
        "verify_presentation_jwt",
        "VerificationError",
    ):
        from vcjwt import verifier

        return getattr(verifier, name)
    elif name in ("generate_keypair", "public_key_to_did_key"):
        from vcjwt import keys

        return getattr(keys, name)
    raise AttributeError(f"module 'vcjwt' has no attribute {name!r}")


__all__ = [
    # Credentials
    "normalize_credential",
    "transform_credential_input",
    "is_legacy_attestation_format",
    "attestation_to_vc_format",
    "UnsupportedShapeError",
    # Presentations
    "normalize_presentation",
    "transform_presentation_input",
    # Format detection
    "FormatError",
    "InputKind",
    "classify_input",
    "as_array",
    # JWT decoding
    "decode_jwt",
    "DecodeError",
    "DecodedJWT",
    # Signing / verification
    "create_credential_jwt",
    "create_presentation_jwt",
    "verify_credential_jwt",
    "verify_presentation_jwt",
    "VerificationError",
    # Keys
    "generate_keypair",
    "public_key_to_did_key",
]
