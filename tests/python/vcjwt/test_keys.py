"""Tests for key generation, JWK round trips and did:key derivation."""

import json

import pytest
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from vcjwt.keys import (
    generate_keypair,
    jwk_to_key,
    key_to_jwk,
    load_private_key,
    load_public_key,
    public_key_to_did_key,
    resolve_alg,
)


def test_generate_p256():
    private_key, public_key = generate_keypair("ES256")
    assert isinstance(private_key, EllipticCurvePrivateKey)
    assert resolve_alg(public_key) == "ES256"


def test_generate_ed25519():
    private_key, public_key = generate_keypair("EdDSA")
    assert isinstance(private_key, Ed25519PrivateKey)
    assert resolve_alg(private_key) == "EdDSA"


def test_generate_unsupported():
    with pytest.raises(ValueError, match="Unsupported algorithm"):
        generate_keypair("RS256")


def test_resolve_alg_override(p256_private_key):
    assert resolve_alg(p256_private_key, "ES384") == "ES384"


def test_p256_jwk(p256_private_key, p256_public_key):
    jwk = key_to_jwk(p256_private_key)
    assert jwk["kty"] == "EC"
    assert jwk["crv"] == "P-256"
    assert "d" in jwk
    assert "d" not in key_to_jwk(p256_public_key)


def test_ed25519_jwk(ed25519_private_key):
    jwk = key_to_jwk(ed25519_private_key)
    assert jwk["kty"] == "OKP"
    assert jwk["crv"] == "Ed25519"
    assert "d" in jwk


@pytest.mark.parametrize("alg", ["ES256", "EdDSA"])
def test_jwk_roundtrip(alg):
    private_key, public_key = generate_keypair(alg)
    restored = jwk_to_key(key_to_jwk(private_key))
    assert key_to_jwk(restored) == key_to_jwk(private_key)
    assert key_to_jwk(jwk_to_key(key_to_jwk(public_key))) == key_to_jwk(public_key)


def test_jwk_to_key_unsupported():
    with pytest.raises(ValueError, match="Unsupported key type"):
        jwk_to_key({"kty": "RSA"})


def test_did_key_prefixes(p256_public_key, ed25519_public_key):
    assert public_key_to_did_key(p256_public_key).startswith("did:key:zDn")
    assert public_key_to_did_key(ed25519_public_key).startswith("did:key:z6Mk")


def test_load_keys_from_files(tmp_path, p256_private_key, p256_public_key):
    key_file = tmp_path / "key.jwk"
    key_file.write_text(json.dumps(key_to_jwk(p256_private_key)))

    assert key_to_jwk(load_private_key(str(key_file))) == key_to_jwk(p256_private_key)
    assert key_to_jwk(load_public_key(str(key_file))) == key_to_jwk(p256_public_key)


def test_load_private_key_rejects_public_jwk(tmp_path, p256_public_key):
    key_file = tmp_path / "pub.jwk"
    key_file.write_text(json.dumps(key_to_jwk(p256_public_key)))
    with pytest.raises(ValueError, match="does not contain a private key"):
        load_private_key(str(key_file))
