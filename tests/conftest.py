"""Shared fixtures for vcjwt tests."""

import json
from pathlib import Path

import pytest

from vcjwt.keys import generate_keypair, public_key_to_did_key

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _load_fixture(name: str) -> dict:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def p256_keypair():
    """A fresh P-256 key pair shared by the session."""
    return generate_keypair("ES256")


@pytest.fixture(scope="session")
def p256_private_key(p256_keypair):
    return p256_keypair[0]


@pytest.fixture(scope="session")
def p256_public_key(p256_keypair):
    return p256_keypair[1]


@pytest.fixture(scope="session")
def ed25519_keypair():
    """A fresh Ed25519 key pair shared by the session."""
    return generate_keypair("EdDSA")


@pytest.fixture(scope="session")
def ed25519_private_key(ed25519_keypair):
    return ed25519_keypair[0]


@pytest.fixture(scope="session")
def ed25519_public_key(ed25519_keypair):
    return ed25519_keypair[1]


@pytest.fixture(scope="session")
def p256_did(p256_public_key):
    return public_key_to_did_key(p256_public_key)


# ---------------------------------------------------------------------------
# Sample credentials
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_vc():
    """An unsigned W3C JSON-LD credential."""
    return _load_fixture("sample-vc.json")


@pytest.fixture()
def jwt_payload():
    """The JWT claims encoding of ``sample_vc``."""
    return _load_fixture("sample-jwt-payload.json")


@pytest.fixture()
def sample_vp(sample_vc):
    """An unsigned W3C presentation wrapping the sample credential."""
    return {
        "@context": ["https://www.w3.org/2018/credentials/v1"],
        "type": ["VerifiablePresentation"],
        "holder": "did:web:alice.example.com",
        "verifiableCredential": [sample_vc],
    }


@pytest.fixture()
def vc_jwt(jwt_payload, p256_private_key):
    """The sample JWT payload signed with the P-256 test key."""
    from vcjwt.signer import create_credential_jwt

    return create_credential_jwt(jwt_payload, p256_private_key)
