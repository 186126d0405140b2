"""Tests for compact JWT decoding."""

import base64
import json

import pytest
from joserfc import jws

from vcjwt.decoder import DecodeError, decode_jwt
from vcjwt.keys import import_jose_key


def _b64url(data: dict | list) -> str:
    raw = json.dumps(data).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def test_decode_signed_jwt(vc_jwt, jwt_payload):
    decoded = decode_jwt(vc_jwt)
    assert decoded.header["alg"] == "ES256"
    assert decoded.header["typ"] == "JWT"
    assert decoded.payload == jwt_payload
    assert decoded.signature == vc_jwt.split(".")[2]


def test_decode_does_not_check_signature(vc_jwt, jwt_payload):
    header, _, signature = vc_jwt.split(".")
    tampered = f"{header}.{_b64url({**jwt_payload, 'sub': 'did:web:mallory'})}.{signature}"
    assert decode_jwt(tampered).payload["sub"] == "did:web:mallory"


def test_decode_rejects_bad_segment_count():
    with pytest.raises(DecodeError):
        decode_jwt("only.two")


def test_decode_rejects_garbage_segments():
    with pytest.raises(DecodeError):
        decode_jwt("abc.def.ghi")


def test_decode_rejects_non_json_payload():
    header = _b64url({"alg": "ES256", "typ": "JWT"})
    payload = base64.urlsafe_b64encode(b"not json").rstrip(b"=").decode()
    with pytest.raises(DecodeError):
        decode_jwt(f"{header}.{payload}.c2ln")


def test_decode_rejects_non_object_payload(p256_private_key):
    key = import_jose_key(p256_private_key)
    token = jws.serialize_compact({"alg": "ES256"}, b"[1, 2]", key, algorithms=["ES256"])
    with pytest.raises(DecodeError, match="not a JSON object"):
        decode_jwt(token)


def test_decode_rejects_empty_input():
    with pytest.raises(DecodeError):
        decode_jwt("")


def test_decode_hand_built_token_string():
    token = f"{_b64url({'alg': 'EdDSA'})}.{_b64url({'iss': 'did:x'})}.sig"
    decoded = decode_jwt(token)
    assert decoded.header == {"alg": "EdDSA"}
    assert decoded.payload == {"iss": "did:x"}
    assert decoded.signature == "sig"


def test_decode_requires_alg_header():
    token = f"{_b64url({'typ': 'JWT'})}.{_b64url({'iss': 'did:x'})}.sig"
    with pytest.raises(DecodeError):
        decode_jwt(token)
