"""Tests for input classification and format errors."""

import pytest

from vcjwt.dispatch import (
    FormatError,
    InputKind,
    classify_input,
    decode_claims,
    parse_json_input,
)


class TestClassifyInput:
    def test_jwt_string(self, vc_jwt):
        assert classify_input(vc_jwt) is InputKind.JWT

    def test_jwt_pattern_allows_empty_signature(self):
        assert classify_input("eyJhbGciOiJub25lIn0.eyJpc3MiOiJ4In0.") is InputKind.JWT

    def test_trailing_newline_is_json(self):
        assert classify_input("aGVhZA.cGF5bG9hZA.c2ln\n") is InputKind.JSON

    def test_too_many_segments_is_json(self):
        assert classify_input("not.a.valid.jwt.token") is InputKind.JSON

    def test_json_text(self):
        assert classify_input('{"iss": "did:x"}') is InputKind.JSON

    def test_mapping_with_jwt_proof(self, vc_jwt):
        value = {"proof": {"type": "JwtProof2020", "jwt": vc_jwt}}
        assert classify_input(value) is InputKind.PROOF_JWT

    def test_mapping_with_other_proof(self):
        value = {"proof": {"type": "Ed25519Signature2018", "jws": "abc..def"}}
        assert classify_input(value) is InputKind.PAYLOAD

    def test_plain_mapping(self):
        assert classify_input({"iss": "did:x"}) is InputKind.PAYLOAD

    @pytest.mark.parametrize("value", [42, None, ["a"], 1.5])
    def test_unsupported_types(self, value):
        with pytest.raises(FormatError, match="unknown credential format"):
            classify_input(value)

    def test_error_names_the_kind(self):
        with pytest.raises(FormatError, match="unknown presentation format"):
            classify_input(42, "presentation")


def test_parse_json_input_invalid():
    with pytest.raises(FormatError, match="unknown credential format"):
        parse_json_input("{not json")


def test_decode_claims(vc_jwt, jwt_payload):
    assert decode_claims(vc_jwt) == jwt_payload


def test_decode_claims_maps_decode_errors():
    with pytest.raises(FormatError, match="unknown presentation format"):
        decode_claims("abc.def.ghi", "presentation")
