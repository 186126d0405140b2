"""Tests for the python -m command line entry points."""

import io
import json
import sys

import pytest

from vcjwt import credential, keys, presentation, signer, verifier


def _run(monkeypatch, module, *argv):
    monkeypatch.setattr(sys, "argv", [module.__name__, *argv])
    module.main()


def test_credential_normalize_jwt(monkeypatch, capsys, tmp_path, vc_jwt):
    token_file = tmp_path / "vc.jwt"
    token_file.write_text(vc_jwt)

    _run(monkeypatch, credential, "normalize", "--input", str(token_file))

    result = json.loads(capsys.readouterr().out)
    assert result["proof"]["jwt"] == vc_jwt


def test_credential_transform_to_file(monkeypatch, tmp_path, sample_vc):
    vc_file = tmp_path / "vc.json"
    vc_file.write_text(json.dumps(sample_vc))
    out_file = tmp_path / "claims.json"

    _run(
        monkeypatch,
        credential,
        "transform",
        "--input",
        str(vc_file),
        "--output",
        str(out_file),
    )

    claims = json.loads(out_file.read_text())
    assert claims["iss"] == "did:web:university.example.com"


def test_credential_normalize_bad_input_exits(monkeypatch, capsys, tmp_path):
    bad_file = tmp_path / "bad.txt"
    bad_file.write_text("not.a.valid.jwt.token")

    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, credential, "normalize", "--input", str(bad_file))

    assert exc.value.code == 1
    assert "unknown credential format" in capsys.readouterr().err


def test_presentation_transform_stdin(monkeypatch, capsys, sample_vp):
    monkeypatch.setattr(sys, "stdin", io.StringIO(json.dumps(sample_vp)))

    _run(monkeypatch, presentation, "transform", "--input", "-")

    claims = json.loads(capsys.readouterr().out)
    assert claims["iss"] == sample_vp["holder"]


def test_sign_and_verify_roundtrip(monkeypatch, capsys, tmp_path, sample_vc):
    key_file = tmp_path / "key.jwk"
    _run(monkeypatch, keys, "generate", "--output", str(key_file))

    vc_file = tmp_path / "vc.json"
    vc_file.write_text(json.dumps(sample_vc))
    jwt_file = tmp_path / "vc.jwt"
    _run(
        monkeypatch,
        signer,
        "sign-vc",
        "--credential",
        str(vc_file),
        "--key",
        str(key_file),
        "--output",
        str(jwt_file),
    )
    capsys.readouterr()

    _run(
        monkeypatch,
        verifier,
        "verify-vc",
        "--jwt",
        str(jwt_file),
        "--public-key",
        str(key_file),
    )
    result = json.loads(capsys.readouterr().out)
    assert result["credentialSubject"] == sample_vc["credentialSubject"]


def test_keys_did(monkeypatch, capsys, tmp_path):
    key_file = tmp_path / "key.jwk"
    _run(
        monkeypatch, keys, "generate", "--algorithm", "EdDSA", "--output", str(key_file)
    )
    capsys.readouterr()

    _run(monkeypatch, keys, "did", "--input", str(key_file))
    assert capsys.readouterr().out.strip().startswith("did:key:z6Mk")
