import json

import pytest
from typer.testing import CliRunner

from license_verifier.cli import app
from license_verifier.config import ENV_LICENSE_KEY, ENV_PUBLIC_KEY

runner = CliRunner()


@pytest.fixture
def key_file(tmp_path, public_pem):
    path = tmp_path / "public.pem"
    path.write_text(public_pem, encoding="utf-8")
    return path


def test_verify_valid_token_as_json(make_token, key_file):
    result = runner.invoke(
        app, ["verify", make_token(), "--public-key", str(key_file), "--now", "2029-06-01T00:00:00Z", "--json"]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["isValid"] is True
    assert data["payload"]["customerName"] == "Acme Manufacturing"


def test_verify_reads_token_from_file(make_token, key_file, tmp_path):
    token_file = tmp_path / "license.jwt"
    token_file.write_text(make_token() + "\n", encoding="utf-8")
    result = runner.invoke(app, ["verify", str(token_file), "-k", str(key_file), "--now", "2029-06-01T00:00:00+00:00"])
    assert result.exit_code == 0, result.output
    assert "Valid license" in result.output


def test_verify_expired_token_exits_non_zero(make_token, key_file):
    result = runner.invoke(app, ["verify", make_token(), "-k", str(key_file), "--now", "2031-01-01T00:00:00", "--json"])
    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data["error"] == "Expired"
    assert data["payload"] is not None


def test_verify_machine_binding(make_token, key_file):
    token = make_token(machineId="M1")
    args = ["verify", token, "-k", str(key_file), "--now", "2029-06-01T00:00:00Z"]

    assert runner.invoke(app, args + ["--fingerprint", "M1|extra-data"]).exit_code == 0
    mismatch = runner.invoke(app, args + ["--fingerprint", "M2|extra-data"])
    assert mismatch.exit_code == 1
    assert "MachineMismatch" in mismatch.output


def test_verify_rejects_conflicting_fingerprint_options(make_token, key_file):
    result = runner.invoke(
        app, ["verify", make_token(), "-k", str(key_file), "--fingerprint", "M1", "--this-machine"]
    )
    assert result.exit_code == 2


def test_verify_rejects_bad_now(make_token, key_file):
    result = runner.invoke(app, ["verify", make_token(), "-k", str(key_file), "--now", "yesterday"])
    assert result.exit_code == 2


def test_verify_with_embedded_key_rejects_test_token(make_token, monkeypatch):
    monkeypatch.delenv(ENV_PUBLIC_KEY, raising=False)
    result = runner.invoke(app, ["verify", make_token(), "--json"])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["error"] == "SignatureInvalid"


def test_fingerprint_command():
    result = runner.invoke(app, ["fingerprint"])
    assert result.exit_code == 0
    assert len(result.output.strip().split("|")) == 4


def test_status_command_reads_environment(make_token, public_pem, monkeypatch):
    monkeypatch.setenv(ENV_PUBLIC_KEY, public_pem)
    monkeypatch.setenv(ENV_LICENSE_KEY, make_token(expiresAt="2999-01-01T00:00:00Z"))
    result = runner.invoke(app, ["status", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["isValid"] is True
    assert data["maxProductLines"] == 5


def test_version_command():
    from license_verifier import __version__

    result = runner.invoke(app, ["version"])
    assert result.output.strip() == __version__
