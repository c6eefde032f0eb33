from __future__ import annotations

import json
from unittest.mock import patch

from typer.testing import CliRunner

from columbo_connector.adapters.api import APIError
from columbo_connector.adapters.base import VerificationResult
from columbo_connector.cli.main import app


def invoke(cli_runner: CliRunner, tmp_path, args: list[str], **kwargs):
    return cli_runner.invoke(app, ["--cache-dir", str(tmp_path), *args], **kwargs)


def _store_credentials(cli_runner, tmp_path):
    result = invoke(cli_runner, tmp_path, ["auth", "set", "--username", "alice", "--token", "s3cret"])
    assert result.exit_code == 0


def test_fields_table(cli_runner, tmp_path):
    result = invoke(cli_runner, tmp_path, ["fields"])

    assert result.exit_code == 0
    assert "audit_name" in result.stdout
    assert "pages_found" in result.stdout


def test_fields_json(cli_runner, tmp_path):
    result = invoke(cli_runner, tmp_path, ["fields", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [entry["name"] for entry in payload][:2] == ["audit_name", "last_sweep_at"]


def test_auth_lifecycle(cli_runner, tmp_path):
    status = invoke(cli_runner, tmp_path, ["auth", "status"])
    assert status.exit_code == 1

    stored = invoke(cli_runner, tmp_path, ["auth", "set", "--username", "alice", "--token", "s3cret"])
    assert stored.exit_code == 0
    assert "NONE" in stored.stdout
    assert json.loads((tmp_path / "credentials.json").read_text())["username"] == "alice"

    status = invoke(cli_runner, tmp_path, ["auth", "status"])
    assert status.exit_code == 0
    assert "alice" in status.stdout

    reset = invoke(cli_runner, tmp_path, ["auth", "reset"])
    assert reset.exit_code == 0
    assert invoke(cli_runner, tmp_path, ["auth", "status"]).exit_code == 1


def test_auth_set_rejects_empty_username(cli_runner, tmp_path):
    result = invoke(cli_runner, tmp_path, ["auth", "set", "--username", "", "--token", "x"])

    assert result.exit_code == 1
    assert "INVALID_CREDENTIALS" in result.stdout


def test_credentials_file_override(cli_runner, tmp_path):
    target = tmp_path / "custom.json"

    result = invoke(cli_runner, tmp_path, ["--credentials-file", str(target), "auth", "set", "-u", "bob", "-t", "tok"])

    assert result.exit_code == 0
    assert json.loads(target.read_text()) == {"username": "bob", "token": "tok"}


def test_fetch_prints_envelope(cli_runner, tmp_path):
    _store_credentials(cli_runner, tmp_path)
    records = [{"name": "my-audit", "summary": {"pages": {"scanned": 10, "found": 12}}}]

    with patch("columbo_connector.adapters.api.columbo.ColumboClient.list_audits", return_value=records) as list_audits:
        result = invoke(cli_runner, tmp_path, ["fetch", "--account", "acct1", "-f", "pages_scanned", "-f", "pages_found"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["rows"] == [{"values": [10, 12]}]
    assert [entry["name"] for entry in payload["schema"]] == ["pages_scanned", "pages_found"]
    list_audits.assert_called_once_with("acct1", username="alice", token="s3cret")


def test_fetch_from_request_file(cli_runner, tmp_path):
    _store_credentials(cli_runner, tmp_path)
    request = tmp_path / "request.json"
    request.write_text(json.dumps({"fields": [{"name": "audit_name"}], "configParams": {"account": "acct1", "reportType": "audit"}}))

    with patch("columbo_connector.adapters.api.columbo.ColumboClient.list_audits", return_value=[{"name": "a-b-c"}]):
        result = invoke(cli_runner, tmp_path, ["fetch", "--request", str(request)])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["rows"] == [{"values": ["abc"]}]


def test_fetch_without_credentials(cli_runner, tmp_path):
    result = invoke(cli_runner, tmp_path, ["fetch", "--account", "acct1"])

    assert result.exit_code == 1
    assert "credentials are missing" in result.output


def test_fetch_unknown_field(cli_runner, tmp_path):
    _store_credentials(cli_runner, tmp_path)

    with patch("columbo_connector.adapters.api.columbo.ColumboClient.list_audits") as list_audits:
        result = invoke(cli_runner, tmp_path, ["fetch", "--account", "acct1", "-f", "bogus"])

    assert result.exit_code == 2
    assert "bogus" in result.output
    list_audits.assert_not_called()


def test_fetch_failure_hides_debug_detail(cli_runner, tmp_path):
    _store_credentials(cli_runner, tmp_path)

    with patch("columbo_connector.adapters.api.columbo.ColumboClient.list_audits", side_effect=APIError("HTTP 503 upstream")):
        result = invoke(cli_runner, tmp_path, ["fetch", "--account", "acct1"])

    assert result.exit_code == 1
    assert "Unable to fetch data" in result.output
    assert "HTTP 503" not in result.output


def test_fetch_failure_shows_debug_detail_with_flag(cli_runner, tmp_path):
    _store_credentials(cli_runner, tmp_path)

    with patch("columbo_connector.adapters.api.columbo.ColumboClient.list_audits", side_effect=APIError("HTTP 503 upstream")):
        result = invoke(cli_runner, tmp_path, ["--debug", "fetch", "--account", "acct1"])

    assert result.exit_code == 1
    assert "HTTP 503 upstream" in result.output


def test_config_and_schema_commands(cli_runner, tmp_path):
    config = invoke(cli_runner, tmp_path, ["config"])
    schema = invoke(cli_runner, tmp_path, ["schema"])

    assert config.exit_code == 0
    assert json.loads(config.stdout)["dateRangeRequired"] is False
    assert schema.exit_code == 0
    assert len(json.loads(schema.stdout)["schema"]) == 6


def test_verify_requires_credentials(cli_runner, tmp_path):
    result = invoke(cli_runner, tmp_path, ["verify", "--account", "acct1"])

    assert result.exit_code == 1
    assert "auth set" in result.output


def test_verify_reports_result(cli_runner, tmp_path):
    _store_credentials(cli_runner, tmp_path)

    with patch(
        "columbo_connector.cli.main.ColumboAdapter.verify",
        return_value=VerificationResult(success=False, message="Columbo API verification failed: HTTP 401"),
    ):
        result = invoke(cli_runner, tmp_path, ["verify", "--account", "acct1"])

    assert result.exit_code == 1
    assert "HTTP 401" in result.stdout


def test_fetch_unusable_account_reports_fetch_failure(cli_runner, tmp_path):
    _store_credentials(cli_runner, tmp_path)

    result = invoke(cli_runner, tmp_path, ["fetch", "--account", "acct\x7f", "-f", "audit_name"])

    assert result.exit_code == 1
    assert "Unable to fetch data" in result.output
