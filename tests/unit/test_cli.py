"""The ``python -m ledger_entry`` command."""

import json

import pytest

from ledger_entry.__main__ import main
from ledger_entry.protocol import keylets

pytestmark = pytest.mark.unit


@pytest.fixture
def snapshot_file(tmp_path, alice):
    document = {
        "ledger_index": 3,
        "validated": True,
        "objects": [
            {
                "index": str(keylets.account(alice)),
                "LedgerEntryType": "AccountRoot",
                "data": "C0FFEE",
                "Account": str(alice),
            }
        ],
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(document))
    return path


@pytest.fixture
def request_file(tmp_path):
    def _write(request) -> str:
        path = tmp_path / "request.json"
        path.write_text(json.dumps(request))
        return str(path)

    return _write


def test_prints_structured_response(
    snapshot_file, request_file, alice, capsys, tmp_path, monkeypatch
):
    monkeypatch.chdir(tmp_path)
    code = main([str(snapshot_file), request_file({"account_root": str(alice)})])
    out = json.loads(capsys.readouterr().out)
    assert code == 0
    assert out["node"]["Account"] == str(alice)
    assert out["index"] == str(keylets.account(alice))
    assert out["ledger_index"] == 3


def test_binary_flag(snapshot_file, request_file, alice, capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    code = main(
        [str(snapshot_file), request_file({"account_root": str(alice)}), "--binary"]
    )
    assert code == 0
    assert json.loads(capsys.readouterr().out)["node_binary"] == "C0FFEE"


def test_error_response_exits_non_zero(
    snapshot_file, request_file, capsys, tmp_path, monkeypatch
):
    monkeypatch.chdir(tmp_path)
    code = main([str(snapshot_file), request_file({}), "--api-version", "2"])
    assert code == 1
    assert json.loads(capsys.readouterr().out) == {"error": "invalidParams"}


def test_missing_snapshot_file(request_file, capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    code = main([str(tmp_path / "absent.json"), request_file({})])
    assert code == 1
    assert "Error:" in capsys.readouterr().err


def test_parse_error_on_version_1_is_reported(
    snapshot_file, request_file, capsys, tmp_path, monkeypatch
):
    monkeypatch.chdir(tmp_path)
    code = main([str(snapshot_file), request_file({"index": {"a": 1}})])
    assert code == 1
    assert "Error:" in capsys.readouterr().err


def test_structurally_malformed_snapshot(request_file, capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"objects": [5]}))
    code = main([str(path), request_file({})])
    assert code == 1
    assert "Error: ledger_index" in capsys.readouterr().err
