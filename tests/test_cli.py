"""Tests for the package-analyzer command line."""

from __future__ import annotations

import json

from package_analyzer import cli
from package_analyzer import session as session_mod
from package_analyzer.models import RegistryInfo


def test_markdown_table_for_manifest(tmp_path, manifest_text, capsys):
    path = tmp_path / "package.json"
    path.write_text(manifest_text, encoding="utf-8")

    assert cli.main([str(path)]) == 0

    out = capsys.readouterr().out
    assert "# Package Analyzer: package.json" in out
    assert "| react | ^18.2.0 | N/A | N/A | dependency |" in out


def test_json_tree_for_lockfile(tmp_path, lockfile_text, capsys):
    path = tmp_path / "package-lock.json"
    path.write_text(lockfile_text, encoding="utf-8")

    assert cli.main([str(path), "--view", "tree", "--format", "json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["file"] == "package-lock.json"
    assert payload["stats"]["nested"] == 7
    assert "packages" not in payload
    assert payload["tree"]["name"] == "Dependencies"
    assert payload["tree"]["attributes"] == {"type": "root"}


def test_filter_and_fetch(tmp_path, manifest_text, capsys, monkeypatch):
    path = tmp_path / "package.json"
    path.write_text(manifest_text, encoding="utf-8")

    def fake_fetch_all(names, settings=None):
        return [RegistryInfo("99.0.0", "2024-02-01T00:00:00.000Z") for _ in names]

    monkeypatch.setattr(session_mod, "fetch_all", fake_fetch_all)

    code = cli.main([str(path), "--filter", "development", "--fetch", "--format", "json"])

    assert code == 0
    rows = json.loads(capsys.readouterr().out)["packages"]
    assert [r["name"] for r in rows] == ["jest", "lodash"]
    assert [r["index"] for r in rows] == [3, 4]
    assert all(r["outdated"] and r["state"] == "fetched" for r in rows)


def test_lockfile_rows_report_no_in_range(tmp_path, lockfile_text, capsys, monkeypatch):
    path = tmp_path / "package-lock.json"
    path.write_text(lockfile_text, encoding="utf-8")

    def fake_fetch_all(names, settings=None):
        return [RegistryInfo("99.0.0", "2024-02-01T00:00:00.000Z") for _ in names]

    monkeypatch.setattr(session_mod, "fetch_all", fake_fetch_all)

    assert cli.main([str(path), "--fetch", "--format", "json"]) == 0

    rows = json.loads(capsys.readouterr().out)["packages"]
    assert rows and all(r["inRange"] is None for r in rows)
    assert all(r["outdated"] for r in rows)


def test_malformed_input_exit_code(tmp_path, capsys):
    path = tmp_path / "package-lock.json"
    path.write_text("{oops", encoding="utf-8")

    assert cli.main([str(path)]) == 1
    assert "ERROR: Failed to parse" in capsys.readouterr().err


def test_missing_file_exit_code(tmp_path, capsys):
    assert cli.main([str(tmp_path / "package.json")]) == 1
    assert "ERROR" in capsys.readouterr().err


def test_bad_config_exit_code(tmp_path, manifest_text, capsys):
    path = tmp_path / "package.json"
    path.write_text(manifest_text, encoding="utf-8")
    config = tmp_path / "settings.json"
    config.write_text(json.dumps({"maxWorkers": -1}), encoding="utf-8")

    assert cli.main([str(path), "--config", str(config)]) == 1
    assert "Invalid configuration" in capsys.readouterr().err
