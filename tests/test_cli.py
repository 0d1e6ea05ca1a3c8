import json
from pathlib import Path

from typer.testing import CliRunner

from czmlkit.cli import app

runner = CliRunner()

VALID = [
    {"id": "document", "name": "CLI", "version": "1.0"},
    {"id": "pt", "position": {"cartographicDegrees": [10, 20, 0]}, "point": {}},
]


def _write(tmp_path: Path, name: str, payload) -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_validate_valid_file_as_json(tmp_path: Path):
    path = _write(tmp_path, "ok.czml", VALID)
    res = runner.invoke(app, ["validate", str(path), "--json"])
    assert res.exit_code == 0, res.output
    report = json.loads(res.output)
    assert report["valid"] is True
    assert report["packetCount"] == 2
    assert report["entityTypes"] == ["point"]


def test_validate_invalid_file_exits_one(tmp_path: Path):
    path = _write(tmp_path, "bad.czml", [{"id": "pt", "point": {"pixelSize": -1}}])
    res = runner.invoke(app, ["validate", str(path)])
    assert res.exit_code == 1
    assert "invalid" in res.output


def test_validate_unreadable_source_exits_two(tmp_path: Path):
    res = runner.invoke(app, ["validate", str(tmp_path / "missing.czml")])
    assert res.exit_code == 2
    assert "Load failed" in res.output


def test_validate_merges_several_files(tmp_path: Path):
    first = _write(tmp_path, "a.czml", VALID)
    second = _write(
        tmp_path,
        "b.czml",
        [{"id": "document", "name": "Other"}, {"id": "wall1", "wall": {}}],
    )
    res = runner.invoke(app, ["validate", str(first), str(second), "--json"])
    assert res.exit_code == 0, res.output
    report = json.loads(res.output)
    assert report["packetCount"] == 3
    assert report["entityTypes"] == ["point", "wall"]


def test_summary_command(tmp_path: Path):
    path = _write(tmp_path, "ok.czml", VALID)
    res = runner.invoke(app, ["summary", str(path)])
    assert res.exit_code == 0, res.output
    summary = json.loads(res.output)
    assert summary["name"] == "CLI"
    assert summary["entityCount"] == 1


def test_packets_command_lists_ids(tmp_path: Path):
    path = _write(tmp_path, "ok.czml", VALID + [{"name": "anon"}])
    res = runner.invoke(app, ["packets", str(path)])
    assert res.exit_code == 0, res.output
    assert "pt" in res.output


def test_examples_command_uses_base_url():
    res = runner.invoke(app, ["examples", "--base-url", "https://viewer.test"])
    assert res.exit_code == 0, res.output
    rows = json.loads(res.output)
    urls = {row["name"]: row["url"] for row in rows}
    assert urls["flight-path"] == "https://viewer.test/czml-examples/flight-path.czml"


def test_config_command_writes_file(tmp_path: Path):
    target = tmp_path / "out" / "czmlkit.toml"
    res = runner.invoke(app, ["config", "--write", str(target)])
    assert res.exit_code == 0, res.output
    assert target.exists()
    assert "examples_base_url" in target.read_text()


def test_log_dir_option_writes_log_file(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CZMLKIT_LOG_DIR", raising=False)
    path = _write(tmp_path, "ok.czml", VALID)
    log_dir = tmp_path / "cli_logs"
    res = runner.invoke(
        app, ["--log-dir", str(log_dir), "validate", str(path), "--json"]
    )
    assert res.exit_code == 0, res.output
    assert json.loads(res.output)["valid"] is True
    assert "Parsed 2 packets" in (log_dir / "czmlkit.log").read_text()


def test_no_log_file_without_log_dir(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CZMLKIT_LOG_DIR", raising=False)
    path = _write(tmp_path, "ok.czml", VALID)
    monkeypatch.chdir(tmp_path)
    res = runner.invoke(app, ["validate", str(path), "--json"])
    assert res.exit_code == 0, res.output
    assert sorted(p.name for p in tmp_path.iterdir()) == ["ok.czml"]
