"""Tests for the formata command-line interface."""

from __future__ import annotations

import json

import pytest

from formata.cli.main import build_arg_parser, main


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every command away from any formata.yaml in the repo."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def project_file(tmp_path, snapshot_dict):
    path = tmp_path / "show.json"
    path.write_text(json.dumps(snapshot_dict), encoding="utf-8")
    return path


class TestPresetCommands:
    """presets / preset."""

    def test_list_presets(self, capsys) -> None:
        """presets lists display names and keys."""
        assert main(["presets"]) == 0
        out = capsys.readouterr().out
        assert "Horizontal Line" in out
        assert "triangle_fill" in out

    def test_preset_coordinates(self, capsys) -> None:
        """preset prints one row of coordinates per performer."""
        assert main(["preset", "horizontal_line", "--count", "4"]) == 0
        out = capsys.readouterr().out
        assert "20.00" in out
        assert "80.00" in out

    def test_unknown_preset(self, capsys) -> None:
        """An unknown preset name exits 1 with an error."""
        assert main(["preset", "blob"]) == 1
        assert "Unknown preset" in capsys.readouterr().out


class TestProjectCommands:
    """evaluate / gaps / info."""

    def test_evaluate(self, capsys, project_file) -> None:
        """evaluate prints on-stage positions and the off-stage count."""
        assert main(["evaluate", str(project_file), "--at", "2000"]) == 0
        out = capsys.readouterr().out
        assert "Ana" in out
        assert "50.00" in out
        assert "1 performer(s) off stage" in out

    def test_gaps(self, capsys, project_file) -> None:
        """gaps prints each transition with its duration."""
        assert main(["gaps", str(project_file)]) == 0
        out = capsys.readouterr().out
        assert "Opening" in out
        assert "2000" in out

    def test_gaps_back_to_back(self, capsys, tmp_path, snapshot_dict) -> None:
        """Back-to-back frames report no transitions."""
        snapshot_dict["frames"][1]["startTime"] = 1000
        path = tmp_path / "tight.json"
        path.write_text(json.dumps(snapshot_dict), encoding="utf-8")

        assert main(["gaps", str(path)]) == 0
        assert "No transitions" in capsys.readouterr().out

    def test_info(self, capsys, project_file) -> None:
        """info summarizes the project."""
        assert main(["info", str(project_file)]) == 0
        out = capsys.readouterr().out
        assert "Spring Show" in out
        assert "Performers: 2" in out
        assert "Frames: 2" in out
        assert "Extent: 4000ms" in out

    def test_missing_project(self, capsys, tmp_path) -> None:
        """A missing project file exits 1."""
        assert main(["info", str(tmp_path / "missing.json")]) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_invalid_project(self, capsys, tmp_path) -> None:
        """A malformed project exits 1 with the schema error."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"frames": []}), encoding="utf-8")

        assert main(["info", str(path)]) == 1
        assert "missing performers" in capsys.readouterr().out


class TestConfigOption:
    """--app-config handling."""

    def test_missing_app_config(self, capsys) -> None:
        """A missing --app-config file exits 1."""
        assert main(["--app-config", "nope.yaml", "presets"]) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_invalid_app_config(self, capsys, tmp_path) -> None:
        """An invalid --app-config file exits 1."""
        path = tmp_path / "bad.yaml"
        path.write_text("editor:\n  stage_min: 100\n  stage_max: 0\n")
        assert main(["--app-config", str(path), "presets"]) == 1


def test_subcommand_required() -> None:
    """Running without a subcommand is a usage error."""
    with pytest.raises(SystemExit):
        build_arg_parser().parse_args([])
