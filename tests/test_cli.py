"""
Tests for boxconf.cli module.

Tests command handlers including:
- validate exit codes and output
- resolve output formats
- Error reporting
"""

from __future__ import annotations

import json

import pytest
import yaml

from boxconf.cli import main


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestValidateCommand:
    """Tests for 'boxconf validate'."""

    def test_valid_file(self, create_yaml_file, sample_box_data, capsys):
        path = create_yaml_file("Boxfile.yaml", sample_box_data)

        code = _run(["validate", str(path)])

        assert code == 0
        assert "[SUCCESS]" in capsys.readouterr().out

    def test_invalid_file(self, create_yaml_file, capsys):
        path = create_yaml_file("Boxfile.yaml", {"nonsense": True})

        code = _run(["validate", str(path)])

        out = capsys.readouterr().out
        assert code == 1
        assert "Unknown field: nonsense" in out
        assert "[FAILED] 1 box file(s)" in out

    def test_recipe_list_with_mapping_is_invalid(self, tmp_path, capsys):
        path = tmp_path / "Boxfile.yaml"
        path.write_text("provision:\n  recipes:\n    - apache2\n    - mysql: {port: 3306}\n")

        code = _run(["validate", str(path)])

        out = capsys.readouterr().out
        assert code == 1
        assert "provision.recipes[1]: Must be a recipe name" in out


class TestResolveCommand:
    """Tests for 'boxconf resolve'."""

    def test_yaml_output(self, create_yaml_file, capsys):
        path = create_yaml_file("Boxfile.yaml", {"box": "lucid32"})

        code = _run(["resolve", str(path), "--platform", "linux"])

        assert code == 0
        assert yaml.safe_load(capsys.readouterr().out) == {"box": "lucid32", "box_url": ""}

    def test_json_output(self, create_yaml_file, capsys):
        path = create_yaml_file(
            "Boxfile.yaml", {"box": "lucid32", "forward_ports": [["web", 80, 8080]]}
        )

        code = _run(["resolve", str(path), "--platform", "linux", "--format", "json"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["forwarded_ports"] == [{"label": "web", "guest": 80, "host": 8080}]

    def test_missing_file(self, tmp_path, capsys):
        code = _run(["resolve", str(tmp_path / "missing.yaml")])

        assert code == 1
        assert "Box file not found" in capsys.readouterr().out

    def test_error_reported(self, create_yaml_file, capsys):
        path = create_yaml_file("Boxfile.yaml", {"fields": {"memory": 512}})

        code = _run(["resolve", str(path), "--platform", "linux"])

        assert code == 1
        assert "Error: Unknown machine directive" in capsys.readouterr().out

    def test_recipe_list_with_mapping_reported(self, tmp_path, capsys):
        path = tmp_path / "Boxfile.yaml"
        path.write_text(
            "box: lucid32\nprovision:\n  recipes:\n    - apache2\n    - mysql: {port: 3306}\n"
        )

        code = _run(["resolve", str(path), "--platform", "linux", "--no-defaults"])

        out = capsys.readouterr().out
        assert code == 1
        assert "Error:" in out
        assert "recipe names" in out
