"""Test suite for the assembly command line runner."""

from pathlib import Path

import pytest
import yaml

from fem_solid.cli.run_solver import TEMPLATE_CONFIG, main

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


@pytest.fixture
def degenerate_input(tmp_path):
    """Template task with its element collapsed onto the z = 0 plane."""
    data = yaml.safe_load(TEMPLATE_CONFIG)
    data["geometry"]["nodes"] = [[x, y, 0.0] for x, y, _ in data["geometry"]["nodes"]]
    path = tmp_path / "flat.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(data, f)
    return path


class TestMain:
    def test_template(self, capsys):
        assert main(["--template"]) == 0
        assert "task:" in capsys.readouterr().out

    def test_no_input(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.xml")]) == 1
        assert "not found" in capsys.readouterr().out

    def test_example_xml(self):
        assert main([str(EXAMPLES_DIR / "unit_tetra.xml")]) == 0

    def test_template_round_trip(self, tmp_path):
        path = tmp_path / "task.yaml"
        path.write_text(TEMPLATE_CONFIG)
        assert main([str(path), "--verbose"]) == 0

    def test_preview(self, tmp_path, capsys):
        path = tmp_path / "task.yaml"
        path.write_text(TEMPLATE_CONFIG)
        assert main([str(path), "--preview"]) == 0
        out = capsys.readouterr().out
        assert "TETRAHEDRA10" in out
        assert "Warnings" in out

    def test_degenerate_reported(self, degenerate_input):
        assert main([str(degenerate_input)]) == 0

    def test_degenerate_strict(self, degenerate_input):
        assert main([str(degenerate_input), "--strict"]) == 2

    def test_invalid_configuration(self, tmp_path):
        path = tmp_path / "task.yaml"
        path.write_text(TEMPLATE_CONFIG.replace("gauss_points_count: 4", "gauss_points_count: 6"))
        assert main([str(path)]) == 1

    def test_malformed_input(self, tmp_path):
        path = tmp_path / "task.xml"
        path.write_text("<task>")
        assert main([str(path)]) == 1
