"""End-to-end tests running the CLI and checking the SVG drawing."""

import json
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest
from typer.testing import CliRunner

from curvebuffer import __version__
from curvebuffer.cli.app import app

SVG_PATH = "{http://www.w3.org/2000/svg}path"

runner = CliRunner()


@pytest.fixture
def shapes_file(tmp_path: Path) -> Path:
    path = tmp_path / "shapes.json"
    path.write_text(
        json.dumps(
            {
                "curves": [
                    {
                        "name": "zigzag",
                        "type": "polyline",
                        "points": [[50, 50], [50, 100], [100, 100], [100, 50], [150, 100], [150, 50]],
                    },
                    {
                        "name": "notched",
                        "type": "ring",
                        "points": [[100, 100], [200, 100], [200, 200], [150, 150], [100, 200]],
                    },
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


class TestBufferCommand:
    """Test the buffer command from input file to SVG output."""

    def test_writes_svg(self, shapes_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "drawing.svg"
        result = runner.invoke(
            app,
            [
                str(shapes_file),
                "--distance",
                "10",
                "--output",
                str(output),
                "--log-file",
                str(tmp_path / "run.log"),
            ],
        )

        assert result.exit_code == 0, result.output
        assert output.exists()
        ids = [p.get("id") for p in ET.parse(output).getroot().iter(SVG_PATH)]
        assert ids == ["zigzag-buffer", "notched-buffer", "zigzag-curve", "notched-curve"]

    def test_default_output_name(self, shapes_file: Path, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                str(shapes_file),
                "-d",
                "5",
                "-j",
                "mitre",
                "-c",
                "square",
                "-q",
                "--log-file",
                str(tmp_path / "run.log"),
            ],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "shapes-buffer.svg").exists()

    def test_info(self, shapes_file: Path) -> None:
        """Info mode describes the curves without buffering them."""
        result = runner.invoke(app, [str(shapes_file), "--info"])

        assert result.exit_code == 0, result.output
        assert "zigzag" in result.output
        assert "notched" in result.output
        assert not (shapes_file.parent / "shapes-buffer.svg").exists()

    def test_failed_curve(self, tmp_path: Path) -> None:
        """A curve that cannot be buffered makes the run fail, others are drawn."""
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps(
                {
                    "curves": [
                        {"name": "ok", "type": "polyline", "points": [[0, 0], [10, 0]]},
                        {
                            "name": "flat",
                            "type": "composite",
                            "elements": [
                                {"type": "arc3", "start": [0, 0], "mid": [1, 0], "end": [2, 0]}
                            ],
                        },
                    ]
                }
            ),
            encoding="utf-8",
        )
        result = runner.invoke(
            app, [str(path), "-d", "2", "-v", "--log-file", str(tmp_path / "run.log")]
        )

        assert result.exit_code == 1
        assert "flat" in result.output
        assert (tmp_path / "bad-buffer.svg").exists()


class TestCommandErrors:
    """Test argument validation."""

    def test_missing_distance(self, shapes_file: Path) -> None:
        result = runner.invoke(app, [str(shapes_file)])
        assert result.exit_code == 1
        assert "Missing buffer distance" in result.output

    def test_negative_distance(self, shapes_file: Path) -> None:
        result = runner.invoke(app, [str(shapes_file), "-d", "-1"])
        assert result.exit_code != 0

    def test_invalid_join(self, shapes_file: Path) -> None:
        result = runner.invoke(app, [str(shapes_file), "-d", "5", "--join", "spiky"])
        assert result.exit_code == 1
        assert "Invalid join style" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, [str(tmp_path / "missing.json"), "-d", "5"])
        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("[", encoding="utf-8")
        result = runner.invoke(app, [str(path), "-d", "5"])
        assert result.exit_code == 1
        assert "Could not load curves" in result.output

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
