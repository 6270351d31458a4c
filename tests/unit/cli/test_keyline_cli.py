"""Tests for the keyline command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from keyline.cli import main as cli
from keyline.core.stylesheet.extractor import extract_rules


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CLI from reconfiguring the root logger under pytest."""
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


@pytest.fixture
def css_file(tmp_path: Path, fade_css: str) -> Path:
    path = tmp_path / "fade.css"
    path.write_text(fade_css, encoding="utf-8")
    return path


def test_inspect_json(css_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["inspect", str(css_file), "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["total_length_ms"] == 3000.0
    assert [rule["id"] for rule in data["style_rules"]] == ["fade .a 0"]
    assert data["style_rules"][0]["delay"] == 2000.0


def test_inspect_table(css_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["inspect", str(css_file)]) == 0
    out = capsys.readouterr().out
    assert "Timeline (3000ms)" in out
    assert "fade" in out


def test_inspect_empty(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "empty.css"
    path.write_text(".a { color: red }", encoding="utf-8")
    assert cli.main(["inspect", str(path)]) == 0
    assert "No animations or transitions found" in capsys.readouterr().out


def test_shift_delay_to_stdout(css_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["shift", str(css_file), "--rule", "fade .a 0", "--delay", "250"]) == 0
    assert capsys.readouterr().out.startswith(".a{animation:fade 1s 250ms ease-in;}")


def test_shift_duration_to_file(css_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "out.css"
    assert cli.main(["shift", str(css_file), "--rule", "fade .a 0", "--duration", "500", "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8").startswith(".a{animation:fade 500ms 2s ease-in;}")


def test_shift_to_current_value_succeeds(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Setting a value the source already has is still a located edit."""
    path = tmp_path / "same.css"
    path.write_text(".a{animation:fade 1s 2000ms;}", encoding="utf-8")

    assert cli.main(["shift", str(path), "--rule", "fade .a 0", "--delay", "2000"]) == 0
    assert capsys.readouterr().out.startswith(".a{animation:fade 1s 2000ms;}")


def test_shift_unknown_rule(css_file: Path) -> None:
    assert cli.main(["shift", str(css_file), "--rule", "nope", "--delay", "1"]) == 1


def test_ease_keyframe(css_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    argv = ["ease", str(css_file), "--rule", "fade .a 0", "--keyframe", "1", "--points", "0.1", "0.7", "1", "0.1"]
    assert cli.main(argv) == 0
    assert "to{\n    animation-timing-function: cubic-bezier(0.1,0.7,1,0.1);opacity:1}" in (
        capsys.readouterr().out
    )


def test_ease_out_of_range(css_file: Path) -> None:
    argv = ["ease", str(css_file), "--rule", "fade .a 0", "--keyframe", "9", "--points", "0", "0", "1", "1"]
    assert cli.main(argv) == 1


def test_missing_css_file(tmp_path: Path) -> None:
    assert cli.main(["inspect", str(tmp_path / "nope.css")]) == 1


def test_missing_config_file(css_file: Path, tmp_path: Path) -> None:
    assert cli.main(["--config", str(tmp_path / "nope.yaml"), "inspect", str(css_file)]) == 1


def test_shift_requires_one_change(css_file: Path) -> None:
    with pytest.raises(SystemExit):
        cli.main(["shift", str(css_file), "--rule", "fade .a 0"])


def test_build_rule_table(fade_css: str) -> None:
    extraction = extract_rules(fade_css)
    table = cli.build_rule_table(extraction.style_rules, extraction.total_length_ms)
    assert table.row_count == 1
    assert table.title == "Timeline (3000ms)"
