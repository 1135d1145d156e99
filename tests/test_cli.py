"""Tests for the command line entry point."""

import json
from pathlib import Path

import pytest

from mustachio.__main__ import load_partials_dir, main
from mustachio.errors import ExitCode, InputError


def test_render_to_stdout(template_dir: Path, capsys: pytest.CaptureFixture[str]):
    code = main(
        [
            str(template_dir / "page.mustache"),
            "--data-file",
            str(template_dir / "data.json"),
            "--partials-dir",
            str(template_dir / "partials"),
        ]
    )
    assert code == ExitCode.SUCCESS
    assert capsys.readouterr().out == "<h1>A &amp; B</h1>\n  <li>one</li>\n  <li>two</li>\n"


def test_render_to_file(template_dir: Path):
    out = template_dir / "out.txt"
    code = main(
        [str(template_dir / "page.mustache"), "--data", '{"title": "T"}', "-o", str(out)]
    )
    assert code == ExitCode.SUCCESS
    assert out.read_text(encoding="utf-8") == "<h1>T</h1>\n"


def test_partials_file_overrides_dir(template_dir: Path, capsys: pytest.CaptureFixture[str]):
    partials_file = template_dir / "partials.json"
    partials_file.write_text(json.dumps({"item": "* {{name}}\n"}), encoding="utf-8")
    main(
        [
            str(template_dir / "page.mustache"),
            "-f",
            str(template_dir / "data.json"),
            "--partials-dir",
            str(template_dir / "partials"),
            "-p",
            str(partials_file),
        ]
    )
    assert capsys.readouterr().out == "<h1>A &amp; B</h1>\n  * one\n  * two\n"


def test_parse_error_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    template = tmp_path / "bad.mustache"
    template.write_text("{{#open}}", encoding="utf-8")
    assert main([str(template)]) == ExitCode.PARSE_ERROR
    assert "Unclosed section: open" in capsys.readouterr().err


def test_invalid_json(template_dir: Path, capsys: pytest.CaptureFixture[str]):
    code = main([str(template_dir / "page.mustache"), "--data", "{not json"])
    assert code == ExitCode.INPUT_ERROR
    assert "Invalid JSON" in capsys.readouterr().err


def test_missing_template(tmp_path: Path):
    assert main([str(tmp_path / "missing.mustache")]) == ExitCode.INPUT_ERROR


def test_max_partial_depth_from_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    template = tmp_path / "loop.mustache"
    template.write_text("{{> loop}}", encoding="utf-8")
    partials = tmp_path / "partials.json"
    partials.write_text(json.dumps({"loop": "{{> loop}}"}), encoding="utf-8")
    monkeypatch.setenv("MUSTACHIO_MAX_PARTIAL_DEPTH", "5")

    code = main([str(template), "-p", str(partials)])
    assert code == ExitCode.RUNTIME_ERROR
    assert "max depth of 5" in capsys.readouterr().err


def test_load_partials_dir_missing(tmp_path: Path):
    with pytest.raises(InputError):
        load_partials_dir(tmp_path / "nope")


def test_undecodable_template(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    template = tmp_path / "binary.mustache"
    template.write_bytes(b"\xff\xfe{{a}}")
    assert main([str(template)]) == ExitCode.INPUT_ERROR
    assert "Cannot read" in capsys.readouterr().err


def test_undecodable_partial(template_dir: Path, capsys: pytest.CaptureFixture[str]):
    (template_dir / "partials" / "item.mustache").write_bytes(b"\xff")
    code = main(
        [
            str(template_dir / "page.mustache"),
            "--partials-dir",
            str(template_dir / "partials"),
        ]
    )
    assert code == ExitCode.INPUT_ERROR
    assert "Cannot read" in capsys.readouterr().err


def test_unexpected_error_is_reported(
    template_dir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("mustachio.__main__.render", broken)
    assert main([str(template_dir / "page.mustache")]) == ExitCode.RUNTIME_ERROR
    assert "Unexpected error: boom" in capsys.readouterr().err
