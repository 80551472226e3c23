"""End-to-end tests for the generate-autoload command."""

import os
import sys
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from autoloadgen import __version__
from autoloadgen.cli import app
from autoloadgen.config import DEFAULT_CACHE_FILENAME, GeneratorSettings

runner = CliRunner()


@pytest.fixture
def project(monkeypatch):
    monkeypatch.setenv("GENERATE_AUTOLOAD_GENERATED_BY", "generate-autoload autoload.php")
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        (root / "A.php").write_text("<?php\nclass Foo {}\n")
        (root / "B.php").write_text("<?php\nfunction bar() {}\n")
        yield root


def test_generates_autoload_file(project):
    outfile = project / "autoload.php"

    result = runner.invoke(app, [str(outfile)])

    assert result.exit_code == 0, result.output
    assert "Output written to" in result.output
    content = outfile.read_text()
    assert "// !! Generated by: generate-autoload autoload.php\n" in content
    assert "static $map = array (\n  'Foo' => 'A.php',\n);" in content
    assert content.count("require_once __DIR__ . '/") == 1
    assert "require_once __DIR__ . '/B.php';" in content
    assert (project / DEFAULT_CACHE_FILENAME).exists()


def test_second_run_is_identical_and_uses_cache(project):
    outfile = project / "autoload.php"

    runner.invoke(app, [str(outfile)])
    first = outfile.read_bytes()
    result = runner.invoke(app, [str(outfile)])

    assert result.exit_code == 0, result.output
    assert outfile.read_bytes() == first
    assert "2 unchanged, 0 scanned" in result.output


def test_no_cache_leaves_no_cache_file(project):
    outfile = project / "autoload.php"

    result = runner.invoke(app, [str(outfile), "--no-cache"])

    assert result.exit_code == 0, result.output
    assert not (project / DEFAULT_CACHE_FILENAME).exists()


def test_custom_cache_path(project):
    outfile = project / "autoload.php"
    cache_path = project / "build" / "scan.json"
    cache_path.parent.mkdir()

    result = runner.invoke(app, [str(outfile), "--cache-path", str(cache_path)])

    assert result.exit_code == 0, result.output
    assert cache_path.exists()
    assert not (project / DEFAULT_CACHE_FILENAME).exists()


def test_inputs_and_excludes(project):
    (project / "src" / "Skip").mkdir(parents=True)
    (project / "src" / "Keep.php").write_text("<?php\nnamespace App;\nclass Keep {}\n")
    (project / "src" / "Skip" / "Gone.php").write_text("<?php\nclass Gone {}\n")
    outfile = project / "autoload.php"

    result = runner.invoke(
        app,
        [str(outfile), str(project / "src"), "--exclude", str(project / "src" / "Skip"), str(project / "B.php")],
    )

    assert result.exit_code == 0, result.output
    content = outfile.read_text()
    assert "'App\\\\Keep' => 'src/Keep.php'," in content
    assert "Gone" not in content
    assert "'Foo'" not in content
    assert "require_once __DIR__ . '/B.php';" in content


def test_options(project):
    outfile = project / "autoload.php"

    result = runner.invoke(
        app,
        [str(outfile), "--require-method", "include", "--case-insensitive", "--prepend"],
    )

    assert result.exit_code == 0, result.output
    content = outfile.read_text()
    assert "'foo' => 'A.php'," in content
    assert "$class = strtolower($class);" in content
    assert "}, true, true);" in content
    assert "include __DIR__ . '/B.php';" in content


def test_settings_from_environment(project, monkeypatch):
    monkeypatch.setenv("GENERATE_AUTOLOAD_REQUIRE_METHOD", "require")
    monkeypatch.setenv("GENERATE_AUTOLOAD_USE_CACHE", "false")
    outfile = project / "autoload.php"

    result = runner.invoke(app, [str(outfile)])

    assert result.exit_code == 0, result.output
    assert "require __DIR__ . '/B.php';" in outfile.read_text()
    assert not (project / DEFAULT_CACHE_FILENAME).exists()
    assert GeneratorSettings().require_method.value == "require"


def test_invalid_require_method(project):
    result = runner.invoke(app, [str(project / "autoload.php"), "--require-method", "import"])

    assert result.exit_code != 0
    assert not (project / "autoload.php").exists()


def test_parse_error_aborts_without_output(project):
    (project / "C.php").write_text("<?php\nclass {\n")
    outfile = project / "autoload.php"

    result = runner.invoke(app, [str(outfile)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "C.php" in result.output
    assert not outfile.exists()
    assert not (project / DEFAULT_CACHE_FILENAME).exists()


def test_duplicate_class_warns(project):
    (project / "C.php").write_text("<?php\nclass Foo {}\n")
    outfile = project / "autoload.php"

    result = runner.invoke(app, [str(outfile)])

    assert result.exit_code == 0, result.output
    assert "Warning:" in result.output
    assert "'Foo' => 'C.php'," in outfile.read_text()


def test_hack_file_without_compiler_fails(project):
    (project / "Shape.hh").write_text("<?hh\nclass Shape {}\n")

    result = runner.invoke(app, [str(project / "autoload.php")])

    assert result.exit_code == 1
    assert "Hack" in result.output


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem that accepts arbitrary byte names")
def test_non_utf8_file_name_is_rejected(project):
    (project / os.fsdecode(b"caf\xe9.php")).write_text("<?php\nfunction f() {}\n")
    outfile = project / "autoload.php"

    result = runner.invoke(app, [str(outfile), "--no-cache"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "not valid UTF-8" in result.output
    assert "caf\\xe9.php" in result.output
    assert not outfile.exists()


@pytest.mark.parametrize("command", ["hhvm '--unbalanced", "   "])
def test_unusable_hack_compiler_command(project, command):
    outfile = project / "autoload.php"

    result = runner.invoke(app, [str(outfile), "--hack-compiler", command])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert not outfile.exists()


def test_case_insensitive_duplicate_warns(project):
    (project / "C.php").write_text("<?php\nclass FOO {}\n")
    outfile = project / "autoload.php"

    result = runner.invoke(app, [str(outfile), "--case-insensitive"])

    assert result.exit_code == 0, result.output
    assert "Warning:" in result.output
    assert "'foo' => 'C.php'," in outfile.read_text()
