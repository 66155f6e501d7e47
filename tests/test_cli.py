"""Tests for the minipatch command line."""

import pytest
import yaml
from click.testing import CliRunner

from minipatch import __version__
from minipatch.main import cli

ORIGINAL = "a\nb\nc\n"
PATCH = "--- a/f.txt\n+++ b/f.txt\n@@ -2 +2,2 @@\n-b\n+B\n+b2\n"
PATCHED = "a\nB\nb2\nc\n"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def files(tmp_dir):
    (tmp_dir / ".minipatch.yml").write_text(yaml.dump({"color": "never"}))
    original = tmp_dir / "f.txt"
    original.write_text(ORIGINAL, encoding="utf-8")
    patch = tmp_dir / "change.patch"
    patch.write_text(PATCH, encoding="utf-8")
    return tmp_dir, patch, original


def _invoke(runner, tmp_dir, *args):
    return runner.invoke(cli, ["--project-dir", str(tmp_dir), *args], env={"COLUMNS": "200"})


class TestApplyCommand:
    def test_prints_patched_text(self, runner, files):
        tmp_dir, patch, original = files
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original))
        assert result.exit_code == 0, result.output
        assert result.output == PATCHED
        assert original.read_text(encoding="utf-8") == ORIGINAL

    def test_output_file(self, runner, files):
        tmp_dir, patch, original = files
        out = tmp_dir / "out.txt"
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original), "-o", str(out))
        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8") == PATCHED

    def test_in_place_with_backup(self, runner, files):
        tmp_dir, patch, original = files
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original), "--in-place")
        assert result.exit_code == 0, result.output
        assert original.read_text(encoding="utf-8") == PATCHED
        assert (tmp_dir / "f.txt.orig").read_text(encoding="utf-8") == ORIGINAL

    def test_in_place_without_backup(self, runner, files):
        tmp_dir, patch, original = files
        (tmp_dir / ".minipatch.yml").write_text(yaml.dump({"backup-suffix": ""}))
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original), "-i")
        assert result.exit_code == 0, result.output
        assert not (tmp_dir / "f.txt.orig").exists()

    def test_crlf_preserved(self, runner, files):
        tmp_dir, patch, original = files
        original.write_bytes(b"a\r\nb\r\nc\r\n")
        patch.write_bytes(b"@@ -2 +2 @@\n-b\r\n+B\r\n")
        out = tmp_dir / "out.txt"
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original), "-o", str(out))
        assert result.exit_code == 0, result.output
        assert out.read_bytes() == b"a\r\nB\r\nc\r\n"

    def test_dry_run(self, runner, files):
        tmp_dir, patch, original = files
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original), "--dry-run")
        assert result.exit_code == 0, result.output
        assert "applies cleanly" in result.output
        assert original.read_text(encoding="utf-8") == ORIGINAL

    def test_mismatch_exits_with_line_number(self, runner, files):
        tmp_dir, patch, original = files
        original.write_text("a\nX\nc\n", encoding="utf-8")
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original), "-i")
        assert result.exit_code == 1
        assert "Line #2" in result.output
        assert original.read_text(encoding="utf-8") == "a\nX\nc\n"

    def test_parse_error_shows_cause(self, runner, files):
        tmp_dir, patch, original = files
        patch.write_text("@@ -2,5 +2,2 @@\n-b\n+B\n+b2\n", encoding="utf-8")
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original))
        assert result.exit_code == 1
        assert "Error occurred while parsing patch text" in result.output
        assert "caused by" in result.output

    def test_output_and_in_place_conflict(self, runner, files):
        tmp_dir, patch, original = files
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original), "-i", "-o", "x")
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_input_size_limit(self, runner, files):
        tmp_dir, patch, original = files
        (tmp_dir / ".minipatch.yml").write_text(yaml.dump({"max-input-bytes": 1024}))
        original.write_text("a\n" * 1000, encoding="utf-8")
        result = _invoke(runner, tmp_dir, "apply", str(patch), str(original))
        assert result.exit_code == 1
        assert "max-input-bytes" in result.output


class TestInspectCommand:
    def test_table(self, runner, files):
        tmp_dir, patch, _ = files
        result = _invoke(runner, tmp_dir, "inspect", str(patch))
        assert result.exit_code == 0, result.output
        assert "2,1" in result.output
        assert "Total character delta: +3" in result.output

    def test_bad_patch(self, runner, files):
        tmp_dir, patch, _ = files
        patch.write_text("nothing to see\n", encoding="utf-8")
        result = _invoke(runner, tmp_dir, "inspect", str(patch))
        assert result.exit_code == 1
        assert "No hunks found" in result.output


class TestConfigCommand:
    def test_show(self, runner, files):
        tmp_dir, _, _ = files
        result = _invoke(runner, tmp_dir, "config", "show")
        assert result.exit_code == 0, result.output
        assert "backup-suffix" in result.output
        assert ".minipatch.yml" in result.output

    def test_set(self, runner, files):
        tmp_dir, _, _ = files
        result = _invoke(runner, tmp_dir, "config", "set", "backup-suffix", ".bak")
        assert result.exit_code == 0, result.output
        data = yaml.safe_load((tmp_dir / ".minipatch.yml").read_text())
        assert data["backup-suffix"] == ".bak"

    def test_set_invalid(self, runner, files):
        tmp_dir, _, _ = files
        result = _invoke(runner, tmp_dir, "config", "set", "color", "rainbow")
        assert result.exit_code == 1
        assert "Invalid color" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
