"""Tests for the command-line interface.

WHY: The CLI is how records actually reach the registry. It must keep
rendered output on stdout, diagnostics on stderr, and honour the
sequencing flag over the environment.

HOW: main() is called with explicit argv. stdin is replaced with a
StringIO via monkeypatch; capsys captures both streams. The
restore_root_logging fixture undoes the CLI's logging setup.
"""

import io
import json

import pytest

from pipeline_reassembler.cli import build_parser, main

from conftest import MIXED_RECORDS, PERMISSIVE_OUTPUT, STRICT_OUTPUT

pytestmark = pytest.mark.usefixtures("restore_root_logging")


def _stdin(monkeypatch, lines):
    monkeypatch.setattr("sys.stdin", io.StringIO("".join(line + "\n" for line in lines)))


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.input_file == "-"
        assert args.strict_sequencing is None
        assert args.output is None

    def test_strict_flags(self):
        parser = build_parser()
        assert parser.parse_args(["--strict-sequencing"]).strict_sequencing is True
        assert parser.parse_args(["--no-strict-sequencing"]).strict_sequencing is False

    def test_unknown_format_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--format", "xml"])


class TestRun:

    def test_stdin_to_stdout(self, monkeypatch, capsys):
        monkeypatch.delenv("PIPELINE_DISCARD_INVALID_NEXT_ID", raising=False)
        _stdin(monkeypatch, MIXED_RECORDS)
        main(["--format", "text"])
        captured = capsys.readouterr()
        assert captured.out == PERMISSIVE_OUTPUT
        assert "Could not parse line `err`" in captured.err
        assert "pipeline 1 is closed" in captured.err

    def test_strict_flag(self, monkeypatch, capsys):
        _stdin(monkeypatch, MIXED_RECORDS)
        main(["--strict-sequencing", "--format", "text"])
        assert capsys.readouterr().out == STRICT_OUTPUT

    def test_flag_overrides_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("PIPELINE_DISCARD_INVALID_NEXT_ID", "true")
        _stdin(monkeypatch, MIXED_RECORDS)
        main(["--no-strict-sequencing", "--format", "text"])
        assert capsys.readouterr().out == PERMISSIVE_OUTPUT

    def test_environment_enables_strict(self, monkeypatch, capsys):
        monkeypatch.setenv("PIPELINE_DISCARD_INVALID_NEXT_ID", "yes")
        _stdin(monkeypatch, MIXED_RECORDS)
        main(["--format", "text"])
        assert capsys.readouterr().out == STRICT_OUTPUT

    def test_blank_line_ends_input(self, monkeypatch, capsys):
        _stdin(monkeypatch, ["0 0 0 hello 1", "0 1 0 world -1", "", "1 0 0 ignored -1"])
        main(["--format", "text"])
        assert capsys.readouterr().out == "Pipeline:0\n\t0| hello\n\t1| world\n"

    def test_input_file_and_output_file(self, tmp_path, capsys):
        source = tmp_path / "records.txt"
        source.write_text("0 1 1 68 -1\n", encoding="utf-8")
        target = tmp_path / "out.json"
        main([str(source), "--format", "json", "--output", str(target)])
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["pipelines"][0]["fragments"] == [{"id": 1, "text": "h", "hex": "68"}]
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Saved JSON Report output" in captured.err

    def test_missing_file_exits_1(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "nope.txt")])
        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().err

    def test_debug_log_level(self, monkeypatch, capsys):
        _stdin(monkeypatch, ["0 0 0 hello -1"])
        main(["--format", "text", "--log-level", "debug"])
        err = capsys.readouterr().err
        assert "Accepted fragment 0 of pipeline 0" in err
        assert "Pipeline 0 closed by fragment 0" in err


class TestInputDecoding:
    """Undecodable input bytes are replaced, never fatal."""

    def test_invalid_utf8_on_stdin(self, monkeypatch, capsys):
        raw = io.BytesIO(b"0 0 0 caf\xe9 1\n0 1 0 world -1\n")
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(raw, encoding="utf-8"))
        main(["--format", "text"])
        assert capsys.readouterr().out == "Pipeline:0\n\t0| caf�\n\t1| world\n"

    def test_invalid_utf8_in_file(self, tmp_path, capsys):
        source = tmp_path / "records.txt"
        source.write_bytes(b"3 0 0 \xff\xfe -1\n")
        main([str(source), "--format", "text"])
        assert capsys.readouterr().out == "Pipeline:3\n\t0| ��\n"


class TestEnvironmentErrors:
    """A bad sequencing value in the environment is reported, not raised."""

    def test_bad_value_exits_1(self, monkeypatch, capsys):
        monkeypatch.setenv("PIPELINE_DISCARD_INVALID_NEXT_ID", "maybe")
        _stdin(monkeypatch, ["0 0 0 hello -1"])
        with pytest.raises(SystemExit) as exc_info:
            main(["--format", "text"])
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Error: Not a boolean value: 'maybe'" in captured.err
        assert captured.out == ""

    def test_flag_bypasses_bad_value(self, monkeypatch, capsys):
        monkeypatch.setenv("PIPELINE_DISCARD_INVALID_NEXT_ID", "maybe")
        _stdin(monkeypatch, ["0 0 0 hello -1"])
        main(["--strict-sequencing", "--format", "text"])
        assert capsys.readouterr().out == "Pipeline:0\n\t0| hello\n"


class TestOutputNaming:
    """An existing directory as --output gets {stem}{suffix}."""

    def test_file_input_into_directory(self, tmp_path):
        source = tmp_path / "capture.txt"
        source.write_text("0 0 0 hello -1\n", encoding="utf-8")
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        main([str(source), "--format", "text", "--output", str(out_dir)])
        target = out_dir / "capture-pipelines.txt"
        assert target.read_text(encoding="utf-8") == "Pipeline:0\n\t0| hello\n"

    def test_stdin_into_directory(self, monkeypatch, tmp_path):
        _stdin(monkeypatch, ["0 1 1 68 -1"])
        main(["--format", "json", "--output", str(tmp_path)])
        data = json.loads((tmp_path / "stdin-pipelines.json").read_text(encoding="utf-8"))
        assert data["pipelines"][0]["id"] == 0
