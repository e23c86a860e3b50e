"""Tests for the command-line interface.

WHY: The CLI is the quickest way to check what a subtitle file parses
into and what the local vocabulary holds; its output must stay pipeable.

HOW: main() is called with explicit argv; SystemExit codes and captured
stdout/stderr are checked. Files and the vocabulary directory live in
tmp_path. The auth token is cleared by conftest, so nothing is synced.
"""

import json

import pytest

from learning_overlay.cli import build_parser, main


def _run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestParser:

    def test_parse_defaults(self):
        args = build_parser().parse_args(["parse", "subs.vtt"])
        assert args.format == "auto"
        assert not args.plain

    def test_status_requires_language(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["status", "bonjour"])

    def test_rejects_unknown_status(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["status", "bonjour", "--language", "fr", "--set", "mastered"])


class TestParseCommand:

    def test_json_output(self, tmp_path, capsys, sample_srt):
        path = tmp_path / "episode.srt"
        path.write_text(sample_srt, encoding="utf-8")

        assert _run(["parse", str(path)]) == 0
        out, err = capsys.readouterr()
        data = json.loads(out)
        assert data[0] == {"startTime": 1.0, "endTime": 2.5, "text": "Bonjour tout le monde"}
        assert len(data) == 3
        assert "Parsed 3 segments" in err

    def test_plain_output(self, tmp_path, capsys, sample_vtt):
        path = tmp_path / "episode.vtt"
        path.write_text(sample_vtt, encoding="utf-8")

        assert _run(["parse", str(path), "--plain", "--format", "webvtt"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "00:00:01.000 --> 00:00:03.500  Hello there!",
            "00:00:04.000 --> 00:00:06.000  General Kenobi.",
        ]

    def test_missing_file(self, tmp_path, capsys):
        assert _run(["parse", str(tmp_path / "nope.vtt")]) == 1
        assert "File not found" in capsys.readouterr().err


class TestVocabularyCommands:

    def test_set_then_read_status(self, tmp_path, capsys):
        common = ["--language", "french", "--storage-dir", str(tmp_path)]

        assert _run(["status", "Bonjour", "--set", "known"] + common) == 0
        out, err = capsys.readouterr()
        assert out.strip() == "known"
        assert "not synced" in err

        assert _run(["status", "bonjour"] + common) == 0
        assert capsys.readouterr().out.strip() == "known"

    def test_tokens_use_local_statuses(self, tmp_path, capsys):
        common = ["--language", "french", "--storage-dir", str(tmp_path)]
        _run(["status", "merci", "--set", "known"] + common)
        capsys.readouterr()

        assert _run(["tokens", "Merci, Paul!"] + common) == 0
        rows = json.loads(capsys.readouterr().out)
        assert rows[0] == {"text": "Merci", "word": "merci", "status": "known", "color": "#ffffff"}
        assert rows[1] == {"text": ", "}
        assert rows[2]["status"] == "unknown"


class TestDetectCommand:

    def test_supported(self, capsys):
        assert _run(["detect", "https://www.netflix.com/watch/1"]) == 0
        assert capsys.readouterr().out.strip() == "netflix"

    def test_unsupported(self, capsys):
        assert _run(["detect", "https://example.com"]) == 1
        assert "No supported platform" in capsys.readouterr().err
