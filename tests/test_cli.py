#!/usr/bin/env python3
"""
CLI tests for AI Session Resolver

Tests cover:
- aisr path / content / copy / scan commands and their exit codes
- Output formats (table, json, plain)
- Config file resolution (--config, env var) and config defaults
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ai_session_resolver import cli
from ai_session_resolver.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_config_cache():
    cli._config_cache = None
    cli._g_config_path = None
    yield
    cli._config_cache = None
    cli._g_config_path = None


# ─── Fixtures ─────────────────────────────────────────────────────────────────

_SESSION = [
    {"id": "e0", "role": "user", "timestamp": "2026-01-08T10:00:00Z",
     "content": "Please create a config loader"},
    {"id": "e1", "role": "assistant", "timestamp": "2026-01-08T10:01:00Z",
     "blocks": [
         {"type": "text", "text": "Creating the loader."},
         {"type": "tool_use", "name": "Write", "input": {"file_path": "src/config.py", "content": "X = [1]\n"},
          "standardTool": {"type": "file_write", "path": "src/config.py", "content": "X = [1]\n"}},
     ]},
    {"id": "e2", "role": "user", "timestamp": "2026-01-08T10:02:00Z", "content": "thanks"},
    {"id": "e3", "role": "assistant", "timestamp": "2026-01-08T10:03:00Z",
     "blocks": [{"type": "image", "mediaType": "image/png", "data": "..."}]},
]


def _make_log(tmp_path: Path, records=None, name="session.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(_SESSION if records is None else records))
    return path


def _invoke(tmp_path: Path, args, config=None):
    """Run the CLI with an isolated config file (written when ``config`` is given)."""
    config_file = tmp_path / "config.json"
    if config is not None:
        config_file.write_text(json.dumps(config))
    return runner.invoke(app, args, env={"AI_SESSION_RESOLVER_CONFIG": str(config_file)})


# ─── aisr path ────────────────────────────────────────────────────────────────

class TestPathCommand:
    def test_path_at_pivot_json(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "--index", "1", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data == {"path": "src/config.py", "source": "tool_invocation", "confidence": "high", "event_index": 1}

    def test_path_history(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "3", "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["source"] == "history"
        assert data["event_index"] == 1

    def test_path_plain(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "2", "-f", "plain"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "src/config.py"

    def test_path_table(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "1"])
        assert result.exit_code == 0
        assert "Path:       src/config.py" in result.stdout

    def test_backward_only_miss_exits_1(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "0"])
        assert result.exit_code == 1
        assert "No file path found near event 0" in result.output

    def test_around_finds_later_event(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "0", "--around", "-f", "plain"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "src/config.py"

    def test_around_from_config(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "0", "-f", "plain"],
                         config={"around": True})
        assert result.exit_code == 0
        assert result.stdout.strip() == "src/config.py"

    def test_backward_only_overrides_config(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "0", "--backward-only"],
                         config={"around": True})
        assert result.exit_code == 1

    def test_index_out_of_range_exits_2(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "9"])
        assert result.exit_code == 2
        assert "out of range" in result.output

    def test_negative_index_rejected(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "-1"])
        assert result.exit_code == 2

    def test_unknown_format_exits_2(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path)), "-i", "1", "-f", "xml"])
        assert result.exit_code == 2
        assert "Unknown format" in result.output


# ─── aisr content ─────────────────────────────────────────────────────────────

class TestContentCommand:
    def test_content_plain_is_raw(self, tmp_path):
        result = _invoke(tmp_path, ["content", str(_make_log(tmp_path)), "./SRC/config.py", "-i", "3", "-f", "plain"])
        assert result.exit_code == 0
        assert result.stdout == "X = [1]\n"

    def test_content_forward_fallback_json(self, tmp_path):
        result = _invoke(tmp_path, ["content", str(_make_log(tmp_path)), "src/config.py", "-i", "0", "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["event_index"] == 1
        assert data["file_path"] == "src/config.py"
        assert data["timestamp"] > 0

    def test_content_miss_exits_1(self, tmp_path):
        result = _invoke(tmp_path, ["content", str(_make_log(tmp_path)), "src/other.py", "-i", "2"])
        assert result.exit_code == 1
        assert "No content found" in result.output

    def test_format_from_config(self, tmp_path):
        result = _invoke(tmp_path, ["content", str(_make_log(tmp_path)), "src/config.py", "-i", "1"],
                         config={"format": "plain"})
        assert result.exit_code == 0
        assert result.stdout == "X = [1]\n"


# ─── aisr copy ────────────────────────────────────────────────────────────────

class TestCopyCommand:
    def test_copy_body(self, tmp_path):
        result = _invoke(tmp_path, ["copy", str(_make_log(tmp_path)), "-i", "1"])
        assert result.exit_code == 0
        assert result.stdout == "Creating the loader.\n\nsrc/config.py\n"

    def test_copy_user_text(self, tmp_path):
        result = _invoke(tmp_path, ["copy", str(_make_log(tmp_path)), "-i", "0"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "Please create a config loader"

    def test_copy_image_only_exits_1(self, tmp_path):
        result = _invoke(tmp_path, ["copy", str(_make_log(tmp_path)), "-i", "3"])
        assert result.exit_code == 1
        assert "no copyable content" in result.output


# ─── aisr scan ────────────────────────────────────────────────────────────────

class TestScanCommand:
    def test_scan_json_rows(self, tmp_path):
        result = _invoke(tmp_path, ["scan", str(_make_log(tmp_path)), "-f", "json"])
        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [r["index"] for r in rows] == [0, 1, 2, 3]
        assert rows[1]["path"] == "src/config.py"
        assert rows[0]["path"] is None

    def test_scan_table_summary(self, tmp_path):
        result = _invoke(tmp_path, ["scan", str(_make_log(tmp_path))])
        assert result.exit_code == 0
        assert "src/config.py" in result.stdout
        assert "Resolved 1 of 4 events" in result.stdout

    def test_scan_jsonl(self, tmp_path):
        path = tmp_path / "session.jsonl"
        path.write_text("\n".join(json.dumps(r) for r in _SESSION))
        result = _invoke(tmp_path, ["scan", str(path), "-f", "plain"])
        assert result.exit_code == 0
        assert "1\tassistant\tsrc/config.py\ttool_invocation\thigh" in result.stdout


# ─── Load errors ──────────────────────────────────────────────────────────────

class TestLoadErrors:
    def test_missing_file_exits_1(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Cannot read" in result.output

    def test_invalid_json_exits_1(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{oops")
        result = _invoke(tmp_path, ["scan", str(bad)])
        assert result.exit_code == 1

    def test_empty_log_exits_1(self, tmp_path):
        result = _invoke(tmp_path, ["path", str(_make_log(tmp_path, records=[]))])
        assert result.exit_code == 1
        assert "empty" in result.output


# ─── aisr config ──────────────────────────────────────────────────────────────

class TestConfigCommands:
    def test_config_path_from_env(self, tmp_path):
        result = _invoke(tmp_path, ["config", "path"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(tmp_path / "config.json")

    def test_config_flag_beats_env(self, tmp_path):
        other = tmp_path / "other.json"
        result = _invoke(tmp_path, ["--config", str(other), "config", "path"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(other)

    def test_config_show_defaults(self, tmp_path):
        result = _invoke(tmp_path, ["config", "show"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"format": "table", "around": False}

    def test_config_show_merged(self, tmp_path):
        result = _invoke(tmp_path, ["config", "show"], config={"format": "json"})
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"format": "json", "around": False}

    def test_unreadable_config_warns(self, tmp_path):
        (tmp_path / "config.json").write_text("{broken")
        result = _invoke(tmp_path, ["config", "show"])
        assert result.exit_code == 0
        assert "could not load config" in result.output

    def test_no_command_shows_help(self, tmp_path):
        result = _invoke(tmp_path, [])
        assert result.exit_code == 0
        assert "path" in result.output
