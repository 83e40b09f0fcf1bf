"""
Tests for JSONL record parsing and noise filtering.

These tests ensure that corrupt or administrative lines in Claude Code
session logs never produce turns and never abort parsing.
"""

import json

import pytest

from claude_log_sync.models import ConversationTurn, Role
from claude_log_sync.noise_filter import NOISE_PATTERNS, is_noise
from claude_log_sync.record_parser import (
    count_content_lines,
    extract_project_name,
    parse_record_line,
    parse_session_file,
)


class TestNoiseFilter:
    """Test detection of administrative markers."""

    @pytest.mark.parametrize("text", [
        "<local-command-stdout>done</local-command-stdout>",
        "<command-name>/clear</command-name>",
        "prefix <SYSTEM-REMINDER>be brief</system-reminder>",
        "<task-notification>finished</task-notification>",
        "No response requested.",
        "no response requested",
    ])
    def test_noise_detected(self, text):
        """Test that every administrative marker is noise."""
        assert is_noise(text)

    def test_regular_text_is_not_noise(self):
        """Test that conversation text passes the filter."""
        assert not is_noise("How do I reverse a list in Python?")

    def test_sentinel_only_matches_at_start(self):
        """Test that the no-response sentinel must start the text."""
        assert not is_noise("I said No response requested earlier")

    def test_pattern_table(self):
        """Test that the noise patterns form a fixed table."""
        assert len(NOISE_PATTERNS) == 5


class TestHumanRecords:
    """Test parsing of user records."""

    def test_simple_text_message(self, make_record):
        """Test extraction of simple text content."""
        line = json.dumps(make_record["user"]("hi"))

        turn = parse_record_line(line)

        assert turn == ConversationTurn(role=Role.HUMAN, text="hi", timestamp="2026-10-18T10:00:00")

    def test_text_is_trimmed(self, make_record):
        """Test that surrounding whitespace is removed."""
        turn = parse_record_line(json.dumps(make_record["user"]("  hello\n")))
        assert turn.text == "hello"

    def test_top_level_content_fallback(self):
        """Test that top-level content is used when there is no message."""
        turn = parse_record_line(json.dumps({"type": "user", "content": "fallback"}))
        assert turn.text == "fallback"
        assert turn.timestamp == ""

    def test_noise_message_skipped(self, make_record):
        """Test that noise user messages yield nothing."""
        line = json.dumps(make_record["user"]("<command-name>/compact</command-name>"))
        assert parse_record_line(line) is None

    def test_noise_checked_before_trimming(self):
        """Test that the no-response sentinel only counts at the very start of the raw text."""
        turn = parse_record_line(json.dumps({"type": "user", "content": "  No response requested."}))
        assert turn.text == "No response requested."

    def test_non_string_timestamp_dropped(self, make_record):
        """Test that numeric timestamps become an empty timestamp."""
        record = make_record["user"]("hi", timestamp=1760000000000)
        assert parse_record_line(json.dumps(record)).timestamp == ""

    def test_non_string_timestamp_dropped_for_agent(self, make_record):
        record = make_record["assistant"](["hello"], timestamp={"epoch": 1})
        assert parse_record_line(json.dumps(record)).timestamp == ""

    def test_empty_user_message_skipped(self):
        """Test that empty user messages are skipped."""
        line = json.dumps({"type": "user", "message": {"content": "   "}})
        assert parse_record_line(line) is None

    def test_tool_result_message_skipped(self):
        """Test that user records holding tool results are skipped."""
        line = json.dumps({
            "type": "user",
            "message": {
                "content": [
                    {"type": "tool_result", "tool_use_id": "toolu_01", "content": "ok"}
                ]
            },
        })
        assert parse_record_line(line) is None


class TestAgentRecords:
    """Test parsing of assistant records."""

    def test_text_blocks_joined(self, make_record):
        """Test that noise blocks are dropped and the rest joined."""
        line = json.dumps(make_record["assistant"](["a", "<system-reminder>x</system-reminder>", "b"]))

        turn = parse_record_line(line)

        assert turn.role == Role.AGENT
        assert turn.text == "a\n\nb"

    def test_tool_use_blocks_ignored(self):
        """Test that only text blocks contribute content."""
        line = json.dumps({
            "type": "assistant",
            "message": {
                "content": [
                    {"type": "text", "text": "Let me look."},
                    {"type": "tool_use", "id": "toolu_01", "name": "Read", "input": {}},
                ]
            },
        })
        assert parse_record_line(line).text == "Let me look."

    def test_tool_only_assistant_message_skipped(self):
        """Test that assistant messages with only tool calls yield nothing."""
        line = json.dumps({
            "type": "assistant",
            "message": {"content": [{"type": "tool_use", "name": "Bash", "input": {}}]},
        })
        assert parse_record_line(line) is None

    def test_all_noise_blocks_skipped(self, make_record):
        """Test that an all-noise message yields nothing."""
        line = json.dumps(make_record["assistant"](["No response requested."]))
        assert parse_record_line(line) is None

    def test_string_content_skipped(self):
        """Test that assistant content must be a block list."""
        line = json.dumps({"type": "assistant", "message": {"content": "plain"}})
        assert parse_record_line(line) is None


class TestMalformedLines:
    """Test that bad input never raises."""

    @pytest.mark.parametrize("line", [
        "",
        "{not json",
        "[1, 2, 3]",
        "null",
        '"just a string"',
        '{"type": ["user"]}',
        '{"type": "summary", "summary": "Conversation summary"}',
        '{"type": "assistant", "message": null}',
        '{"type": "assistant", "message": {"content": [null, 3, {"type": "text", "text": 5}]}}',
    ])
    def test_returns_none(self, line):
        """Test that malformed or unrecognized records yield nothing."""
        assert parse_record_line(line) is None


class TestSessionFiles:
    """Test whole-file parsing helpers."""

    def test_parse_session_file_skips_corrupt_lines(self, tmp_path, write_session, make_record):
        """Test that one corrupt line does not abort the rest of the file."""
        session = write_session(tmp_path / "s.jsonl", [
            make_record["user"]("first"),
            "{corrupt",
            make_record["assistant"](["second"]),
        ])

        turns = parse_session_file(session)

        assert [t.text for t in turns] == ["first", "second"]

    def test_invalid_utf8_line_does_not_abort_file(self, tmp_path, make_record):
        """Test that undecodable bytes only spoil the line they are on."""
        session = tmp_path / "s.jsonl"
        session.write_bytes(
            b'{"type": "user", \xff\xfe "content": "lost"}\n'
            + json.dumps(make_record["user"]("kept")).encode("utf-8")
            + b"\n"
        )

        assert [t.text for t in parse_session_file(session)] == ["kept"]
        assert count_content_lines(session) == 2

    def test_invalid_utf8_inside_text_is_replaced(self, tmp_path):
        """Test that bad bytes inside a string value are replaced, not fatal."""
        session = tmp_path / "s.jsonl"
        session.write_bytes(b'{"type": "user", "content": "caf\xff"}\n')

        assert [t.text for t in parse_session_file(session)] == ["caf\ufffd"]

    def test_parse_missing_file(self, tmp_path):
        """Test that an unreadable file yields no turns."""
        assert parse_session_file(tmp_path / "missing.jsonl") == []

    def test_count_content_lines_ignores_blank_lines(self, tmp_path):
        """Test the watermark line count."""
        session = tmp_path / "s.jsonl"
        session.write_text('{"a": 1}\n\n   \n{"b": 2}\n', encoding="utf-8")
        assert count_content_lines(session) == 2

    @pytest.mark.parametrize("project_dir,expected", [
        ("-Users-alice-code-my-app", "code-my-app"),
        ("-home-bob-Work", "work"),
        ("-Users-alice", "default"),
    ])
    def test_extract_project_name(self, tmp_path, project_dir, expected):
        """Test readable project names from encoded directories."""
        assert extract_project_name(tmp_path / project_dir / "s.jsonl") == expected
