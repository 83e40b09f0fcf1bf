"""
Claude Code conversation log sync.

Turns the JSONL session logs under ~/.claude/projects/ into a daily
Markdown document:
- Change-detection indexing of session files between runs
- Tolerant parsing of JSONL records into conversation turns
- Per-session line-count watermarks so unchanged sessions are skipped
"""

__version__ = "0.1.0"
