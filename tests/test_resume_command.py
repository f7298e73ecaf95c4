"""Tests for resume command building and shell quoting."""

import subprocess

import pytest

from agent_resume.resume.command import (
    VALID_TOOLS,
    InvalidSessionReferenceError,
    ResumeCommandError,
    ResumeErrorKind,
    Tool,
    UnsupportedToolError,
    build_resume_command,
    is_valid_tool,
    shell_quote,
    validate_session_ref,
)

SESSION = "sess-12345678"


def _shell_echo(command_word: str) -> str:
    """Evaluate a quoted word with /bin/sh and return what printf receives."""
    result = subprocess.run(
        ["sh", "-c", f"printf '%s' {command_word}"],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


class TestShellQuote:
    """Represents TestShellQuote."""
    def test_basic_string(self):
        """Test that basic string."""
        assert shell_quote("hello world") == "'hello world'"

    def test_empty_string(self):
        """Test that empty string."""
        assert shell_quote("") == "''"

    def test_single_quote(self):
        """Test that single quote."""
        assert shell_quote("it's a test") == "'it'\\''s a test'"

    def test_other_characters_untouched(self):
        """Test that other characters untouched."""
        text = 'say "hi" `id` $(whoami) ; rm -rf / \\ $HOME'
        assert shell_quote(text) == f"'{text}'"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "it's a test",
            "`whoami`; echo $(id) && $HOME",
            "line one\nline two\n\nline 'four'",
            "'''",
            'mixed "double" and \'single\'',
        ],
    )
    def test_shell_round_trip(self, text):
        """Test that shell round trip."""
        assert _shell_echo(shell_quote(text)) == text


class TestValidation:
    """Represents TestValidation."""
    def test_valid_tools(self):
        """Test that valid tools."""
        assert VALID_TOOLS == ("opencode", "claude-code", "codex")
        for tool in VALID_TOOLS:
            assert is_valid_tool(tool) is True

    @pytest.mark.parametrize("tool", ["", "claude", "cursor", "OPENCODE", "codex "])
    def test_invalid_tools(self, tool):
        """Test that invalid tools."""
        assert is_valid_tool(tool) is False

    def test_rejects_empty_ref(self):
        """Test that rejects empty ref."""
        with pytest.raises(InvalidSessionReferenceError, match="empty"):
            validate_session_ref("")

    @pytest.mark.parametrize("ref", ["a", "abc", "1234567"])
    def test_rejects_short_ref(self, ref):
        """Test that rejects short ref."""
        with pytest.raises(InvalidSessionReferenceError, match="too short") as excinfo:
            validate_session_ref(ref)
        assert excinfo.value.kind is ResumeErrorKind.INVALID_SESSION_REFERENCE

    @pytest.mark.parametrize("ref", ["12345678", "550e8400-e29b-41d4-a716-446655440000", "/tmp/session.json"])
    def test_accepts_valid_ref(self, ref):
        """Test that accepts valid ref."""
        validate_session_ref(ref)


class TestBuildResumeCommand:
    """Represents TestBuildResumeCommand."""
    def test_opencode(self):
        """Test that opencode."""
        rc = build_resume_command("opencode", SESSION, "/wd", "hello")
        assert rc.args == ["opencode", "run", "hello", "--session", SESSION]
        assert rc.command == f"opencode run 'hello' --session {SESSION}"
        assert rc.tool == "opencode"
        assert rc.working_dir == "/wd"
        assert rc.prompt == "hello"

    def test_claude_code(self):
        """Test that claude code."""
        rc = build_resume_command("claude-code", SESSION, "/wd", "hello")
        assert rc.args == ["claude", "--resume", SESSION, "hello"]
        assert rc.command == f"claude --resume {SESSION} 'hello'"

    def test_codex(self):
        """Test that codex."""
        rc = build_resume_command("codex", SESSION, "/wd", "hello")
        assert rc.args == ["codex", "exec", "resume", SESSION, "hello"]
        assert rc.command == f"codex exec resume {SESSION} 'hello'"

    def test_accepts_enum_member(self):
        """Test that accepts enum member."""
        rc = build_resume_command(Tool.CODEX, SESSION, "/wd", "hello")
        assert rc.tool == "codex"

    @pytest.mark.parametrize("tool", ["unknown", "", "claude"])
    def test_unsupported_tool(self, tool):
        """Test that unsupported tool."""
        with pytest.raises(UnsupportedToolError) as excinfo:
            build_resume_command(tool, SESSION, "/wd", "hello")
        err = excinfo.value
        assert isinstance(err, ResumeCommandError)
        assert isinstance(err, ValueError)
        assert err.kind is ResumeErrorKind.UNSUPPORTED_TOOL
        assert "opencode, claude-code, codex" in str(err)

    @pytest.mark.parametrize("ref", ["", "short"])
    def test_invalid_session_ref(self, ref):
        """Test that invalid session ref."""
        with pytest.raises(InvalidSessionReferenceError) as excinfo:
            build_resume_command("opencode", ref, "/wd", "hello")
        assert excinfo.value.kind is ResumeErrorKind.INVALID_SESSION_REFERENCE

    def test_tool_checked_before_session_ref(self):
        """Test that tool checked before session ref."""
        with pytest.raises(UnsupportedToolError):
            build_resume_command("nope", "", "/wd", "hello")

    def test_args_keep_raw_prompt(self):
        """Test that args keep raw prompt."""
        prompt = "Don't stop; run `make` and check $PATH\nthen report"
        for tool in VALID_TOOLS:
            rc = build_resume_command(tool, SESSION, "/wd", prompt)
            assert prompt in rc.args
            assert shell_quote(prompt) in rc.command

    def test_empty_prompt(self):
        """Test that empty prompt."""
        rc = build_resume_command("claude-code", SESSION, "/wd", "")
        assert rc.command == f"claude --resume {SESSION} ''"
        assert rc.args[-1] == ""

    def test_display_command_parses_back_to_args(self):
        """Test that display command parses back to args."""
        prompt = "It's \"quoted\"\n`ls`; $(id)"
        for tool in VALID_TOOLS:
            rc = build_resume_command(tool, SESSION, "/wd", prompt)
            result = subprocess.run(
                ["sh", "-c", 'for a in "$@"; do printf "%s\\0" "$a"; done', "sh", *rc.args],
                capture_output=True,
                text=True,
                check=True,
            )
            via_argv = result.stdout
            result = subprocess.run(
                ["sh", "-c", f'set -- {rc.command}; for a in "$@"; do printf "%s\\0" "$a"; done'],
                capture_output=True,
                text=True,
                check=True,
            )
            assert result.stdout == via_argv

    def test_to_dict(self):
        """Test that to dict."""
        rc = build_resume_command("opencode", SESSION, "/wd", "hello")
        data = rc.to_dict()
        assert data["tool"] == "opencode"
        assert data["session_ref"] == SESSION
        assert data["args"] == rc.args
