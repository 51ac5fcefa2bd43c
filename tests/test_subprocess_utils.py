from __future__ import annotations

import io
import sys

import pytest

from workers_kit.subprocess_utils import EXIT_NOT_FOUND, CommandError, run_command


class _FakeTty(io.StringIO):
    def isatty(self) -> bool:  # type: ignore[override]
        return True


_BRAILLE_FRAMES = {"⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"}


def test_capture_returns_stdout() -> None:
    result = run_command([sys.executable, "-c", "print('hello')"], show_progress=False)

    assert result.ok
    assert result.output == "hello"


def test_missing_executable_without_check_returns_result() -> None:
    result = run_command(["definitely-not-a-real-tool-xyz", "--version"], check=False)

    assert not result.ok
    assert result.returncode == EXIT_NOT_FOUND
    assert "definitely-not-a-real-tool-xyz" in result.error


def test_missing_executable_with_check_raises() -> None:
    with pytest.raises(CommandError) as excinfo:
        run_command(["definitely-not-a-real-tool-xyz"])

    assert excinfo.value.result.returncode == EXIT_NOT_FOUND


def test_failure_with_check_carries_stderr() -> None:
    cmd = [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"]

    with pytest.raises(CommandError) as excinfo:
        run_command(cmd, show_progress=False)

    assert excinfo.value.result.returncode == 3
    assert "boom" in str(excinfo.value)


def test_failure_without_check_is_not_raised() -> None:
    cmd = [sys.executable, "-c", "import sys; sys.exit(2)"]

    result = run_command(cmd, check=False, show_progress=False)

    assert result.returncode == 2
    assert not result.ok


def test_capture_mode_shows_progress_when_idle(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    오래 걸리는 명령은 stderr 가 TTY 일 때 진행표시(⠙ 등)가 렌더링되어야 한다.
    """
    fake_err = _FakeTty()
    monkeypatch.setattr(sys, "stderr", fake_err)
    monkeypatch.setenv("CLI_PROGRESS_IDLE_SECONDS", "0.05")

    result = run_command(
        [sys.executable, "-c", "import time; time.sleep(0.5)"],
        timeout=5,
        spinner_message="Test capture progress",
        show_progress=True,
    )

    assert result.ok
    stderr_text = fake_err.getvalue()
    assert any(ch in stderr_text for ch in _BRAILLE_FRAMES), stderr_text
