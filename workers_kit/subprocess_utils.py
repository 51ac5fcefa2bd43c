from __future__ import annotations

import os
import subprocess
import sys
import threading
import time
from dataclasses import dataclass
from textwrap import shorten
from typing import Mapping, Sequence

from .logging_utils import get_logger


logger = get_logger(__name__)


# 실행 파일이 없거나 시간 초과일 때 RunResult 에 채우는 관례적 종료 코드
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return self.stdout.strip()

    @property
    def error(self) -> str:
        return (self.stderr or self.stdout).strip()


class CommandError(RuntimeError):
    """check=True 로 실행한 명령이 실패했을 때 발생한다. 실패한 RunResult 를 함께 들고 있다."""

    def __init__(self, message: str, result: RunResult) -> None:
        super().__init__(message)
        self.result = result


def _is_tty(stream) -> bool:  # noqa: ANN001
    try:
        return bool(getattr(stream, "isatty") and stream.isatty())
    except Exception:  # noqa: BLE001
        return False


def _parse_env_bool(name: str) -> bool | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _parse_env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        return None


_FRAMES = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]


def _format_elapsed(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:0.1f}s"
    minutes = int(seconds // 60)
    sec = int(seconds % 60)
    return f"{minutes}m{sec:02d}s"


class _IdleProgressIndicator:
    """
    명령이 일정 시간(idle_seconds) 이상 끝나지 않을 때만 스피너를 그린다.
    stderr 에만 출력하여 리포트(stdout)와 섞이지 않게 한다.
    """

    def __init__(
        self,
        *,
        message: str,
        stream=None,  # noqa: ANN001
        interval: float = 0.12,
        idle_seconds: float = 2.0,
    ) -> None:
        self._message = message
        self._stream = stream if stream is not None else sys.stderr
        self._interval = max(float(interval), 0.02)
        self._idle_seconds = max(float(idle_seconds), 0.0)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_len = 0

    def _render(self, idx: int, elapsed: float) -> None:
        text = f"{_FRAMES[idx % len(_FRAMES)]} {self._message}  {_format_elapsed(elapsed)}"
        self._last_len = max(self._last_len, len(text))
        self._stream.write("\r" + text)
        self._stream.flush()

    def _clear(self) -> None:
        if self._last_len <= 0:
            return
        self._stream.write("\r" + (" " * self._last_len) + "\r")
        self._stream.flush()

    def start(self) -> None:
        if self._thread is not None:
            return
        started = time.monotonic()

        def _run() -> None:
            # idle 구간 동안은 아무것도 그리지 않는다.
            if self._stop.wait(self._idle_seconds):
                return
            idx = 0
            while not self._stop.is_set():
                self._render(idx, time.monotonic() - started)
                idx += 1
                self._stop.wait(self._interval)

        self._thread = threading.Thread(target=_run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
        self._clear()


def _failure(cmd: Sequence[str], result: RunResult, check: bool) -> RunResult:
    if check:
        detail = f"\n{shorten(result.error, width=2000)}" if result.error else ""
        raise CommandError(
            f"명령 실행 실패: {' '.join(cmd)} (exit={result.returncode}){detail}",
            result,
        )
    logger.debug("명령 실패(무시): %s (exit=%s)", " ".join(cmd), result.returncode)
    return result


def run_command(
    cmd: Sequence[str],
    *,
    check: bool = True,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = 300.0,
    stream_output: bool = False,
    spinner_message: str | None = None,
    show_progress: bool | None = None,
) -> RunResult:
    """
    외부 명령 실행 공통 유틸.

    - check=True : 실패 시 CommandError 를 던진다 (중단해야 하는 호출)
    - check=False: 실패해도 예외 없이 RunResult 를 돌려준다 (도구 미설치, 태그 없음 등
      '없음'이 정상 경로인 호출). 실행 파일이 없으면 returncode=127, 시간 초과는 124.
    - stream_output=True: 출력을 캡처하지 않고 터미널에 그대로 연결한다 (wrangler login 등).
    """
    logger.info("명령 실행: %s", " ".join(cmd))

    if stream_output:
        try:
            proc = subprocess.run(  # noqa: S603
                list(cmd),
                cwd=cwd,
                env=dict(env) if env is not None else None,
                timeout=timeout,
            )
        except FileNotFoundError:
            result = RunResult(EXIT_NOT_FOUND, "", f"필요한 명령을 찾을 수 없습니다: {cmd[0]}")
            return _failure(cmd, result, check)
        except subprocess.TimeoutExpired:
            result = RunResult(EXIT_TIMEOUT, "", f"명령 실행이 {timeout}초 안에 끝나지 않았습니다")
            return _failure(cmd, result, check)
        result = RunResult(proc.returncode, "", "")
        return result if result.ok else _failure(cmd, result, check)

    env_show = _parse_env_bool("CLI_SHOW_PROGRESS")
    effective_show = show_progress if show_progress is not None else (env_show if env_show is not None else True)
    idle = _parse_env_float("CLI_PROGRESS_IDLE_SECONDS")

    indicator: _IdleProgressIndicator | None = None
    if effective_show and _is_tty(sys.stderr):
        indicator = _IdleProgressIndicator(
            message=spinner_message or shorten(" ".join(cmd), width=72, placeholder="…"),
            idle_seconds=2.0 if idle is None else idle,
        )
        indicator.start()

    try:
        proc = subprocess.run(  # noqa: S603
            list(cmd),
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError:
        result = RunResult(EXIT_NOT_FOUND, "", f"필요한 명령을 찾을 수 없습니다: {cmd[0]}")
        return _failure(cmd, result, check)
    except subprocess.TimeoutExpired:
        result = RunResult(EXIT_TIMEOUT, "", f"명령 실행이 {timeout}초 안에 끝나지 않았습니다: {' '.join(cmd)}")
        return _failure(cmd, result, check)
    finally:
        if indicator is not None:
            indicator.stop()

    if proc.stdout:
        logger.debug("명령 stdout: %s", shorten(proc.stdout.strip(), width=2000))
    if proc.stderr:
        logger.debug("명령 stderr: %s", shorten(proc.stderr.strip(), width=2000))

    result = RunResult(returncode=proc.returncode, stdout=proc.stdout or "", stderr=proc.stderr or "")
    if not result.ok:
        return _failure(cmd, result, check)
    return result
