"""
pytest 설정:

로컬 작업 환경에 설치된 다른 버전의 workers_kit 패키지가 존재할 때,
`pytest` 실행 시 site-packages 쪽이 먼저 import 되어 테스트가 깨질 수 있다.

테스트는 항상 현재 레포의 소스를 대상으로 해야 하므로, repo root 를 sys.path 최상단에 고정한다.
외부 명령(git/wrangler/node)은 FakeRunner 로, 대화형 입력은 ScriptedPrompter 로 대체한다.
"""

from __future__ import annotations

import os
import sys
from typing import Dict, Iterable, List, Optional, Union

import pytest


def pytest_configure() -> None:
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


def ok(stdout: str = "") -> "RunResult":
    from workers_kit.subprocess_utils import RunResult

    return RunResult(returncode=0, stdout=stdout, stderr="")


def fail(stderr: str = "error", returncode: int = 1) -> "RunResult":
    from workers_kit.subprocess_utils import RunResult

    return RunResult(returncode=returncode, stdout="", stderr=stderr)


class FakeRunner:
    """
    run_command 대체. 명령 문자열의 접두사(가장 긴 것 우선)로 응답을 찾는다.
    응답이 없으면 성공 + 빈 출력.
    """

    def __init__(self, responses: Optional[Dict[str, Union[str, object]]] = None) -> None:
        self.responses: Dict[str, object] = dict(responses or {})
        self.calls: List[List[str]] = []
        self.kwargs: List[dict] = []

    def __call__(self, cmd, *, check: bool = True, **kwargs):  # noqa: ANN001
        from workers_kit.subprocess_utils import CommandError, RunResult

        cmd = list(cmd)
        self.calls.append(cmd)
        self.kwargs.append(kwargs)

        joined = " ".join(cmd)
        result: RunResult = ok()
        for key in sorted(self.responses, key=len, reverse=True):
            if joined.startswith(key):
                value = self.responses[key]
                result = ok(value) if isinstance(value, str) else value  # type: ignore[assignment]
                break

        if check and not result.ok:
            raise CommandError(f"명령 실행 실패: {joined} (exit={result.returncode})", result)
        return result

    def called(self, prefix: str) -> bool:
        return any(" ".join(c).startswith(prefix) for c in self.calls)


class ScriptedPrompter:
    """미리 정한 답을 순서대로 돌려주는 Prompter. 받은 질문은 questions 에 기록한다."""

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self.answers = list(answers)
        self.questions: List[str] = []

    def ask(self, message: str) -> str:
        self.questions.append(message)
        if not self.answers:
            raise AssertionError(f"예상하지 못한 질문: {message!r}")
        return self.answers.pop(0).strip()

    def confirm(self, message: str) -> bool:
        return self.ask(message).lower() == "y"


@pytest.fixture
def fake_runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    from workers_kit import cf_auth, cf_workers, git_repo, prerequisites

    runner = FakeRunner()
    for module in (git_repo, cf_auth, cf_workers, prerequisites):
        monkeypatch.setattr(module, "run_command", runner)
    return runner


@pytest.fixture(autouse=True)
def _no_cloudflare_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CLOUDFLARE_API_TOKEN", raising=False)
    monkeypatch.delenv("CLOUDFLARE_ACCOUNT_ID", raising=False)
