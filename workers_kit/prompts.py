"""
prompts
-------

대화형 입력 소스. 흐름 코드(orchestrator, tagging)는 Prompter 만 알고,
테스트에서는 미리 정해 둔 답을 돌려주는 Prompter 를 주입한다.
"""

from __future__ import annotations

import click


class Prompter:
    """터미널에서 한 줄을 입력받는 기본 구현. 빈 입력은 빈 문자열로 돌려준다."""

    def ask(self, message: str) -> str:
        answer = click.prompt(message, default="", show_default=False, prompt_suffix="")
        return str(answer).strip()

    def confirm(self, message: str) -> bool:
        """`y` (대소문자 무시) 만 승인으로 본다."""
        return self.ask(message).lower() == "y"
