"""
cf_auth
-------

Cloudflare 인증 상태 확인.

API 토큰 + account id 환경변수가 있으면 원격 호출 없이 통과시키고,
없으면 `wrangler whoami` 출력으로 로그인 여부를 판단한다.
whoami 출력은 사람이 읽는 텍스트라 wrangler 버전에 따라 바뀔 수 있으므로,
판정 규칙은 is_logged_in() 한 곳에만 둔다.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

import click

from .config import ACCOUNT_ID_ENV, API_TOKEN_ENV
from .logging_utils import get_logger
from .subprocess_utils import run_command


logger = get_logger(__name__)


NOT_LOGGED_IN_MARKERS = ("not logged in", "not authenticated")


def is_logged_in(whoami_output: Optional[str]) -> bool:
    if not whoami_output:
        return False
    lowered = whoami_output.lower()
    return not any(marker in lowered for marker in NOT_LOGGED_IN_MARKERS)


def mask_token(token: str, visible: int = 10) -> str:
    return f"{token[:visible]}..."


def check_authentication(env: Optional[Mapping[str, str]] = None) -> bool:
    click.echo("☁️  Checking Cloudflare setup...\n")

    environ = os.environ if env is None else env
    token = environ.get(API_TOKEN_ENV)
    account_id = environ.get(ACCOUNT_ID_ENV)
    if token and account_id:
        click.echo("✅ Using Cloudflare environment variables")
        click.echo(f"   API Token: {mask_token(token)}")
        click.echo(f"   Account ID: {account_id}")
        click.echo()
        return True

    result = run_command(["wrangler", "whoami"], check=False)
    if not result.ok or not is_logged_in(result.output):
        logger.info("wrangler 인증 실패 (exit=%s)", result.returncode)
        click.echo("❌ Not logged in to Cloudflare")
        click.echo("   💡 Run: wrangler login")
        click.echo(f"   💡 Or set environment variables: {API_TOKEN_ENV}, {ACCOUNT_ID_ENV}")
        return False

    click.echo("✅ Logged in to Cloudflare via wrangler")
    click.echo(f"   Account: {result.output}")
    click.echo()
    return True


def login() -> bool:
    """대화형 `wrangler login` 을 터미널에 그대로 연결해 실행한다."""
    result = run_command(["wrangler", "login"], check=False, stream_output=True, timeout=None)
    return result.ok
