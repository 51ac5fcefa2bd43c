"""
cf_workers
----------

환경별 Cloudflare Worker 존재 여부 확인 및 (선택적) 자동 생성.
"""

from __future__ import annotations

import os
import re
import tempfile
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import click

from .config import ACCOUNT_ID_ENV, CONFIG_FILE, ENVIRONMENTS, ServiceConfig
from .logging_utils import get_logger
from .prompts import Prompter
from .subprocess_utils import CommandError, run_command


logger = get_logger(__name__)


COMPATIBILITY_DATE = "2025-01-01"

LIST_WORKERS_CMD = ["wrangler", "list"]

GREETINGS: Dict[str, str] = {
    "dev": "Hello dev!",
    "qa": "Hello qa!",
    "prod": "Hello production!",
}


@dataclass
class WorkerStatus:
    present: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @property
    def ready(self) -> bool:
        return not self.missing


def placeholder_script(env: str) -> str:
    return f'export default {{ fetch() {{ return new Response("{GREETINGS[env]}"); }} }}'


def match_workers(listing: str, expected: List[str]) -> WorkerStatus:
    """
    `wrangler list` 출력에 기대하는 이름이 온전한 토큰으로 들어 있는지 확인한다.
    "api" 는 "api-dev" 안에서 찾지 않는다.
    """
    status = WorkerStatus()
    for name in expected:
        if re.search(rf"(?<![\w-]){re.escape(name)}(?![\w-])", listing):
            status.present.append(name)
        else:
            status.missing.append(name)
    return status


def list_workers(base_dir: str = ".") -> Optional[str]:
    result = run_command(LIST_WORKERS_CMD, cwd=base_dir, check=False)
    if not result.ok:
        logger.warning("worker 목록 조회 실패: %s", result.error)
        return None
    return result.output


def provision_worker(cfg: ServiceConfig, env: str, base_dir: str = ".") -> bool:
    """
    인사말만 돌려주는 최소 스크립트로 환경 하나의 worker 를 만든다.
    임시 스크립트는 성공/실패와 관계없이 삭제된다.
    """
    name = cfg.worker_name(env)
    click.echo(f"📦 Creating worker: {name}")

    deploy_env = dict(os.environ)
    deploy_env[ACCOUNT_ID_ENV] = cfg.account_id

    with tempfile.TemporaryDirectory(prefix=f"temp-worker-{env}-") as tmp_dir:
        script_path = os.path.join(tmp_dir, f"temp-worker-{env}.js")
        with open(script_path, "w", encoding="utf-8") as f:
            f.write(placeholder_script(env))

        try:
            run_command(
                [
                    "wrangler",
                    "deploy",
                    script_path,
                    "--name",
                    name,
                    "--compatibility-date",
                    COMPATIBILITY_DATE,
                ],
                cwd=base_dir,
                env=deploy_env,
                spinner_message=f"Creating {name}",
            )
        except CommandError as e:
            logger.warning("worker 생성 실패: %s", name)
            click.echo(f"❌ Failed to create {name}: {e}", err=True)
            return False

    click.echo(f"✅ Created: {name}")
    return True


def provision_workers(cfg: ServiceConfig, base_dir: str = ".") -> List[str]:
    """
    세 환경 모두 생성을 시도한다. 하나가 실패해도 나머지는 계속 진행하며,
    실제로 생성된 worker 이름 목록을 돌려준다.
    """
    click.echo("\n🏗️  Provisioning Cloudflare Workers...")
    created: List[str] = []
    for env in ENVIRONMENTS:
        if provision_worker(cfg, env, base_dir=base_dir):
            created.append(cfg.worker_name(env))
    click.echo("\n🎉 Worker provisioning complete!")
    return created


def check_workers(cfg: ServiceConfig, prompter: Prompter, base_dir: str = ".") -> bool:
    click.echo("🔧 Checking Cloudflare Workers...\n")

    listing = list_workers(base_dir)
    if listing is None:
        click.echo("❌ Cannot list Cloudflare Workers")
        click.echo("   💡 Check your Cloudflare authentication")
        return False

    expected = cfg.worker_names()
    status = match_workers(listing, expected)
    for name in expected:
        if name in status.present:
            click.echo(f"✅ Worker exists: {name}")
        else:
            click.echo(f"❌ Worker not found: {name}")

    if not status.present:
        click.echo("\n💡 No workers found. Create them with:")
        for env in ENVIRONMENTS:
            click.echo(
                f"   wrangler deploy --name {cfg.worker_name(env)} "
                f"--compatibility-date {COMPATIBILITY_DATE} "
                f"<<< '{placeholder_script(env)}'"
            )

        if cfg.is_complete:
            if prompter.confirm("\nWould you like to create these workers automatically? (y/n): "):
                created = provision_workers(cfg, base_dir=base_dir)
                status = WorkerStatus(
                    present=created,
                    missing=[name for name in expected if name not in created],
                )
        elif not cfg.config_file_present:
            click.echo(f"\n💡 Create {CONFIG_FILE} with serviceName and accountId for automatic provisioning")
        else:
            click.echo(f"\n💡 Update serviceName/accountId in {CONFIG_FILE} for automatic provisioning")

    click.echo()
    return status.ready
