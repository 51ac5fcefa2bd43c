"""
tagging
-------

배포 태그 생성 흐름 (tag:create).

각 단계는 순서대로 실행되는 게이트이다.

1. 작업 트리 clean 확인          (실패 시 종료 코드 1)
2. 환경 선택 (qa/prod)           (그 외 입력은 재질문 없이 종료 코드 1)
3. 환경별 최신 버전 표시
4. 버전 입력 (1.2.3 으로 시작)   (형식 불일치 시 종료 코드 1)
5. 커밋 선택 (빈 입력이면 HEAD)
6. 요약 후 확인                  (y 이외의 입력은 취소, 종료 코드 0)
7. annotated 태그 생성 및 push   (실패 시 종료 코드 1)

같은 저장소에서 두 명이 동시에 실행하면 push 가 경합할 수 있으며,
원격 저장소의 원자성 외에 별도 보호 장치는 없다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import click

from . import git_repo
from .config import ENVIRONMENTS, TAGGED_ENVIRONMENTS
from .logging_utils import get_logger
from .prompts import Prompter
from .subprocess_utils import CommandError
from .versioning import build_tag_name, is_valid_version, tag_message


logger = get_logger(__name__)


STATUS_CREATED = "created"
STATUS_CANCELLED = "cancelled"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class TagOutcome:
    status: str
    tag: Optional[str] = None
    reason: str = ""

    @property
    def exit_code(self) -> int:
        return 1 if self.status == STATUS_FAILED else 0


def _failed(reason: str) -> TagOutcome:
    click.echo(f"❌ {reason}", err=True)
    return TagOutcome(STATUS_FAILED, reason=reason)


def show_latest_versions(base_dir: str = ".") -> None:
    click.echo("\n📊 Latest versions by environment:")
    for env in ENVIRONMENTS:
        version = git_repo.latest_version(env, base_dir=base_dir)
        click.echo(f"  {env.upper()}: {version or 'No tags found'}")
    click.echo()


def select_environment(prompter: Prompter) -> Optional[str]:
    env = prompter.ask("Target environment (qa/prod): ").lower()
    return env if env in TAGGED_ENVIRONMENTS else None


def select_version(prompter: Prompter) -> Optional[str]:
    version = prompter.ask("Version (e.g., 1.2.3): ")
    return version if is_valid_version(version) else None


def select_commit(prompter: Prompter) -> str:
    return prompter.ask("\nCommit SHA to tag (press Enter for HEAD): ") or "HEAD"


def create_tag_flow(prompter: Prompter, base_dir: str = ".") -> TagOutcome:
    click.echo("🏷️  Create Deployment Tag\n")

    # 1) clean tree
    try:
        dirty = git_repo.has_uncommitted_changes(base_dir)
    except CommandError as e:
        return _failed(f"Cannot read git status: {e.result.error}")
    if dirty:
        return _failed("You have uncommitted changes. Please commit or stash them first.")

    branch = git_repo.current_branch(base_dir)
    click.echo(f"📍 Current branch: {branch or 'unknown'}")

    # 2) environment
    env = select_environment(prompter)
    if env is None:
        return _failed('Invalid environment. Must be "qa" or "prod".')

    # 3) 현재 버전 안내
    show_latest_versions(base_dir)
    current = git_repo.latest_version(env, base_dir=base_dir)
    if current:
        click.echo(f"💡 Current {env.upper()} version: {current}\n")

    # 4) version
    version = select_version(prompter)
    if version is None:
        return _failed("Invalid version format. Use semantic versioning (e.g., 1.2.3).")

    # 5) commit
    click.echo("\n📝 Recent commits:")
    click.echo(git_repo.recent_commits(10, base_dir=base_dir))
    commit = select_commit(prompter)
    short = git_repo.short_commit(commit, base_dir=base_dir)
    if short is None:
        return _failed(f"Unknown commit: {commit}")

    tag = build_tag_name(env, version)

    # 6) confirm
    click.echo("\n📋 Summary:")
    click.echo(f"  Environment: {env}")
    click.echo(f"  Version: {version}")
    click.echo(f"  Tag: {tag}")
    click.echo(f"  Commit: {commit} ({short})")

    if not prompter.confirm("\nCreate this tag? (y/n): "):
        click.echo("❌ Tag creation cancelled.")
        return TagOutcome(STATUS_CANCELLED, tag=tag)

    # 7) create & push
    try:
        git_repo.create_annotated_tag(tag, commit, tag_message(env, version), base_dir=base_dir)
    except CommandError as e:
        logger.error("태그 생성 실패: %s", e)
        return _failed(f"Failed to create tag: {e.result.error or e}")

    try:
        git_repo.push_tag(tag, base_dir=base_dir)
    except CommandError as e:
        # 로컬 태그는 남아 있으므로 재실행 전에 지워야 한다.
        logger.error("태그 푸시 실패: %s", e)
        return _failed(
            f"Failed to push tag: {e.result.error or e}\n"
            f"   The local tag {tag} was kept. Remove it before retrying: git tag -d {tag}"
        )

    click.echo(f"\n✅ Tag created and pushed: {tag}")
    click.echo("🚀 Deployment will start automatically via GitHub Actions.")
    click.echo("\n📊 Tag information:")
    click.echo(git_repo.show_tag(tag, base_dir=base_dir))
    return TagOutcome(STATUS_CREATED, tag=tag)
