"""
git_repo
--------

git CLI 래퍼. 원격 저장소 점검(init), 태그 생성(tag:create), 상태 조회(tag:status)에서
공통으로 쓰는 git 호출을 모아 둔다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

import click

from .logging_utils import get_logger
from .subprocess_utils import RunResult, run_command


logger = get_logger(__name__)


REMOTE = "origin"
MAIN_BRANCH = "main"

_GITHUB_REMOTE_RE = re.compile(r"github\.com[:/](.+?)(\.git)?$")


def _git(args: List[str], *, base_dir: str = ".", check: bool = False) -> RunResult:
    return run_command(["git", *args], cwd=base_dir, check=check)


def _output_or_none(result: RunResult) -> Optional[str]:
    if not result.ok or not result.output:
        return None
    return result.output


# -----------------------------
# 조회
# -----------------------------
def remote_url(base_dir: str = ".") -> Optional[str]:
    return _output_or_none(_git(["config", "--get", f"remote.{REMOTE}.url"], base_dir=base_dir))


def current_branch(base_dir: str = ".") -> Optional[str]:
    return _output_or_none(_git(["rev-parse", "--abbrev-ref", "HEAD"], base_dir=base_dir))


def short_commit(ref: str = "HEAD", base_dir: str = ".") -> Optional[str]:
    return _output_or_none(_git(["rev-parse", "--short", ref], base_dir=base_dir))


def has_uncommitted_changes(base_dir: str = ".") -> bool:
    """
    작업 트리에 커밋되지 않은 변경이 있는지. git status 자체가 실패하면 CommandError.
    """
    result = _git(["status", "--porcelain"], base_dir=base_dir, check=True)
    return bool(result.output)


def recent_commits(limit: int = 10, base_dir: str = ".") -> str:
    return _git(["log", "--oneline", f"-{limit}"], base_dir=base_dir).output


def latest_tag(env: str, base_dir: str = ".") -> Optional[str]:
    """
    `<env>-*` 태그 중 version sort 내림차순 첫 번째. 없으면 None.
    """
    result = _git(["tag", "-l", f"{env}-*", "--sort=-version:refname"], base_dir=base_dir)
    tags = [line.strip() for line in result.output.splitlines() if line.strip()] if result.ok else []
    return tags[0] if tags else None


def latest_version(env: str, base_dir: str = ".") -> Optional[str]:
    tag = latest_tag(env, base_dir=base_dir)
    if tag is None:
        return None
    prefix = f"{env}-"
    return tag[len(prefix):] if tag.startswith(prefix) else None


@dataclass(frozen=True)
class TagInfo:
    tag: str
    commit: str
    date: str
    author: str
    message: str


def tag_info(tag: str, base_dir: str = ".") -> TagInfo:
    commit = _output_or_none(_git(["rev-list", "-n", "1", tag], base_dir=base_dir))
    date = _output_or_none(_git(["log", "-1", "--format=%ai", tag], base_dir=base_dir))
    author = _output_or_none(_git(["log", "-1", "--format=%an", tag], base_dir=base_dir))
    message = _output_or_none(
        _git(["tag", "-l", "--format=%(contents:subject)", tag], base_dir=base_dir)
    )
    return TagInfo(
        tag=tag,
        commit=commit[:7] if commit else "unknown",
        date=date or "unknown",
        author=author or "unknown",
        message=message or "No message",
    )


def latest_branch_commit(branch: str = MAIN_BRANCH, base_dir: str = ".") -> Optional[str]:
    return _output_or_none(_git(["log", "-1", "--format=%h %s", branch], base_dir=base_dir))


def show_tag(tag: str, base_dir: str = ".") -> str:
    return _git(["show", tag, "--no-patch"], base_dir=base_dir).output


def github_actions_url(url: Optional[str]) -> Optional[str]:
    """
    origin URL 이 GitHub 저장소이면 Actions 페이지 주소를 돌려준다.
    """
    if not url:
        return None
    match = _GITHUB_REMOTE_RE.search(url.strip())
    if not match:
        return None
    return f"https://github.com/{match.group(1)}/actions"


# -----------------------------
# 변경
# -----------------------------
def create_annotated_tag(tag: str, commit: str, message: str, base_dir: str = ".") -> None:
    logger.info("태그 생성: %s -> %s", tag, commit)
    _git(["tag", "-a", tag, commit, "-m", message], base_dir=base_dir, check=True)


def push_tag(tag: str, base_dir: str = ".") -> None:
    logger.info("태그 푸시: %s -> %s", tag, REMOTE)
    _git(["push", REMOTE, tag], base_dir=base_dir, check=True)


# -----------------------------
# init 점검
# -----------------------------
def check_repository(base_dir: str = ".") -> bool:
    """
    origin 원격이 설정되어 있고 실제로 접근 가능한지 확인한다.
    """
    click.echo("📂 Checking Git repository...\n")

    origin = remote_url(base_dir)
    if not origin:
        click.echo("❌ No Git remote origin configured")
        click.echo("   💡 Initialize with: git remote add origin <your-repo-url>")
        return False

    click.echo(f"✅ Repository: {origin}")

    access = _git(["ls-remote", "--heads", REMOTE], base_dir=base_dir)
    if not access.ok:
        logger.warning("원격 저장소 접근 실패: %s", access.error)
        click.echo("❌ Cannot access Git repository")
        click.echo("   💡 Check your Git credentials and repository access")
        return False

    click.echo("✅ Git repository access confirmed")
    click.echo()
    return True
