"""
status
------

환경별로 현재 배포되어 있다고 볼 수 있는 버전을 요약한다 (tag:status).
상태를 바꾸지 않으며, 태그가 없어도 오류로 보지 않는다.
"""

from __future__ import annotations

from typing import List

from . import git_repo
from .config import ENVIRONMENTS, ServiceConfig
from .logging_utils import get_logger


logger = get_logger(__name__)


ENVIRONMENT_TITLES = {
    "dev": "Development",
    "qa": "QA",
    "prod": "Production",
}


def _environment_section(cfg: ServiceConfig, env: str, base_dir: str) -> List[str]:
    lines: List[str] = [f"## {ENVIRONMENT_TITLES[env]}"]

    if env == "dev":
        # dev 는 태그 없이 main 브랜치에서 계속 배포된다.
        lines.append(f"  Deploys from: {git_repo.MAIN_BRANCH} branch (HEAD)")
        latest = git_repo.latest_branch_commit(git_repo.MAIN_BRANCH, base_dir=base_dir)
        if latest:
            lines.append(f"  Latest commit: {latest}")
    else:
        tag = git_repo.latest_tag(env, base_dir=base_dir)
        if tag:
            info = git_repo.tag_info(tag, base_dir=base_dir)
            lines.append(f"  Latest tag: {info.tag}")
            lines.append(f"  Commit: {info.commit}")
            lines.append(f"  Date: {info.date}")
            lines.append(f"  Author: {info.author}")
            lines.append(f"  Message: {info.message}")
        else:
            lines.append(f"  No tags found matching pattern: {env}-*")

    lines.append(f"  URL: {cfg.public_url(env)}")
    lines.append("")
    return lines


def build_status_report(cfg: ServiceConfig, base_dir: str = ".") -> str:
    lines: List[str] = ["🚀 Deployment Status", ""]

    branch = git_repo.current_branch(base_dir)
    commit = git_repo.short_commit("HEAD", base_dir=base_dir)
    lines.append(f"📍 Current branch: {branch or 'unknown'}")
    lines.append(f"📝 Current commit: {commit or 'unknown'}")
    lines.append("")

    for env in ENVIRONMENTS:
        lines.extend(_environment_section(cfg, env, base_dir))

    actions_url = git_repo.github_actions_url(git_repo.remote_url(base_dir))
    if actions_url:
        lines.append(f"🔗 GitHub Actions: {actions_url}")

    logger.debug("status report 생성 완료 (%d lines)", len(lines))
    return "\n".join(lines).rstrip()
