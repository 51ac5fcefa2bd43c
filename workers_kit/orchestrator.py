from __future__ import annotations

from typing import List

import click

from . import cf_auth, cf_workers, git_repo, prerequisites, project_files
from .config import SOURCE_CONFIG, ServiceConfig
from .logging_utils import get_logger
from .prompts import Prompter


logger = get_logger(__name__)


NEXT_STEPS: List[str] = [
    "1. Configure GitHub repository secrets:",
    "   - CLOUDFLARE_API_TOKEN",
    "   - CLOUDFLARE_ACCOUNT_ID\n",
    "2. Test development deployment:",
    "   git push origin main\n",
    "3. Create QA deployment:",
    "   npm run tag:create\n",
    "4. Check deployment status:",
    "   npm run tag:status\n",
    "For more details, see the README.md file",
]


def show_next_steps() -> None:
    click.echo("\n📋 Next Steps:\n")
    for line in NEXT_STEPS:
        click.echo(line)


def _fail(message: str) -> int:
    click.echo(f"\n⚠️  {message}")
    return 1


def _offer_manifest_creation(cfg: ServiceConfig, prompter: Prompter, base_dir: str) -> bool:
    """
    worker-config.json 에 serviceName 이 있고 wrangler.<env>.toml 이 빠져 있으면 생성을 제안한다.
    새로 만든 파일이 하나라도 있으면 True.
    """
    if cfg.service_name_source != SOURCE_CONFIG:
        return False
    if not project_files.missing_manifests(base_dir):
        return False
    if not prompter.confirm("\nWould you like to create missing wrangler configuration files? (y/n): "):
        return False
    results = project_files.create_manifests(cfg, base_dir=base_dir)
    click.echo()
    return "created" in results.values()


def run_validation(cfg: ServiceConfig, prompter: Prompter, base_dir: str = ".") -> int:
    """
    init 의 전체 점검 순서. 하드 게이트 실패 시 즉시 1 을 돌려주고,
    나머지 이슈는 경고로 모아 마지막에 요약한다.

    Returns:
        프로세스 종료 코드 (0: 완료(경고 포함), 1: 하드 게이트 실패)
    """
    click.echo("🚀 Cloudflare Workers Environment Validation\n")

    # 1) 필수 도구
    tool_results = prerequisites.check_prerequisites()
    if prerequisites.any_missing(tool_results):
        return _fail("Please install missing prerequisites before continuing.")
    tools_ok = prerequisites.all_passed(tool_results)

    # 2) git 원격 저장소
    if not git_repo.check_repository(base_dir):
        return _fail("Please configure Git repository access before continuing.")

    # 3) Cloudflare 인증
    if not cf_auth.check_authentication():
        if prompter.confirm("\nWould you like to login to Cloudflare now? (y/n): "):
            click.echo("\nOpening Cloudflare login...")
            cf_auth.login()
            click.echo("\nPlease complete the login process and run this script again.")
        return 1

    # 4) 필수 파일 (없으면 생성 제안 후 재확인)
    files_ok = project_files.check_environment_files(base_dir)
    if not files_ok:
        if _offer_manifest_creation(cfg, prompter, base_dir):
            files_ok = project_files.check_environment_files(base_dir)
    if not files_ok:
        return _fail("Required files are missing. Please create them before continuing.")

    # 5) 환경별 worker
    workers_ok = cf_workers.check_workers(cfg, prompter, base_dir=base_dir)
    if not workers_ok:
        click.echo("\n⚠️  Some Cloudflare Workers are missing. Please create them before continuing.")

    # 6) package.json scripts
    scripts_ok = project_files.check_package_scripts(base_dir)
    if not scripts_ok:
        click.echo("\n⚠️  Required package.json scripts are missing. Please add them before continuing.")

    # 7) 워크플로우 파일 치환
    if cfg.service_name_source == SOURCE_CONFIG and cfg.domain_configured:
        if prompter.confirm(
            "\nWould you like to update GitHub Actions workflow files with your configuration? (y/n): "
        ):
            project_files.update_workflow_files(cfg, base_dir=base_dir)

    if tools_ok and workers_ok and scripts_ok:
        click.echo("\n✅ Environment validation complete! Everything looks good.")
    else:
        logger.info("경고 포함 완료: tools=%s workers=%s scripts=%s", tools_ok, workers_ok, scripts_ok)
        click.echo(
            "\n⚠️  Environment validation completed with warnings. Please address the issues above."
        )

    show_next_steps()
    return 0
