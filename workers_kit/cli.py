import sys

import click

from .config import load_env_files, resolve_config, ServiceConfig
from .logging_utils import setup_logging, get_logger
from .orchestrator import run_validation
from .prompts import Prompter
from .status import build_status_report
from .tagging import create_tag_flow


logger = get_logger(__name__)


@click.group()
@click.option(
    "-C",
    "--chdir",
    "chdir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=".",
    help="작업 디렉토리 (기본: 현재 디렉토리)",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="로그 레벨을 올립니다. (-v: INFO, -vv: DEBUG)",
)
@click.pass_context
def main(ctx: click.Context, chdir: str, verbose: int) -> None:
    """Cloudflare Workers 환경 점검 / 배포 태그 CLI"""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["chdir"] = chdir
    ctx.obj["verbose"] = verbose
    ctx.obj.setdefault("prompter", Prompter())


def _load_config_from_ctx(ctx: click.Context) -> ServiceConfig:
    base_dir: str = ctx.obj["chdir"]
    load_env_files(base_dir)
    cfg = resolve_config(base_dir)
    logger.debug("Config loaded: %s", cfg)
    return cfg


@main.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """
    배포 전 로컬 환경(도구, git, Cloudflare 인증, 설정 파일, worker)을 점검하고
    누락된 항목은 대화형으로 보정을 제안한다.
    """
    cfg = _load_config_from_ctx(ctx)

    try:
        code = run_validation(cfg, ctx.obj["prompter"], base_dir=ctx.obj["chdir"])
    except click.Abort:
        raise
    except Exception as e:  # noqa: BLE001
        logger.exception("환경 점검 중 오류 발생")
        click.echo(f"\n❌ Error during validation: {e}", err=True)
        sys.exit(1)

    sys.exit(code)


@main.command(name="tag:create")
@click.pass_context
def tag_create(ctx: click.Context) -> None:
    """qa/prod 배포 태그를 대화형으로 생성하고 origin 에 push"""
    outcome = create_tag_flow(ctx.obj["prompter"], base_dir=ctx.obj["chdir"])
    logger.info("tag:create 결과: %s", outcome)
    sys.exit(outcome.exit_code)


@main.command(name="tag:status")
@click.pass_context
def tag_status(ctx: click.Context) -> None:
    """환경별 최신 배포 태그/커밋 요약 (읽기 전용, 항상 exit 0)"""
    cfg = _load_config_from_ctx(ctx)
    click.echo(build_status_report(cfg, base_dir=ctx.obj["chdir"]))
