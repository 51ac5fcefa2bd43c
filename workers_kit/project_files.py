"""
project_files
-------------

배포에 필요한 로컬 파일 점검과 보정.

- wrangler.<env>.toml / package.json 존재 여부
- package.json 의 scripts 항목 (필수/권장)
- 누락된 wrangler.<env>.toml 생성 (이미 있는 파일은 절대 덮어쓰지 않는다)
- GitHub Actions 워크플로우의 기본 서비스 이름/도메인 치환

여러 파일을 다루는 작업은 파일 단위로 성공/실패를 보고하며 롤백하지 않는다.
중간에 실패해도 다시 실행하면 남은 파일만 처리된다.
"""

from __future__ import annotations

import os
from importlib import resources
from typing import Dict, List

import click

from .config import CONFIG_FILE, ENVIRONMENTS, PACKAGE_FILE, ServiceConfig, read_json_file
from .logging_utils import get_logger


logger = get_logger(__name__)


REQUIRED_SCRIPTS = ["build", "tag:create", "tag:status"]
RECOMMENDED_SCRIPTS = ["build:dev", "build:qa", "build:prod"]

WORKFLOW_FILES = [
    ".github/workflows/deploy-dev.yml",
    ".github/workflows/deploy-qa.yml",
    ".github/workflows/deploy-prod.yml",
]

# 워크플로우 템플릿에 들어 있는 기본값
DEFAULT_SERVICE_TOKEN = "service_name: my-service"
DEFAULT_DOMAIN_TOKEN = "workers_domain: 'my-domain.workers.dev'"

MANIFEST_TEMPLATE = "wrangler.toml.example"


def manifest_filename(env: str) -> str:
    return f"wrangler.{env}.toml"


def manifest_filenames() -> List[str]:
    return [manifest_filename(env) for env in ENVIRONMENTS]


def required_files() -> List[str]:
    return manifest_filenames() + [PACKAGE_FILE]


def missing_manifests(base_dir: str = ".") -> List[str]:
    return [name for name in manifest_filenames() if not os.path.exists(os.path.join(base_dir, name))]


def load_manifest_template() -> str:
    return resources.files("workers_kit.templates").joinpath(MANIFEST_TEMPLATE).read_text(encoding="utf-8")


def render_manifest(cfg: ServiceConfig, env: str) -> str:
    return load_manifest_template().format(name=cfg.worker_name(env), env=env, service=cfg.service_name)


def check_environment_files(base_dir: str = ".") -> bool:
    click.echo("📄 Checking environment files...\n")

    all_exist = True
    for name in required_files():
        if os.path.exists(os.path.join(base_dir, name)):
            click.echo(f"✅ {name} exists")
        else:
            click.echo(f"❌ {name} not found")
            all_exist = False

    # worker-config.json 은 선택 사항
    if os.path.exists(os.path.join(base_dir, CONFIG_FILE)):
        click.echo(f"✅ {CONFIG_FILE} exists")
    else:
        click.echo(f"ℹ️  {CONFIG_FILE} not found (optional)")
        click.echo("   💡 Create one to simplify URL configuration")

    click.echo()
    return all_exist


def check_package_scripts(base_dir: str = ".") -> bool:
    """
    package.json 에 필수 scripts 가 모두 있으면 True.
    권장 scripts 누락은 안내만 하고 결과에 영향을 주지 않는다.
    """
    click.echo("📦 Checking package.json scripts...\n")

    path = os.path.join(base_dir, PACKAGE_FILE)
    if not os.path.exists(path):
        click.echo(f"❌ {PACKAGE_FILE} not found")
        return False

    pkg = read_json_file(path)
    if pkg is None:
        click.echo(f"❌ {PACKAGE_FILE} could not be parsed")
        return False

    scripts = pkg.get("scripts") or {}
    has_required = True
    for script in REQUIRED_SCRIPTS:
        if scripts.get(script):
            click.echo(f"✅ Script exists: {script}")
        else:
            click.echo(f"❌ Missing required script: {script}")
            has_required = False

    for script in RECOMMENDED_SCRIPTS:
        if scripts.get(script):
            click.echo(f"✅ Script exists: {script}")
        else:
            click.echo(f"ℹ️  Recommended script missing: {script}")

    click.echo()
    return has_required


def create_manifests(cfg: ServiceConfig, base_dir: str = ".") -> Dict[str, str]:
    """
    없는 wrangler.<env>.toml 만 템플릿으로 생성한다.

    Returns:
        파일 이름 -> "created" | "skipped" | "failed"
    """
    click.echo("\n📄 Creating wrangler configuration files...")

    results: Dict[str, str] = {}
    for env in ENVIRONMENTS:
        filename = manifest_filename(env)
        path = os.path.join(base_dir, filename)

        if os.path.exists(path):
            click.echo(f"ℹ️  {filename} already exists, skipping...")
            results[filename] = "skipped"
            continue

        try:
            # "x" 모드: 확인 직후 다른 프로세스가 만든 파일도 덮어쓰지 않는다.
            with open(path, "x", encoding="utf-8") as f:
                f.write(render_manifest(cfg, env))
        except FileExistsError:
            click.echo(f"ℹ️  {filename} already exists, skipping...")
            results[filename] = "skipped"
            continue
        except OSError as e:
            logger.warning("manifest 생성 실패: %s (%s)", filename, e)
            click.echo(f"❌ Failed to create {filename}: {e}", err=True)
            results[filename] = "failed"
            continue

        click.echo(f"✅ Created: {filename}")
        results[filename] = "created"

    return results


def update_workflow_files(cfg: ServiceConfig, base_dir: str = ".") -> Dict[str, str]:
    """
    워크플로우 파일의 기본 서비스 이름/도메인을 실제 값으로 바꾼다.
    없는 파일은 건드리지 않고 "not found" 로 보고한다.

    Returns:
        파일 경로 -> "updated" | "unchanged" | "not found" | "failed"
    """
    click.echo("\n📝 Updating GitHub Actions workflow files...")

    results: Dict[str, str] = {}
    for rel_path in WORKFLOW_FILES:
        path = os.path.join(base_dir, rel_path)
        if not os.path.exists(path):
            click.echo(f"ℹ️  File not found: {rel_path}")
            results[rel_path] = "not found"
            continue

        try:
            with open(path, "r", encoding="utf-8") as f:
                original = f.read()
            content = original.replace(DEFAULT_SERVICE_TOKEN, f"service_name: {cfg.service_name}")
            content = content.replace(DEFAULT_DOMAIN_TOKEN, f"workers_domain: '{cfg.workers_domain}'")
            if content == original:
                click.echo(f"ℹ️  No placeholders to update: {rel_path}")
                results[rel_path] = "unchanged"
                continue
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            logger.warning("워크플로우 갱신 실패: %s (%s)", rel_path, e)
            click.echo(f"❌ Failed to update {rel_path}: {e}", err=True)
            results[rel_path] = "failed"
            continue

        click.echo(f"✅ Updated: {rel_path}")
        results[rel_path] = "updated"

    return results
