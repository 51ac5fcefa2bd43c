"""
prerequisites
-------------

로컬에 필요한 도구(Node.js, npm, Git, Wrangler)가 설치되어 있고
최소 버전 이상인지 점검한다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import click

from .logging_utils import get_logger
from .subprocess_utils import run_command
from .versioning import compare_versions, extract_version_number


logger = get_logger(__name__)


STATUS_PASS = "pass"
STATUS_WARN = "warn"
STATUS_FAIL = "fail"


@dataclass(frozen=True)
class ToolRequirement:
    name: str
    command: List[str]
    min_version: str
    install_hint: Optional[str] = None


REQUIRED_TOOLS: List[ToolRequirement] = [
    ToolRequirement("Node.js", ["node", "--version"], "18.0.0"),
    ToolRequirement("npm", ["npm", "--version"], "8.0.0"),
    ToolRequirement("Git", ["git", "--version"], "2.0.0"),
    ToolRequirement("Wrangler", ["wrangler", "--version"], "3.0.0", "npm install -g wrangler"),
]


@dataclass(frozen=True)
class ToolCheck:
    name: str
    status: str
    version: Optional[str] = None
    min_version: Optional[str] = None


def check_tool(tool: ToolRequirement) -> ToolCheck:
    result = run_command(tool.command, check=False, timeout=60.0)
    if not result.ok or not result.output:
        return ToolCheck(tool.name, STATUS_FAIL, None, tool.min_version)

    version = result.output.splitlines()[0].strip()
    number = extract_version_number(version)
    if compare_versions(number, tool.min_version) < 0:
        return ToolCheck(tool.name, STATUS_WARN, version, tool.min_version)
    return ToolCheck(tool.name, STATUS_PASS, version, tool.min_version)


def check_prerequisites(tools: Optional[List[ToolRequirement]] = None) -> List[ToolCheck]:
    """
    모든 도구를 끝까지 점검하고 결과를 돌려준다. (중간에 멈추지 않는다)
    """
    click.echo("🔍 Checking prerequisites...\n")

    results: List[ToolCheck] = []
    for tool in tools or REQUIRED_TOOLS:
        check = check_tool(tool)
        results.append(check)

        if check.status == STATUS_FAIL:
            click.echo(f"❌ {tool.name}: Not installed")
            if tool.install_hint:
                click.echo(f"   💡 Run: {tool.install_hint}")
        elif check.status == STATUS_WARN:
            click.echo(f"⚠️  {tool.name}: {check.version} (minimum required: {tool.min_version})")
        else:
            click.echo(f"✅ {tool.name}: {check.version}")

    click.echo()
    logger.debug("prerequisite 결과: %s", results)
    return results


def all_passed(results: List[ToolCheck]) -> bool:
    return all(r.status == STATUS_PASS for r in results)


def any_missing(results: List[ToolCheck]) -> bool:
    return any(r.status == STATUS_FAIL for r in results)
