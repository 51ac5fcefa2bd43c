from conftest import fail

from workers_kit import git_repo, status
from workers_kit.config import ServiceConfig


def _cfg() -> ServiceConfig:
    return ServiceConfig(service_name="api", workers_domain="acme.workers.dev", account_id="acc")


def test_status_report(fake_runner) -> None:  # noqa: ANN001
    fake_runner.responses.update(
        {
            "git rev-parse --abbrev-ref HEAD": "main",
            "git rev-parse --short HEAD": "abc1234",
            "git log -1 --format=%h %s main": "abc1234 add feature",
            "git tag -l qa-*": "qa-1.4.0\nqa-1.3.0",
            "git tag -l prod-*": "",
            "git rev-list -n 1 qa-1.4.0": "0123456789abcdef",
            "git log -1 --format=%ai qa-1.4.0": "2026-01-02 10:00:00 +0000",
            "git log -1 --format=%an qa-1.4.0": "Jane Doe",
            "git tag -l --format=%(contents:subject) qa-1.4.0": "Deploy to qa - version 1.4.0",
            "git config --get remote.origin.url": "git@github.com:acme/api.git",
        }
    )

    report = status.build_status_report(_cfg())

    assert "📍 Current branch: main" in report
    assert "Deploys from: main branch (HEAD)" in report
    assert "Latest commit: abc1234 add feature" in report
    assert "Latest tag: qa-1.4.0" in report
    assert "Commit: 0123456" in report
    assert "Author: Jane Doe" in report
    assert "Message: Deploy to qa - version 1.4.0" in report
    assert "No tags found matching pattern: prod-*" in report
    assert "URL: https://api-qa.acme.workers.dev" in report
    assert "URL: https://api.acme.workers.dev" in report
    assert report.endswith("🔗 GitHub Actions: https://github.com/acme/api/actions")
    # 읽기 전용
    assert not fake_runner.called("git tag -a")
    assert not fake_runner.called("git push")


def test_status_without_git(fake_runner) -> None:  # noqa: ANN001
    fake_runner.responses["git"] = fail(returncode=127)

    report = status.build_status_report(_cfg())

    assert "Current branch: unknown" in report
    assert "No tags found matching pattern: qa-*" in report
    assert "GitHub Actions" not in report


def test_github_actions_url() -> None:
    assert git_repo.github_actions_url("https://github.com/acme/api.git") == "https://github.com/acme/api/actions"
    assert git_repo.github_actions_url("https://github.com/acme/api") == "https://github.com/acme/api/actions"
    assert git_repo.github_actions_url("https://gitlab.com/acme/api.git") is None
    assert git_repo.github_actions_url(None) is None
