import json

from workers_kit import project_files
from workers_kit.config import ServiceConfig


def _cfg() -> ServiceConfig:
    return ServiceConfig(
        service_name="api",
        workers_domain="acme.workers.dev",
        account_id="acc",
        config_file_present=True,
        service_name_source="config",
        domain_configured=True,
    )


def _snapshot(path) -> dict:  # noqa: ANN001
    return {p.name: p.read_text(encoding="utf-8") for p in sorted(path.iterdir()) if p.is_file()}


def test_check_environment_files(tmp_path, capsys) -> None:  # noqa: ANN001
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    (tmp_path / "wrangler.dev.toml").write_text("", encoding="utf-8")

    assert not project_files.check_environment_files(str(tmp_path))
    out = capsys.readouterr().out
    assert "❌ wrangler.qa.toml not found" in out
    assert "ℹ️  worker-config.json not found (optional)" in out

    for env in ("qa", "prod"):
        (tmp_path / f"wrangler.{env}.toml").write_text("", encoding="utf-8")
    assert project_files.check_environment_files(str(tmp_path))


def test_create_manifests_is_idempotent(tmp_path) -> None:  # noqa: ANN001
    first = project_files.create_manifests(_cfg(), str(tmp_path))
    assert set(first.values()) == {"created"}
    content = (tmp_path / "wrangler.qa.toml").read_text(encoding="utf-8")
    assert content.startswith('name = "api-qa"\nmain = "dist/index.js"\ncompatibility_date = "2025-01-01"\n')
    assert 'bucket_name = "api-qa-bucket"' in content

    (tmp_path / "wrangler.dev.toml").write_text('name = "edited"\n', encoding="utf-8")
    before = _snapshot(tmp_path)

    second = project_files.create_manifests(_cfg(), str(tmp_path))

    assert set(second.values()) == {"skipped"}
    assert _snapshot(tmp_path) == before


def test_create_only_missing_manifest(tmp_path) -> None:  # noqa: ANN001
    (tmp_path / "wrangler.prod.toml").write_text("keep", encoding="utf-8")

    results = project_files.create_manifests(_cfg(), str(tmp_path))

    assert results == {
        "wrangler.dev.toml": "created",
        "wrangler.qa.toml": "created",
        "wrangler.prod.toml": "skipped",
    }
    assert (tmp_path / "wrangler.prod.toml").read_text(encoding="utf-8") == "keep"
    assert project_files.missing_manifests(str(tmp_path)) == []


def test_package_scripts(tmp_path, capsys) -> None:  # noqa: ANN001
    pkg = {"name": "api", "scripts": {"build": "tsc", "tag:create": "x", "tag:status": "y"}}
    (tmp_path / "package.json").write_text(json.dumps(pkg), encoding="utf-8")

    assert project_files.check_package_scripts(str(tmp_path))
    assert "ℹ️  Recommended script missing: build:dev" in capsys.readouterr().out

    del pkg["scripts"]["tag:status"]
    (tmp_path / "package.json").write_text(json.dumps(pkg), encoding="utf-8")
    assert not project_files.check_package_scripts(str(tmp_path))


def test_package_scripts_missing_file(tmp_path) -> None:  # noqa: ANN001
    assert not project_files.check_package_scripts(str(tmp_path))


def test_update_workflow_files(tmp_path) -> None:  # noqa: ANN001
    workflows = tmp_path / ".github" / "workflows"
    workflows.mkdir(parents=True)
    (workflows / "deploy-dev.yml").write_text(
        "with:\n  service_name: my-service\n  workers_domain: 'my-domain.workers.dev'\n",
        encoding="utf-8",
    )

    results = project_files.update_workflow_files(_cfg(), str(tmp_path))

    assert results == {
        ".github/workflows/deploy-dev.yml": "updated",
        ".github/workflows/deploy-qa.yml": "not found",
        ".github/workflows/deploy-prod.yml": "not found",
    }
    assert (workflows / "deploy-dev.yml").read_text(encoding="utf-8") == (
        "with:\n  service_name: api\n  workers_domain: 'acme.workers.dev'\n"
    )
    assert not (workflows / "deploy-qa.yml").exists()


def test_manifest_template_is_package_data() -> None:
    template = project_files.load_manifest_template()

    assert template.startswith('name = "{name}"\n')
    assert project_files.render_manifest(_cfg(), "prod").startswith('name = "api-prod"\n')


def test_workflow_without_placeholders_is_left_alone(tmp_path) -> None:  # noqa: ANN001
    workflows = tmp_path / ".github" / "workflows"
    workflows.mkdir(parents=True)
    target = workflows / "deploy-qa.yml"
    target.write_text("with:\n  service_name: api\n", encoding="utf-8")
    before = target.stat().st_mtime_ns

    results = project_files.update_workflow_files(_cfg(), str(tmp_path))

    assert results[".github/workflows/deploy-qa.yml"] == "unchanged"
    assert target.read_text(encoding="utf-8") == "with:\n  service_name: api\n"
    assert target.stat().st_mtime_ns == before
