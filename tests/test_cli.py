"""Integration-style tests for the changelog-md CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from changelog_md import __version__
from changelog_md.cli import autodetect_source, cli, main
from changelog_md.codec import from_yaml, load_path, to_yaml
from changelog_md.model import Changelog, Changes, Version

REPOSITORY = "https://example.com/r"


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CHANGELOG_MD_SOURCE", raising=False)
    return tmp_path


def _write_source(project: Path, changelog: Changelog) -> Path:
    path = project / "CHANGELOG.yml"
    path.write_text(to_yaml(changelog), encoding="utf-8")
    return path


def _seeded(*versions: Version) -> Changelog:
    return Changelog(
        title="Changelog",
        description="Notes.\n",
        repository=REPOSITORY,
        unreleased=Changes(added=["pending"]),
        versions=list(versions),
    )


def test_cli_version_option(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--version"])
    captured = capsys.readouterr()
    assert exit_code == 0
    assert __version__ in captured.out


def test_init_writes_seed_changelog(project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["init", "--repository", REPOSITORY])

    assert result.exit_code == 0, result.output
    source = project / "CHANGELOG.yml"
    assert from_yaml(source.read_text(encoding="utf-8")) == Changelog.default(REPOSITORY)


def test_init_uses_format_extension(project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["init", "--format", "toml", "--repository", REPOSITORY])

    assert result.exit_code == 0, result.output
    assert load_path(project / "CHANGELOG.toml").repository == REPOSITORY


def test_init_detects_repository_from_git(project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "changelog_md.cli._convert.guess_repository_url",
        lambda root: "https://git.example.com/me/project",
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["init", "--format", "json"])

    assert result.exit_code == 0, result.output
    changelog = load_path(project / "CHANGELOG.json")
    assert changelog.repository == "https://git.example.com/me/project"


def test_init_refuses_to_overwrite(project: Path) -> None:
    _write_source(project, _seeded())
    runner = CliRunner()

    result = runner.invoke(cli, ["init", "--repository", REPOSITORY])

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_add_release_yank_and_render(project: Path) -> None:
    source = _write_source(project, _seeded())
    runner = CliRunner()

    add_result = runner.invoke(cli, ["add", "fixed", "Crash on empty input"])
    assert add_result.exit_code == 0, add_result.output
    assert load_path(source).unreleased == Changes(added=["pending"], fixed=["Crash on empty input"])

    release_result = runner.invoke(
        cli, ["release", "1.0.0", "First release", "--tag", "v1.0.0", "--date", "2025-01-01"]
    )
    assert release_result.exit_code == 0, release_result.output
    released = load_path(source)
    assert released.unreleased.is_empty()
    assert released.versions == [
        Version(
            version="1.0.0",
            tag="v1.0.0",
            date="2025-01-01",
            description="First release",
            changes=Changes(added=["pending"], fixed=["Crash on empty input"]),
        )
    ]

    yank_result = runner.invoke(cli, ["yank", "1.0.0", "Broken build"])
    assert yank_result.exit_code == 0, yank_result.output
    assert load_path(source).versions[0].yanked == "Broken build"

    render_result = runner.invoke(cli, ["render"])
    assert render_result.exit_code == 0, render_result.output
    markdown = (project / "CHANGELOG.md").read_text(encoding="utf-8")
    assert "## 1.0.0 - 2025-01-01 [YANKED] Broken build\n" in markdown
    assert "- [1.0.0] <https://example.com/r/commits/v1.0.0>\n" in markdown


def test_release_rejects_duplicate_version(project: Path) -> None:
    source = _write_source(
        project, _seeded(Version(version="1.0.0", tag="v1.0.0", date="2025-01-01"))
    )
    before = source.read_text(encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["release", "1.0.0"])

    assert result.exit_code == 1
    assert "already exists" in result.output
    assert source.read_text(encoding="utf-8") == before


def test_yank_rejects_unknown_version(project: Path) -> None:
    source = _write_source(project, _seeded())
    before = source.read_text(encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["yank", "9.9.9", "nope"])

    assert result.exit_code == 1
    assert "not found" in result.output
    assert source.read_text(encoding="utf-8") == before


def test_add_rejects_unknown_category(project: Path) -> None:
    _write_source(project, _seeded())
    runner = CliRunner()

    result = runner.invoke(cli, ["add", "improved", "Something"])

    assert result.exit_code == 2


def test_convert_writes_other_formats(project: Path) -> None:
    changelog = _seeded(Version(version="1.0.0", tag="v1.0.0", date="2025-01-01"))
    _write_source(project, changelog)
    runner = CliRunner()

    toml_result = runner.invoke(cli, ["convert", "--format", "toml"])
    json_result = runner.invoke(cli, ["convert", "--format", "json"])

    assert toml_result.exit_code == 0, toml_result.output
    assert json_result.exit_code == 0, json_result.output
    assert load_path(project / "CHANGELOG.toml") == changelog
    assert load_path(project / "CHANGELOG.json") == changelog


def test_convert_requires_force_to_overwrite(project: Path) -> None:
    _write_source(project, _seeded())
    (project / "CHANGELOG.json").write_text("{}", encoding="utf-8")
    runner = CliRunner()

    refused = runner.invoke(cli, ["--changelog", "CHANGELOG.yml", "convert", "--format", "json"])
    forced = runner.invoke(
        cli, ["--changelog", "CHANGELOG.yml", "convert", "--format", "json", "--force"]
    )

    assert refused.exit_code == 1
    assert forced.exit_code == 0, forced.output
    assert load_path(project / "CHANGELOG.json") == _seeded()


def test_validate_reports_success_and_failure(project: Path) -> None:
    source = _write_source(project, _seeded())
    runner = CliRunner()

    ok = runner.invoke(cli, ["validate"])
    assert ok.exit_code == 0, ok.output

    source.write_text(source.read_text(encoding="utf-8") + "extra_field: true\n", encoding="utf-8")
    failed = runner.invoke(cli, ["validate"])
    assert failed.exit_code == 1


def test_schema_prints_json(project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["schema"])

    assert result.exit_code == 0, result.output
    schema = json.loads(result.stdout)
    assert schema["properties"]["versions"]["type"] == "object"


def test_schema_writes_array_form_to_file(project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["schema", "schema.json", "--json-array"])

    assert result.exit_code == 0, result.output
    schema = json.loads((project / "schema.json").read_text(encoding="utf-8"))
    assert schema["properties"]["versions"]["type"] == "array"


def test_missing_source_is_reported(project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["render"])

    assert result.exit_code == 1
    assert "unable to find a CHANGELOG source" in result.output


def test_source_from_environment(project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    custom = project / "history.json"
    custom.write_text(
        json.dumps({"title": "T", "description": "D", "repository": REPOSITORY}),
        encoding="utf-8",
    )
    monkeypatch.setenv("CHANGELOG_MD_SOURCE", str(custom))
    runner = CliRunner()

    result = runner.invoke(cli, ["render", "OUT.md"])

    assert result.exit_code == 0, result.output
    assert (project / "OUT.md").read_text(encoding="utf-8").startswith("# T\n")


def test_autodetect_source_prefers_sorted_changelog_files(tmp_path: Path) -> None:
    (tmp_path / "README.md").write_text("", encoding="utf-8")
    (tmp_path / "changelog.toml").write_text("", encoding="utf-8")
    (tmp_path / "CHANGELOG.yml").write_text("", encoding="utf-8")
    (tmp_path / "CHANGELOG.md").write_text("", encoding="utf-8")

    assert autodetect_source(tmp_path) == tmp_path / "CHANGELOG.yml"


def test_autodetect_source_returns_none_without_candidates(tmp_path: Path) -> None:
    (tmp_path / "CHANGELOG.md").write_text("", encoding="utf-8")

    assert autodetect_source(tmp_path) is None


def test_main_returns_error_code_for_failures(project: Path) -> None:
    assert main(["render"]) == 1
