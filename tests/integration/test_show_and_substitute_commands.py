"""CLI tests for the `show`, `substitute`, and `version` commands."""

import json
from pathlib import Path

from typer.testing import CliRunner

from safeconfig import __version__
from safeconfig.cli import app


def test_show_prints_value_tree_as_json(service_config_path: Path, service_env_path: Path) -> None:
    """Show should print the typed tree after substitution."""

    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "show",
            str(service_config_path),
            "--env-file",
            str(service_env_path),
            "--no-process-env",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["app"] == {"name": "orders", "debug": False, "workers": 4}
    assert payload["database"]["host"] == "db.internal"


def test_show_prints_value_tree_as_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text("name: svc\nports: [80, 443]\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        app, ["show", str(config_path), "--format", "yaml", "--no-process-env"]
    )

    assert result.exit_code == 0, result.output
    assert result.output == "name: svc\nports:\n- 80\n- 443\n"


def test_show_rejects_unknown_format(tmp_path: Path) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text("name: svc\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(config_path), "--format", "toml"])

    assert result.exit_code == 1
    assert "Unsupported `--format` value `toml`" in result.output


def test_show_fails_when_document_cannot_be_parsed(tmp_path: Path) -> None:
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("obj: !!python/name:os.system\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["show", str(config_path), "--no-process-env"])

    assert result.exit_code == 1
    assert "[parse-failure]" in result.output
    assert f"show failed: `{config_path}` could not be parsed." in result.output


def test_substitute_prints_resolved_text(tmp_path: Path) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text("host: ${HOST}\nport: 1\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["substitute", str(config_path), "--no-process-env", "--env", "HOST=db.local"],
    )

    assert result.exit_code == 0, result.output
    assert result.output == "host: db.local\nport: 1\n"


def test_substitute_keeps_unresolved_placeholders(tmp_path: Path) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text("host: ${HOST}\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["substitute", str(config_path), "--no-process-env"])

    assert result.exit_code == 0
    assert "host: ${HOST}\n" in result.output
    assert "[unresolved-variable] line 1" in result.output


def test_version_prints_package_version() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__
