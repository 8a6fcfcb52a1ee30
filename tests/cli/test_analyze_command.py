"""Tests for the code-insight command line."""

import json

import pytest
from typer.testing import CliRunner

from code_insight.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))


@pytest.fixture
def risky_project(tmp_path):
    project = tmp_path / "risky"
    project.mkdir()
    (project / "app.js").write_text(
        "function run(input) {\n  return eval(input);\n}\n"
    )
    (project / "view.js").write_text("el.innerHTML = html;\n")
    return project


class TestAnalyzeCommand:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "Code Insight" in result.output
        assert "0.1.0" in result.output

    def test_json_output(self, node_project):
        result = runner.invoke(app, ["-C", str(node_project), "--json", "--no-audit"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["summary"]["totalFiles"] == 2
        assert data["dependencies"]["hasPackageLock"] is True

    def test_json_single_section(self, node_project):
        result = runner.invoke(
            app, ["-C", str(node_project), "--json", "--no-audit", "--section", "dependencies"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert "dependencies" in data
        assert "complexity" not in data

    def test_rich_output(self, node_project):
        result = runner.invoke(app, ["-C", str(node_project), "--no-audit"])
        assert result.exit_code == 0, result.output
        assert "Code Analysis Report" in result.output
        assert "Recommendations" in result.output

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, ["-C", str(tmp_path / "missing"), "--no-audit"])
        assert result.exit_code == 1
        assert "Invalid path" in result.output

    def test_fail_on_critical(self, risky_project):
        result = runner.invoke(
            app, ["-C", str(risky_project), "--no-audit", "--json", "--fail-on", "critical"]
        )
        assert result.exit_code == 1

    def test_fail_on_any(self, tmp_path):
        project = tmp_path / "mild"
        project.mkdir()
        (project / "view.js").write_text("el.innerHTML = html;\n")

        critical = runner.invoke(app, ["-C", str(project), "--no-audit", "--fail-on", "critical"])
        assert critical.exit_code == 0

        any_issue = runner.invoke(app, ["-C", str(project), "--no-audit", "--fail-on", "any"])
        assert any_issue.exit_code == 1

    def test_bad_config_file(self, node_project, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("workers = 0\n")
        result = runner.invoke(app, ["-C", str(node_project), "-c", str(config)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_unknown_section_rejected(self, node_project):
        result = runner.invoke(app, ["-C", str(node_project), "--section", "metrics"])
        assert result.exit_code == 2
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_unknown_fail_on_rejected(self, node_project):
        result = runner.invoke(app, ["-C", str(node_project), "--fail-on", "sometimes"])
        assert result.exit_code == 2
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_section_is_case_insensitive(self, node_project):
        result = runner.invoke(
            app, ["-C", str(node_project), "--json", "--no-audit", "--section", "SECURITY"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert "security" in data
        assert "complexity" not in data

    def test_fail_on_is_case_insensitive(self, risky_project):
        result = runner.invoke(
            app, ["-C", str(risky_project), "--no-audit", "--json", "--fail-on", "CRITICAL"]
        )
        assert result.exit_code == 1
