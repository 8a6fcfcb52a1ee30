"""Tests for the public analyze_project entry point."""

import pytest

import code_insight
from code_insight import analyze_project
from code_insight.exceptions import InvalidPathError


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))


class TestAnalyzeProject:
    def test_returns_report(self, node_project):
        report = analyze_project(str(node_project), audit_enabled=False)

        assert report.project_path == str(node_project)
        assert report.summary.total_files == 2
        assert report.dependencies.dependency_count == 3
        assert all(d.vulnerabilities is None for d in report.dependencies.dependencies)
        assert report.recommendations

    def test_invalid_path(self, tmp_path):
        with pytest.raises(InvalidPathError):
            analyze_project(str(tmp_path / "missing"), audit_enabled=False)

    def test_version(self):
        assert code_insight.__version__ == "0.1.0"
