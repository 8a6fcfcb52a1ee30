"""Shared test fixtures for Code Insight."""

import json
from typing import Dict, List, Mapping, Optional, Sequence, Set

import pytest

from code_insight.exceptions import InvalidPathError
from code_insight.models import DependencyRecord, SourceFile


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class FakeCorpus:
    """In-memory corpus keyed by project path."""

    def __init__(self, files: Sequence[SourceFile], project_path: Optional[str] = None):
        self.files = list(files)
        self.project_path = project_path
        self.calls: List[str] = []

    def enumerate(self, project_path: str) -> List[SourceFile]:
        self.calls.append(project_path)
        if self.project_path is not None and project_path != self.project_path:
            raise InvalidPathError(project_path, "Directory does not exist")
        return list(self.files)


class FakeAuditClient:
    def __init__(self, counts: Mapping[str, int]):
        self.counts = dict(counts)
        self.calls = 0

    def audit(self, project_path, dependencies: Sequence[DependencyRecord]) -> Dict[str, int]:
        self.calls += 1
        return dict(self.counts)


class FakeOutdatedClient:
    def __init__(self, names: Set[str]):
        self.names = set(names)

    def outdated(self, project_path, dependencies: Sequence[DependencyRecord]) -> Set[str]:
        return set(self.names)


DUPLICATED_BLOCK = [
    "function foo() {",
    "  const total = x + 1;",
    "  logger.info(total);",
    "  return total;",
]


@pytest.fixture
def duplicated_pair():
    """Two files sharing a four-line block after a distinct first line."""
    a = SourceFile("a.js", "\n".join(["const x = 1;"] + DUPLICATED_BLOCK))
    b = SourceFile("b.js", "\n".join(["let y = 2;"] + DUPLICATED_BLOCK))
    return [a, b]


@pytest.fixture
def sample_files():
    """A small mixed snapshot touching every analysis."""
    return [
        SourceFile(
            "src/app.js",
            "function main(user) {\n"
            "  if (user && user.admin) {\n"
            "    eval(user.code);\n"
            "  }\n"
            "  return user ? 1 : 0;\n"
            "}\n",
        ),
        SourceFile(
            "src/util.ts",
            "export const add = (a, b) => {\n  return a + b;\n};\n",
        ),
        SourceFile("README.md", "# not analyzed\n"),
    ]


@pytest.fixture
def node_project(tmp_path):
    """Project directory with a manifest, a lockfile and two sources."""
    (tmp_path / "package.json").write_text(
        json.dumps(
            {
                "name": "demo",
                "dependencies": {"express": "^4.18.0", "lodash": "4.17.20"},
                "devDependencies": {"jest": "^29.0.0"},
            }
        )
    )
    (tmp_path / "package-lock.json").write_text("{}")
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.js").write_text(
        "function handler(req) {\n"
        "  if (req.ok) {\n"
        "    console.log(req.body);\n"
        "  }\n"
        "  return req;\n"
        "}\n"
    )
    (src / "math.ts").write_text("export function square(n) {\n  return n * n;\n}\n")
    return tmp_path


@pytest.fixture
def make_corpus():
    return FakeCorpus


@pytest.fixture
def make_audit_client():
    return FakeAuditClient


@pytest.fixture
def make_outdated_client():
    return FakeOutdatedClient
