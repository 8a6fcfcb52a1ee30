"""Dependency manifest parsing and external audit enrichment.

The auditor reads ``package.json``, checks for a lockfile, and optionally
asks two collaborators for more detail:

- an audit client mapping package name to a vulnerability count
- an outdated client returning the names of packages with newer releases

Both collaborators may fail or time out. A failed lookup leaves the
corresponding record fields as ``None`` ("unknown"), never 0 or False.
"""

from __future__ import annotations

import concurrent.futures
import json
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Set, TypeVar

from ..exceptions import AuditError, ManifestParseError
from ..logging_config import get_logger
from ..models import DependencyRecord, DependencyResult

logger = get_logger(__name__)

MANIFEST_NAME = "package.json"

LOCKFILE_NAMES = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "npm-shrinkwrap.json",
)

DEFAULT_AUDIT_TIMEOUT = 30
DEFAULT_OUTDATED_TIMEOUT = 60

T = TypeVar("T")


class AuditClient(Protocol):
    def audit(
        self, project_path: Path, dependencies: Sequence[DependencyRecord]
    ) -> Mapping[str, int]:
        """Return vulnerability counts; a missing name means unknown.

        Raises:
            AuditError: If the audit could not be completed
        """
        ...


class OutdatedClient(Protocol):
    def outdated(
        self, project_path: Path, dependencies: Sequence[DependencyRecord]
    ) -> Set[str]:
        """Return names of packages with a newer release available.

        Raises:
            AuditError: If the check could not be completed
        """
        ...


# ---------------------------------------------------------------------------
# Manifest parsing
# ---------------------------------------------------------------------------


def parse_manifest(manifest_path: Path) -> List[DependencyRecord]:
    """Parse ``dependencies`` and ``devDependencies`` from a package.json.

    Raises:
        ManifestParseError: If the file is unreadable or not a JSON object
    """
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestParseError(manifest_path, f"Cannot read manifest: {e}")
    except json.JSONDecodeError as e:
        raise ManifestParseError(manifest_path, f"Invalid JSON: {e}")

    if not isinstance(data, dict):
        raise ManifestParseError(manifest_path, "Top-level value is not an object")

    records: List[DependencyRecord] = []
    for section, dep_type in (("dependencies", "prod"), ("devDependencies", "dev")):
        entries = data.get(section) or {}
        if not isinstance(entries, dict):
            raise ManifestParseError(manifest_path, f"'{section}' is not an object")
        for name, version in entries.items():
            records.append(DependencyRecord(name=name, version=str(version), type=dep_type))
    return records


def has_lockfile(project_path: Path, lockfile_names: Sequence[str] = LOCKFILE_NAMES) -> bool:
    return any((project_path / name).exists() for name in lockfile_names)


# ---------------------------------------------------------------------------
# npm collaborators
# ---------------------------------------------------------------------------


def _run_npm_json(project_path: Path, args: List[str], timeout: int) -> Any:
    """Run an npm subcommand and decode its JSON stdout.

    npm exits non-zero when it has something to report (vulnerabilities
    found, packages outdated), so the exit status is not treated as failure
    as long as stdout holds JSON.

    Raises:
        AuditError: On missing npm, timeout, non-JSON output or an npm error report
    """
    tool = "npm " + " ".join(args)
    try:
        result = subprocess.run(
            ["npm", *args],
            cwd=str(project_path),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise AuditError(tool, "npm executable not found")
    except subprocess.TimeoutExpired:
        raise AuditError(tool, f"timed out after {timeout}s")
    except OSError as e:
        raise AuditError(tool, str(e))

    stdout = (result.stdout or "").strip()
    if not stdout:
        stderr = (result.stderr or "").strip()
        raise AuditError(tool, stderr or f"no output (exit code {result.returncode})")
    try:
        report = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise AuditError(tool, f"invalid JSON output: {e}")

    # npm reports its own failures (ENOLOCK, ENOAUDIT, registry errors) as
    # {"error": {"code": ..., "summary": ...}} on stdout.
    if isinstance(report, dict) and isinstance(report.get("error"), dict):
        error = report["error"]
        raise AuditError(tool, str(error.get("summary") or error.get("code") or "npm error"))
    return report


class NpmAuditClient:
    """Vulnerability counts from ``npm audit --json``.

    A completed audit answers for every dependency: packages absent from
    the report are returned with a count of 0.
    """

    def __init__(self, timeout: int = DEFAULT_AUDIT_TIMEOUT):
        self.timeout = timeout

    def audit(
        self, project_path: Path, dependencies: Sequence[DependencyRecord]
    ) -> Dict[str, int]:
        report = _run_npm_json(project_path, ["audit", "--json"], self.timeout)
        if not isinstance(report, dict):
            raise AuditError("npm audit --json", "unexpected report shape")

        vulnerabilities = report.get("vulnerabilities") or {}
        counts: Dict[str, int] = {}
        for dep in dependencies:
            entry = vulnerabilities.get(dep.name)
            if not entry:
                counts[dep.name] = 0
                continue
            via = entry.get("via") if isinstance(entry, dict) else None
            if via:
                counts[dep.name] = len(via)
            else:
                counts[dep.name] = len(entry) if isinstance(entry, (dict, list)) else 1
        return counts


class NpmOutdatedClient:
    """Outdated package names from ``npm outdated --json``."""

    def __init__(self, timeout: int = DEFAULT_OUTDATED_TIMEOUT):
        self.timeout = timeout

    def outdated(
        self, project_path: Path, dependencies: Sequence[DependencyRecord]
    ) -> Set[str]:
        report = _run_npm_json(project_path, ["outdated", "--json"], self.timeout)
        if not isinstance(report, dict):
            raise AuditError("npm outdated --json", "unexpected report shape")
        return set(report)


# ---------------------------------------------------------------------------
# Auditor
# ---------------------------------------------------------------------------


def _call_with_timeout(func: Callable[[], T], timeout: Optional[float], name: str) -> T:
    """Run ``func`` on a helper thread and give up waiting after ``timeout`` seconds.

    A call that overruns keeps running in the background; its result is
    discarded.

    Raises:
        AuditError: If the call times out or fails
    """
    if timeout is None:
        try:
            return func()
        except AuditError:
            raise
        except Exception as e:
            raise AuditError(name, f"{type(e).__name__}: {e}")

    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(func)
        try:
            return future.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            raise AuditError(name, f"timed out after {timeout}s")
        except AuditError:
            raise
        except Exception as e:
            raise AuditError(name, f"{type(e).__name__}: {e}")
    finally:
        executor.shutdown(wait=False)


class DependencyAuditor:
    """Builds the ``DependencyResult`` for a project directory.

    Args:
        audit_client: Vulnerability lookup; None skips the audit
        outdated_client: Outdated-package lookup; None skips the check
        lockfile_names: File names that count as a lockfile
        timeout: Seconds to wait for each collaborator (None waits forever)
    """

    def __init__(
        self,
        audit_client: Optional[AuditClient] = None,
        outdated_client: Optional[OutdatedClient] = None,
        lockfile_names: Sequence[str] = LOCKFILE_NAMES,
        timeout: Optional[float] = None,
    ):
        self.audit_client = audit_client
        self.outdated_client = outdated_client
        self.lockfile_names = tuple(lockfile_names)
        self.timeout = timeout

    def audit(self, project_path: str) -> DependencyResult:
        root = Path(project_path)
        locked = has_lockfile(root, self.lockfile_names)

        manifest = root / MANIFEST_NAME
        if not manifest.exists():
            return DependencyResult(dependencies=[], has_package_lock=locked)

        try:
            dependencies = parse_manifest(manifest)
        except ManifestParseError as e:
            logger.warning("%s", e)
            return DependencyResult(dependencies=[], has_package_lock=locked)

        if dependencies:
            self._annotate_vulnerabilities(root, dependencies)
            self._annotate_outdated(root, dependencies)

        return DependencyResult(dependencies=dependencies, has_package_lock=locked)

    def _annotate_vulnerabilities(
        self, root: Path, dependencies: List[DependencyRecord]
    ) -> None:
        client = self.audit_client
        if client is None:
            return
        try:
            counts = _call_with_timeout(
                lambda: client.audit(root, list(dependencies)), self.timeout, "audit"
            )
        except AuditError as e:
            logger.warning("Continuing without vulnerability data: %s", e)
            return
        for dep in dependencies:
            if dep.name in counts:
                dep.vulnerabilities = int(counts[dep.name])

    def _annotate_outdated(self, root: Path, dependencies: List[DependencyRecord]) -> None:
        client = self.outdated_client
        if client is None:
            return
        try:
            names = _call_with_timeout(
                lambda: client.outdated(root, list(dependencies)), self.timeout, "outdated"
            )
        except AuditError as e:
            logger.warning("Continuing without outdated data: %s", e)
            return
        for dep in dependencies:
            dep.outdated = dep.name in names
