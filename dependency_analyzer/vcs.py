"""Version control clone information for the analyzed root."""

from __future__ import annotations

import subprocess
from pathlib import Path

import structlog

from dependency_analyzer.models.package import VcsInfo

log = structlog.get_logger("dependency_analyzer.vcs")

_GIT_TIMEOUT = 5


def _git(args: list[str], cwd: Path) -> str | None:
    """Run a git command, returning stripped stdout or None on any failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            cwd=str(cwd),
            timeout=_GIT_TIMEOUT,
        )
    except (subprocess.SubprocessError, OSError):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def get_clone_info(path: Path) -> VcsInfo:
    """Return the git clone info of *path*, or VcsInfo.EMPTY if it cannot be determined."""
    path = Path(path)
    work_dir = path if path.is_dir() else path.parent
    if not work_dir.is_dir():
        return VcsInfo.EMPTY

    top_level = _git(["rev-parse", "--show-toplevel"], work_dir)
    if not top_level:
        log.debug("vcs.not_a_repository", path=str(path))
        return VcsInfo.EMPTY

    url = _git(["remote", "get-url", "origin"], work_dir) or ""
    revision = _git(["rev-parse", "HEAD"], work_dir) or ""

    try:
        rel = path.resolve().relative_to(Path(top_level).resolve()).as_posix()
    except ValueError:
        rel = ""

    return VcsInfo(type="git", url=url, revision=revision, path="" if rel == "." else rel)
