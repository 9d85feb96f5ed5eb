"""Version string for `notemark --version`.

The release comes from the installed distribution's metadata. The revision
is looked up, in order, from a live git checkout, the _build_info module
written by the build hook, and the PEP 610 direct_url.json of a VCS install.
"""

from __future__ import annotations

import importlib.metadata
import json
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional

DISTRIBUTION = "notemark"


class BuildInfo(NamedTuple):
    commit: Optional[str]
    date: Optional[str]
    dirty: bool


def _git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, OSError):
        return None
    return out.decode().strip() or None


def _from_git_repo() -> Optional[BuildInfo]:
    root = _git(["rev-parse", "--show-toplevel"], Path(__file__).resolve().parent)
    if not root:
        return None
    status = _git(["status", "--porcelain"], Path(root))
    return BuildInfo(
        commit=_git(["rev-parse", "HEAD"], Path(root)),
        date=_git(["show", "-s", "--format=%cI", "HEAD"], Path(root)),
        dirty=bool(status),
    )


def _from_embedded_file() -> Optional[BuildInfo]:
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    return BuildInfo(getattr(_build_info, "COMMIT", None), getattr(_build_info, "DATE", None), False)


def _from_direct_url() -> Optional[BuildInfo]:
    try:
        text = importlib.metadata.distribution(DISTRIBUTION).read_text("direct_url.json")
    except importlib.metadata.PackageNotFoundError:
        return None
    if not text:
        return None
    try:
        commit = (json.loads(text).get("vcs_info") or {}).get("commit_id")
    except (json.JSONDecodeError, AttributeError):
        return None
    return BuildInfo(commit, None, False) if commit else None


def get_release() -> str:
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_build_info() -> BuildInfo:
    for getter in (_from_git_repo, _from_embedded_file, _from_direct_url):
        info = getter()
        if info and (info.commit or info.date):
            return info
    return BuildInfo(commit=None, date=None, dirty=False)


def get_version_string() -> str:
    """E.g. "notemark 0.1.0 (3f2a9c1-dirty 2026-10-01T12:00:00+02:00)"."""
    info = get_build_info()
    commit = info.commit[:7] if info.commit else "unknown"
    dirty_suffix = "-dirty" if info.dirty else ""
    return f"{DISTRIBUTION} {get_release()} ({commit}{dirty_suffix} {info.date or 'unknown'})"
