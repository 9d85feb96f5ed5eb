"""Hatchling build hook that stamps the package with its git revision."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

BUILD_INFO_PATH = "notemark/_build_info.py"


def git_output(args: list[str], cwd: Path) -> str | None:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, OSError):
        # Builds from an sdist have no repository
        return None
    return out.decode().strip() or None


class CustomBuildHook(BuildHookInterface):
    """Writes notemark/_build_info.py and ships it as an artifact."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        root = Path(self.root)
        commit = git_output(["rev-parse", "HEAD"], cwd=root)
        date = git_output(["show", "-s", "--format=%cI", "HEAD"], cwd=root)
        (root / BUILD_INFO_PATH).write_text(
            "# Auto-generated at build time.\n"
            f"COMMIT = {commit!r}\n"
            f"DATE = {date!r}\n",
            encoding="utf-8",
        )
        build_data.setdefault("artifacts", []).append(BUILD_INFO_PATH)
