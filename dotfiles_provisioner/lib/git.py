from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .command import CommandRunner

logger = logging.getLogger(__name__)


def clone(cmd: CommandRunner, url: str, dest: Path, *, dry_run: bool = False) -> None:
    cmd(["git", "clone", url, str(dest)], dry_run=dry_run)


def pending_submodules(cmd: CommandRunner, repo: Path) -> List[str]:
    """Submodules that are uninitialized ('-') or not at the recorded commit ('+')."""

    if not (repo / ".gitmodules").is_file():
        return []
    r = cmd(["git", "-C", str(repo), "submodule", "status", "--recursive"])
    pending: List[str] = []
    for ln in r.stdout.splitlines():
        if ln[:1] in {"-", "+"}:
            parts = ln[1:].split()
            pending.append(parts[1] if len(parts) > 1 else ln.strip())
    return pending


def update_submodules(cmd: CommandRunner, repo: Path, *, dry_run: bool = False) -> None:
    cmd(["git", "-C", str(repo), "submodule", "update", "--init", "--recursive"], dry_run=dry_run)
