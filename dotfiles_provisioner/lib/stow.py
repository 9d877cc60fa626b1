from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .command import CommandRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Link:
    source: Path
    target: Path

    @property
    def in_place(self) -> bool:
        """True when target resolves to source, directly or through a folded parent dir."""
        return os.path.realpath(self.target) == os.path.realpath(self.source)


# Subset of stow's built-in ignore list.
IGNORED_NAMES = {"RCS", "CVS", ".git", ".gitignore", ".gitmodules", ".svn", ".hg", "_darcs", ".cvsignore"}
IGNORED_TOP_PREFIXES = ("README", "LICENSE", "COPYING")


def _ignored(rel: Path) -> bool:
    if any(part in IGNORED_NAMES or part.endswith("~") for part in rel.parts):
        return True
    return len(rel.parts) == 1 and rel.name.startswith(IGNORED_TOP_PREFIXES)


def planned_links(package_dir: Path, target_dir: Path) -> List[Link]:
    """Every file of a stow package and where it appears under target_dir."""

    links: List[Link] = []
    for src in sorted(package_dir.rglob("*")):
        if src.is_dir() and not src.is_symlink():
            continue
        rel = src.relative_to(package_dir)
        if _ignored(rel):
            continue
        links.append(Link(source=src, target=target_dir / rel))
    return links


def is_stowed(package_dir: Path, target_dir: Path) -> bool:
    links = planned_links(package_dir, target_dir)
    return all(l.in_place for l in links)


def _behind_symlinked_dir(target: Path, target_dir: Path) -> bool:
    p = target.parent
    while p != target_dir and target_dir in p.parents:
        if p.is_symlink():
            return True
        p = p.parent
    return False


def conflicts(package_dir: Path, target_dir: Path) -> List[Path]:
    """Existing regular files that stow would refuse to replace.

    Files reached through a directory symlink belong to whatever that link
    points at; they are left for stow to report, never returned here.
    """

    out: List[Path] = []
    for l in planned_links(package_dir, target_dir):
        t = l.target
        if l.in_place or t.is_symlink() or not t.exists():
            continue
        if _behind_symlinked_dir(t, target_dir):
            logger.info("Not touching %s: reached through a directory symlink", str(t))
            continue
        out.append(t)
    return out


def stow(cmd: CommandRunner, stow_dir: Path, package: str, target_dir: Path, *, dry_run: bool = False) -> None:
    cmd(["stow", "-d", str(stow_dir), "-t", str(target_dir), package], dry_run=dry_run)
