from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from .command import CommandRunner

logger = logging.getLogger(__name__)


def missing_packages(cmd: CommandRunner, packages: Sequence[str]) -> List[str]:
    """Return the subset of `packages` pacman does not consider installed.

    `pacman -T` prints each unsatisfied name and exits 127 when any are
    missing; AUR packages installed through a helper are known to pacman too.
    """
    if not packages:
        return []
    r = cmd(["pacman", "-T", *packages], check=False)
    if r.returncode == 0:
        return []
    if r.returncode != 127:
        raise RuntimeError(f"pacman -T failed ({r.returncode}): {r.stderr.strip()}")
    return [ln.strip() for ln in r.stdout.splitlines() if ln.strip()]


def pending_upgrades(cmd: CommandRunner, which: Callable[[str], Optional[str]]) -> List[str]:
    """Packages with an upgrade available.

    Prefers `checkupdates` (pacman-contrib), which syncs a throwaway db and
    exits 2 when nothing is pending. Falls back to `pacman -Qu` against the
    local sync db, which exits 1 with no output when nothing is pending.
    """
    if which("checkupdates"):
        r = cmd(["checkupdates"], check=False)
        none_pending = 2
    else:
        r = cmd(["pacman", "-Qu"], check=False)
        none_pending = 1
    if r.returncode == none_pending:
        return []
    if r.returncode != 0:
        raise RuntimeError(f"{r.argv[0]} failed ({r.returncode}): {r.stderr.strip()}")
    return [ln.split()[0] for ln in r.stdout.splitlines() if ln.strip()]


def system_upgrade(cmd: CommandRunner, *, dry_run: bool = False) -> None:
    cmd(["sudo", "pacman", "-Syu", "--noconfirm"], dry_run=dry_run)


def pacman_install(cmd: CommandRunner, packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    cmd(["sudo", "pacman", "-S", "--needed", "--noconfirm", *packages], dry_run=dry_run)


def find_aur_helper(which: Callable[[str], Optional[str]], candidates: Sequence[str]) -> Optional[str]:
    for name in candidates:
        if which(name):
            logger.info("Found AUR helper %s", name)
            return name
    return None


def aur_install(cmd: CommandRunner, helper: str, packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    cmd([helper, "-S", "--needed", "--noconfirm", *packages], dry_run=dry_run)
