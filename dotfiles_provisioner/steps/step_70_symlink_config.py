from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from ..context import ProvisionCtx
from ..errors import StepApplyError
from ..lib import stow
from ..lib.command import CommandError
from .base import ProvisioningStep

logger = logging.getLogger(__name__)


class SymlinkConfigStep(ProvisioningStep):
    """Link one dotfiles group into the home directory with GNU stow.

    Regular files in the way are backed up by the runner (see overwrites())
    and removed before stow runs.
    """

    satisfied_message = "symlinks in place"

    def __init__(self, group: str) -> None:
        self.group = group
        self.name = f"symlink-{group}-config"
        self.description = f"Create symlinks in your home directory for the '{group}' dotfiles"

    def _package_dir(self, ctx: ProvisionCtx) -> Path:
        return ctx.dotfiles_dir / self.group

    def check(self, ctx: ProvisionCtx) -> bool:
        pkg = self._package_dir(ctx)
        return pkg.is_dir() and stow.is_stowed(pkg, ctx.home)

    def overwrites(self, ctx: ProvisionCtx) -> Sequence[Path]:
        pkg = self._package_dir(ctx)
        if not pkg.is_dir():
            return []
        return stow.conflicts(pkg, ctx.home)

    def apply(self, ctx: ProvisionCtx) -> None:
        pkg = self._package_dir(ctx)
        if not pkg.is_dir():
            raise StepApplyError(
                f"Directory {self.group} not found in {ctx.dotfiles_dir}",
                hint=f"Add the '{self.group}' group to your dotfiles or drop it from stow_packages",
            )

        for path in stow.conflicts(pkg, ctx.home):
            if ctx.dry_run:
                logger.info("Would remove %s", str(path))
                continue
            logger.info("Removing %s (backed up) to make way for stow", str(path))
            path.unlink()

        try:
            stow.stow(ctx.cmd, ctx.dotfiles_dir, self.group, ctx.home, dry_run=ctx.dry_run)
        except CommandError as e:
            raise StepApplyError(
                f"Failed to stow {self.group}: conflicts detected",
                hint=f"Resolve the conflicts manually and run: stow -t ~ {self.group}",
            ) from e
