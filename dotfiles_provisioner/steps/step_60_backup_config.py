from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from ..context import ProvisionCtx
from ..lib import stow
from ..models import FailurePolicy
from .base import ProvisioningStep

logger = logging.getLogger(__name__)


class BackupConfigStep(ProvisioningStep):
    """Preserve existing user config that the symlink steps are about to replace.

    Only files a stow link will claim count: a target holding nothing but
    stow's links, or only files no stow group manages, has nothing to
    preserve. The copy itself is taken by the runner from overwrites();
    apply() has nothing left to do.
    """

    requires_confirmation = False
    on_failure = FailurePolicy.ABORT
    satisfied_message = "no existing file to back up"

    def __init__(self, target: str) -> None:
        self.target = target
        slug = Path(target).name.lstrip(".").replace(".", "-")
        self.name = f"backup-existing-{slug}"
        self.description = f"Back up ~/{target}"

    def _path(self, ctx: ProvisionCtx) -> Path:
        return ctx.home / self.target

    def _claimed(self, ctx: ProvisionCtx) -> List[Path]:
        path = self._path(ctx)
        out: List[Path] = []
        for group in ctx.cfg.stow_packages:
            pkg = ctx.dotfiles_dir / group
            if not pkg.is_dir():
                continue
            for t in stow.conflicts(pkg, ctx.home):
                if t == path or path in t.parents:
                    out.append(t)
        return out

    def check(self, ctx: ProvisionCtx) -> bool:
        return not self._claimed(ctx)

    def overwrites(self, ctx: ProvisionCtx) -> Sequence[Path]:
        return self._claimed(ctx)

    def apply(self, ctx: ProvisionCtx) -> None:
        logger.info("Preserved ~/%s", self.target)
