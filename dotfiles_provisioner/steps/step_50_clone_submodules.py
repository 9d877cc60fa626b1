from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.git import pending_submodules, update_submodules
from .base import ProvisioningStep

logger = logging.getLogger(__name__)


class CloneSubmodulesStep(ProvisioningStep):
    name = "clone-dotfiles-submodules"
    description = "Download git submodules of the dotfiles repo (tmux plugins)"
    satisfied_message = "submodules up to date"

    def check(self, ctx: ProvisionCtx) -> bool:
        pending = pending_submodules(ctx.cmd, ctx.dotfiles_dir)
        if pending:
            logger.info("Submodules pending: %s", " ".join(pending))
        return not pending

    def apply(self, ctx: ProvisionCtx) -> None:
        update_submodules(ctx.cmd, ctx.dotfiles_dir, dry_run=ctx.dry_run)
