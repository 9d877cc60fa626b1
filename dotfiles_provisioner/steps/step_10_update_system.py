from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.pkg import pending_upgrades, system_upgrade
from ..models import FailurePolicy
from .base import ProvisioningStep

logger = logging.getLogger(__name__)


class UpdateSystemStep(ProvisioningStep):
    name = "update-system"
    description = "Update all system packages (sudo pacman -Syu)"
    on_failure = FailurePolicy.ABORT
    satisfied_message = "system is up to date"

    def check(self, ctx: ProvisionCtx) -> bool:
        pending = pending_upgrades(ctx.cmd, ctx.which)
        if pending:
            logger.info("%d package upgrade(s) pending", len(pending))
        return not pending

    def apply(self, ctx: ProvisionCtx) -> None:
        system_upgrade(ctx.cmd, dry_run=ctx.dry_run)
