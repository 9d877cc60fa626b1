from __future__ import annotations

import logging
import os

from ..context import ProvisionCtx
from ..errors import StepApplyError
from ..lib.shell import change_login_shell, login_shell
from .base import ProvisioningStep

logger = logging.getLogger(__name__)


class ChangeLoginShellStep(ProvisioningStep):
    name = "change-login-shell"

    def __init__(self, shell: str = "zsh") -> None:
        self.shell = shell
        self.description = f"Change your login shell to {shell}"
        self.satisfied_message = f"login shell is already {shell}"

    def check(self, ctx: ProvisionCtx) -> bool:
        wanted = ctx.which(self.shell)
        current = login_shell(ctx.cmd, ctx.user)
        if not wanted or not current:
            return False
        return os.path.realpath(current) == os.path.realpath(wanted)

    def apply(self, ctx: ProvisionCtx) -> None:
        wanted = ctx.which(self.shell)
        if not wanted:
            raise StepApplyError(
                f"{self.shell} not found on PATH",
                hint=f"Install {self.shell} (install-packages) and re-run",
            )
        change_login_shell(ctx.cmd, wanted, dry_run=ctx.dry_run)
        logger.info("Login shell changed to %s (takes effect on next login)", wanted)
