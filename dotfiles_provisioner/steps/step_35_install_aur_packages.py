from __future__ import annotations

import logging
from typing import Sequence

from ..context import ProvisionCtx
from ..errors import StepApplyError
from ..lib.pkg import aur_install, find_aur_helper, missing_packages
from .base import ProvisioningStep

logger = logging.getLogger(__name__)


class InstallAurPackagesStep(ProvisioningStep):
    name = "install-aur-packages"
    satisfied_message = "all AUR packages installed"

    def __init__(self, helpers: Sequence[str], packages: Sequence[str]) -> None:
        self.helpers = tuple(helpers)
        self.packages = tuple(packages)
        self.description = (
            "Install community-maintained AUR packages (only if you trust them): " + " ".join(self.packages)
        )

    def check(self, ctx: ProvisionCtx) -> bool:
        return not missing_packages(ctx.cmd, self.packages)

    def apply(self, ctx: ProvisionCtx) -> None:
        helper = find_aur_helper(ctx.which, self.helpers)
        if helper is None:
            raise StepApplyError(
                "No AUR helper available",
                hint=f"Install one of: {', '.join(self.helpers)} (install-aur-helper), then re-run",
            )
        aur_install(ctx.cmd, helper, self.packages, dry_run=ctx.dry_run)
