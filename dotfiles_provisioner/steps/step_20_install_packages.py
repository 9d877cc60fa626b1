from __future__ import annotations

import logging
from typing import Sequence

from ..context import ProvisionCtx
from ..lib.pkg import missing_packages, pacman_install
from ..models import FailurePolicy
from .base import ProvisioningStep

logger = logging.getLogger(__name__)


class InstallPackagesStep(ProvisioningStep):
    name = "install-packages"
    on_failure = FailurePolicy.ABORT
    satisfied_message = "all packages installed"

    def __init__(self, packages: Sequence[str]) -> None:
        self.packages = tuple(packages)
        self.description = "Install packages from the official repos: " + " ".join(self.packages)

    def check(self, ctx: ProvisionCtx) -> bool:
        missing = missing_packages(ctx.cmd, self.packages)
        if missing:
            logger.info("Missing packages: %s", " ".join(missing))
        return not missing

    def apply(self, ctx: ProvisionCtx) -> None:
        # --needed keeps already-installed packages untouched.
        pacman_install(ctx.cmd, self.packages, dry_run=ctx.dry_run)
