from __future__ import annotations

import logging
import os
from typing import Callable

from .context import ProvisionCtx
from .errors import PreconditionFailed

logger = logging.getLogger(__name__)


def make_not_root(geteuid: Callable[[], int] = os.geteuid) -> Callable[[ProvisionCtx], None]:
    def not_root(ctx: ProvisionCtx) -> None:
        if geteuid() == 0:
            raise PreconditionFailed(
                "Please do not run the provisioner as root",
                hint="Run as your regular user; steps that need privileges use sudo.",
            )

    return not_root


def dotfiles_present(ctx: ProvisionCtx) -> None:
    d = ctx.dotfiles_dir
    if not d.is_dir():
        raise PreconditionFailed(
            f"Dotfiles directory not found at {d}",
            hint=f"Clone your dotfiles first: git clone <your-dotfiles-repo> {d}",
        )
    logger.info("Dotfiles directory: %s", d)


DEFAULT_PRECONDITIONS = (make_not_root(), dotfiles_present)
