from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ..context import ProvisionCtx
from ..errors import UserDeclined
from ..lib.env import PATHS
from .base import ProvisioningStep

logger = logging.getLogger(__name__)


class InstallOhMyZshStep(ProvisioningStep):
    name = "install-oh-my-zsh"
    satisfied_message = "oh-my-zsh already installed"

    def __init__(self, installer_url: str) -> None:
        self.installer_url = installer_url
        self.description = f"Download and run the oh-my-zsh install script from {installer_url}"

    def check(self, ctx: ProvisionCtx) -> bool:
        return (ctx.home / PATHS.oh_my_zsh_dir).is_dir()

    def apply(self, ctx: ProvisionCtx) -> None:
        # Download first so the script can be reviewed before it runs.
        fd, name = tempfile.mkstemp(prefix="ohmyzsh-install-", suffix=".sh")
        os.close(fd)
        script = Path(name)
        try:
            ctx.cmd(["curl", "-fsSL", self.installer_url, "-o", str(script)], dry_run=ctx.dry_run)
            if ctx.interactive:
                ctx.console.print(f"Install script downloaded to {script}", markup=False)
                if script.is_file() and ctx.confirm("Review the script"):
                    ctx.console.rule("oh-my-zsh install.sh")
                    ctx.console.print(script.read_text(encoding="utf-8"), markup=False, highlight=False)
                    ctx.console.rule()

            if not ctx.confirm("Execute the oh-my-zsh install script"):
                raise UserDeclined("install script not executed")

            ctx.cmd(
                ["sh", str(script), "--unattended"],
                env={"HOME": str(ctx.home), "KEEP_ZSHRC": "yes"},
                dry_run=ctx.dry_run,
            )
        finally:
            script.unlink(missing_ok=True)
