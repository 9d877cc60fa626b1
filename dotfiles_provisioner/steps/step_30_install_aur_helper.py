from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Sequence

from ..context import ProvisionCtx
from ..errors import UserDeclined
from ..lib.git import clone
from ..lib.pkg import find_aur_helper
from .base import ProvisioningStep

logger = logging.getLogger(__name__)


class InstallAurHelperStep(ProvisioningStep):
    """Build yay-bin from the AUR when neither yay nor paru is present.

    AUR packages are community-maintained; the PKGBUILD is shown and must be
    accepted separately before makepkg runs.
    """

    name = "install-aur-helper"
    satisfied_message = "AUR helper already available"

    def __init__(self, helpers: Sequence[str], yay_bin_url: str) -> None:
        self.helpers = tuple(helpers)
        self.yay_bin_url = yay_bin_url
        self.description = f"Build and install yay-bin from the AUR ({yay_bin_url})"

    def check(self, ctx: ProvisionCtx) -> bool:
        return find_aur_helper(ctx.which, self.helpers) is not None

    def apply(self, ctx: ProvisionCtx) -> None:
        workdir = Path(tempfile.mkdtemp(prefix="dotfiles-provision-"))
        try:
            repo = workdir / "yay-bin"
            clone(ctx.cmd, self.yay_bin_url, repo, dry_run=ctx.dry_run)

            pkgbuild = repo / "PKGBUILD"
            if ctx.interactive and pkgbuild.is_file():
                ctx.console.rule("PKGBUILD")
                ctx.console.print(pkgbuild.read_text(encoding="utf-8"), markup=False, highlight=False)
                ctx.console.rule()

            if not ctx.confirm("PKGBUILD looks safe? Continue with installation"):
                raise UserDeclined("PKGBUILD not accepted")

            ctx.cmd(["makepkg", "-si", "--noconfirm"], cwd=str(repo), dry_run=ctx.dry_run)
        finally:
            shutil.rmtree(workdir, ignore_errors=True)
