from __future__ import annotations

import getpass
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from rich.console import Console

from .config import ProvisionConfig
from .lib.command import CommandRunner, run_cmd

if TYPE_CHECKING:
    from .confirm import Confirmer


@dataclass(frozen=True)
class ProvisionCtx:
    """Everything a step may touch, passed explicitly instead of read from the environment."""

    cfg: ProvisionConfig
    home: Path
    user: str = field(default_factory=getpass.getuser)
    dry_run: bool = False
    interactive: bool = False
    cmd: CommandRunner = run_cmd
    which: Callable[[str], Optional[str]] = shutil.which
    console: Console = field(default_factory=Console)
    confirmer: Optional["Confirmer"] = None

    @property
    def dotfiles_dir(self) -> Path:
        return self.cfg.dotfiles_dir(self.home)

    def confirm(self, question: str) -> bool:
        """Secondary in-step confirmation; consent is implied when not interactive."""
        if not self.interactive or self.confirmer is None:
            return True
        return self.confirmer.confirm(question)
