from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    dotfiles_default: str = "~/dotfiles"
    log_default: str = "~/.local/state/dotfiles-provisioner/provision.log"
    backup_prefix: str = ".config-backup-"
    oh_my_zsh_dir: str = ".oh-my-zsh"
    hypr_config: str = ".config/hypr"


PATHS = Paths()
