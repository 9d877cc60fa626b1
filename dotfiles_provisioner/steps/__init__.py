from .base import ProvisioningStep
from .step_10_update_system import UpdateSystemStep
from .step_20_install_packages import InstallPackagesStep
from .step_30_install_aur_helper import InstallAurHelperStep
from .step_35_install_aur_packages import InstallAurPackagesStep
from .step_40_install_oh_my_zsh import InstallOhMyZshStep
from .step_50_clone_submodules import CloneSubmodulesStep
from .step_60_backup_config import BackupConfigStep
from .step_70_symlink_config import SymlinkConfigStep
from .step_80_change_shell import ChangeLoginShellStep
from .step_90_check_hyprland_config import CheckHyprlandConfigStep

__all__ = [
    "ProvisioningStep",
    "UpdateSystemStep",
    "InstallPackagesStep",
    "InstallAurHelperStep",
    "InstallAurPackagesStep",
    "InstallOhMyZshStep",
    "CloneSubmodulesStep",
    "BackupConfigStep",
    "SymlinkConfigStep",
    "ChangeLoginShellStep",
    "CheckHyprlandConfigStep",
]
