from __future__ import annotations

from ..context import ProvisionCtx
from ..errors import StepApplyError
from ..lib.env import PATHS
from .base import ProvisioningStep


class CheckHyprlandConfigStep(ProvisioningStep):
    """Read-only: reports a missing Hyprland config, never writes one."""

    name = "check-hyprland-config"
    description = "Look for a Hyprland config in ~/.config/hypr"
    requires_confirmation = False
    satisfied_message = "Hyprland config present"

    def check(self, ctx: ProvisionCtx) -> bool:
        return (ctx.home / PATHS.hypr_config).is_dir()

    def apply(self, ctx: ProvisionCtx) -> None:
        raise StepApplyError(
            f"No Hyprland config found at {ctx.home / PATHS.hypr_config}",
            hint="Copy it from your current system: scp -r ~/.config/hypr USER@NEW-SYSTEM:~/.config/",
        )
