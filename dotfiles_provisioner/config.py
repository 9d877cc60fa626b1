from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .lib.env import PATHS

_CORE_PACKAGES = [
    "zsh",
    "tmux",
    "stow",
    "fzf",
    "neovim",
    "ripgrep",
    "git",
    "openssh",
    "bc",
    "podman",
    "base-devel",
    "ttf-jetbrains-mono-nerd",
]

_HYPRLAND_PACKAGES = [
    "hyprland",
    "hyprpaper",
    "hypridle",
    "hyprlock",
    "waybar",
    "mako",
    "nautilus",
    "wl-clipboard",
    "cliphist",
    "playerctl",
    "brightnessctl",
    "pipewire",
    "wireplumber",
    "pipewire-audio",
    "qt6ct",
    "slurp",
]

_CORE_AUR = ["ghostty-bin", "starship", "zoxide", "ripgrep-all", "mise-bin"]

_HYPRLAND_AUR = ["walker-bin", "elephant", "hyprsunset", "hyprshot", "satty-bin", "wtype", "obsidian"]

_COMMON: Dict[str, Any] = {
    "dotfiles_dir": PATHS.dotfiles_default,
    "aur_helpers": ["yay", "paru"],
    "stow_packages": ["zsh", "tmux", "git", "starship", "fzf", "ghostty"],
    "backup_targets": [".zshrc", ".tmux.conf", ".gitconfig", ".config/starship", ".config/ghostty"],
    "login_shell": "zsh",
    "oh_my_zsh_installer_url": "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh",
    "yay_bin_url": "https://aur.archlinux.org/yay-bin.git",
    "check_hyprland_config": False,
}

PROFILES: Dict[str, Dict[str, Any]] = {
    "secure": dict(_COMMON, packages=list(_CORE_PACKAGES), aur_packages=list(_CORE_AUR)),
    "hyprland": dict(
        _COMMON,
        packages=_CORE_PACKAGES + _HYPRLAND_PACKAGES,
        aur_packages=_CORE_AUR + _HYPRLAND_AUR,
        check_hyprland_config=True,
    ),
}

DEFAULT_PROFILE = "secure"


def _str_list(raw: Dict[str, Any], key: str) -> List[str]:
    value = raw.get(key) or []
    if isinstance(value, str) or not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list of strings")
    return [str(v) for v in value]


@dataclass(frozen=True)
class ProvisionConfig:
    """Data consumed by the steps. The step list itself is fixed in code."""

    raw: Dict[str, Any]

    @property
    def profile(self) -> str:
        return str(self.raw.get("profile") or DEFAULT_PROFILE)

    def dotfiles_dir(self, home: Path) -> Path:
        value = str(self.raw.get("dotfiles_dir") or PATHS.dotfiles_default)
        if value == "~" or value.startswith("~/"):
            return home / value[2:]
        p = Path(value)
        # Relative paths are taken from the home directory, never the cwd.
        return p if p.is_absolute() else home / p

    @property
    def packages(self) -> List[str]:
        return _str_list(self.raw, "packages")

    @property
    def aur_packages(self) -> List[str]:
        return _str_list(self.raw, "aur_packages")

    @property
    def aur_helpers(self) -> List[str]:
        return _str_list(self.raw, "aur_helpers")

    @property
    def stow_packages(self) -> List[str]:
        return _str_list(self.raw, "stow_packages")

    @property
    def backup_targets(self) -> List[str]:
        return _str_list(self.raw, "backup_targets")

    @property
    def login_shell(self) -> str:
        return str(self.raw.get("login_shell") or "zsh")

    @property
    def oh_my_zsh_installer_url(self) -> str:
        return str(self.raw.get("oh_my_zsh_installer_url") or _COMMON["oh_my_zsh_installer_url"])

    @property
    def yay_bin_url(self) -> str:
        return str(self.raw.get("yay_bin_url") or _COMMON["yay_bin_url"])

    @property
    def check_hyprland_config(self) -> bool:
        return bool(self.raw.get("check_hyprland_config", False))


def profile_defaults(profile: str) -> Dict[str, Any]:
    if profile not in PROFILES:
        raise ValueError(f"Unknown profile '{profile}' (expected one of: {', '.join(sorted(PROFILES))})")
    return dict(PROFILES[profile], profile=profile)


def load_provision_config(
    path: Optional[str] = None,
    *,
    profile: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ProvisionConfig:
    """Built-in profile, then the YAML file, then explicit overrides (CLI flags)."""

    file_raw: Dict[str, Any] = {}
    if path is not None:
        p = Path(path).expanduser()
        if not p.exists():
            raise FileNotFoundError(path)
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ValueError("provision config must be YAML")
        file_raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(file_raw, dict):
            raise ValueError(f"{path} must contain a mapping/object")

    chosen = profile or str(file_raw.get("profile") or DEFAULT_PROFILE)
    raw = profile_defaults(chosen)
    raw.update(file_raw)
    raw["profile"] = chosen
    raw.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return ProvisionConfig(raw=raw)
