from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Set

import pytest

from dotfiles_provisioner.config import load_provision_config
from dotfiles_provisioner.context import ProvisionCtx
from dotfiles_provisioner.lib.command import CmdResult, CommandError
from dotfiles_provisioner.lib.stow import planned_links
from dotfiles_provisioner.report import make_console

MUTATING = {"sudo", "chsh", "makepkg", "stow", "curl", "sh", "yay", "paru"}


class FakeSystem:
    """A tiny pretend Arch box: pacman db, AUR helpers, git submodules, stow, passwd."""

    def __init__(self, home: Path) -> None:
        self.home = home
        self.installed: Set[str] = set()
        self.upgrades: List[str] = []
        self.submodules: Dict[str, bool] = {}
        self.shell = "/bin/bash"
        self.binaries: Dict[str, str] = {"git": "/usr/bin/git", "pacman": "/usr/bin/pacman"}
        self.calls: List[List[str]] = []
        self.failing: List[List[str]] = []

    # -- helpers for tests -------------------------------------------------
    def fail(self, *prefix: str) -> None:
        self.failing.append(list(prefix))

    def which(self, name: str) -> Optional[str]:
        return self.binaries.get(name)

    @property
    def mutating_calls(self) -> List[List[str]]:
        out = []
        for argv in self.calls:
            if argv[0] in MUTATING:
                out.append(argv)
            elif argv[:1] == ["git"] and ("clone" in argv or "update" in argv):
                out.append(argv)
        return out

    # -- CommandRunner -----------------------------------------------------
    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
        input_text: str | None = None,
        dry_run: bool = False,
    ) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        if dry_run:
            return CmdResult(argv=argv, returncode=0, stdout="", stderr="")

        if any(argv[: len(p)] == p for p in self.failing):
            rc, out, err = 1, "", "simulated failure"
        else:
            rc, out, err = self._dispatch(argv, env or {})

        if check and rc != 0:
            raise CommandError(argv, rc, err)
        return CmdResult(argv=argv, returncode=rc, stdout=out, stderr=err)

    def _dispatch(self, argv: List[str], env: Mapping[str, str]):
        if argv[:2] == ["pacman", "-T"]:
            missing = [p for p in argv[2:] if p not in self.installed]
            return (127 if missing else 0), "".join(f"{p}\n" for p in missing), ""
        if argv == ["pacman", "-Qu"]:
            if not self.upgrades:
                return 1, "", ""
            return 0, "".join(f"{p} 1-1 -> 2-1\n" for p in self.upgrades), ""
        if argv[:3] == ["sudo", "pacman", "-Syu"]:
            self.upgrades.clear()
            return 0, "", ""
        if argv[:3] == ["sudo", "pacman", "-S"]:
            self._install([a for a in argv[3:] if not a.startswith("-")])
            return 0, "", ""
        if argv[0] in {"yay", "paru"} and argv[1] == "-S":
            self._install([a for a in argv[2:] if not a.startswith("-")])
            return 0, "", ""
        if argv[0] == "git" and "submodule" in argv:
            if "status" in argv:
                lines = [
                    f"{' ' if ok else '-'}{'a' * 40} {name}{' (heads/main)' if ok else ''}"
                    for name, ok in sorted(self.submodules.items())
                ]
                return 0, "\n".join(lines) + ("\n" if lines else ""), ""
            if "update" in argv:
                for name in self.submodules:
                    self.submodules[name] = True
                return 0, "", ""
        if argv[:2] == ["git", "clone"]:
            dest = Path(argv[3])
            dest.mkdir(parents=True)
            (dest / "PKGBUILD").write_text("pkgname=yay-bin\n", encoding="utf-8")
            return 0, "", ""
        if argv[0] == "makepkg":
            self.binaries["yay"] = "/usr/bin/yay"
            self.installed.add("yay-bin")
            return 0, "", ""
        if argv[0] == "stow":
            return self._stow(Path(argv[argv.index("-d") + 1]), Path(argv[argv.index("-t") + 1]), argv[-1])
        if argv[:2] == ["getent", "passwd"]:
            return 0, f"{argv[2]}:x:1000:1000::{self.home}:{self.shell}\n", ""
        if argv[:2] == ["chsh", "-s"]:
            self.shell = argv[2]
            return 0, "", ""
        if argv[0] == "curl":
            Path(argv[argv.index("-o") + 1]).write_text("#!/bin/sh\n", encoding="utf-8")
            return 0, "", ""
        if argv[0] == "sh":
            (Path(env["HOME"]) / ".oh-my-zsh").mkdir()
            return 0, "", ""
        return 127, "", f"{argv[0]}: command not found"

    def _install(self, packages: List[str]) -> None:
        self.installed.update(packages)
        for p in packages:
            if p in {"zsh", "stow", "tmux"}:
                self.binaries[p] = f"/usr/bin/{p}"

    def _stow(self, stow_dir: Path, target: Path, package: str):
        links = planned_links(stow_dir / package, target)
        for link in links:
            if link.target.exists() and not link.in_place:
                return 1, "", f"WARNING! stowing {package} would cause conflicts"
        for link in links:
            if link.in_place:
                continue
            link.target.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(link.source, link.target)
        return 0, "", ""


@pytest.fixture
def home(tmp_path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def dotfiles(home) -> Path:
    d = home / "dotfiles"
    files = {
        "zsh/.zshrc": "export EDITOR=nvim\n",
        "tmux/.tmux.conf": "set -g mouse on\n",
        "git/.gitconfig": "[user]\n\tname = Tester\n",
        "starship/.config/starship.toml": "add_newline = false\n",
        "fzf/.fzf.zsh": "export FZF_DEFAULT_COMMAND='rg --files'\n",
        "ghostty/.config/ghostty/config": "font-size = 12\n",
        "zsh/README.md": "not linked\n",
    }
    for rel, text in files.items():
        p = d / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    (d / ".gitmodules").write_text('[submodule "tpm"]\n\tpath = tmux/.tmux/plugins/tpm\n', encoding="utf-8")
    return d


@pytest.fixture
def system(home) -> FakeSystem:
    s = FakeSystem(home)
    s.submodules["tmux/.tmux/plugins/tpm"] = False
    return s


@pytest.fixture
def console():
    return make_console(file=io.StringIO(), width=160)


@pytest.fixture
def cfg(dotfiles):
    return load_provision_config(overrides={"dotfiles_dir": str(dotfiles)})


@pytest.fixture
def ctx(cfg, home, system, console) -> ProvisionCtx:
    return ProvisionCtx(cfg=cfg, home=home, user="tester", cmd=system, which=system.which, console=console)


def _snapshot(root: Path) -> Dict[str, object]:
    out: Dict[str, object] = {}
    for p in sorted(root.rglob("*")):
        rel = str(p.relative_to(root))
        if p.is_symlink():
            out[rel] = ("link", os.readlink(p))
        elif p.is_dir():
            out[rel] = ("dir",)
        else:
            out[rel] = ("file", p.read_bytes())
    return out


@pytest.fixture
def snapshot():
    return _snapshot
