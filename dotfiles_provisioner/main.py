from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import yaml
from rich.console import Console

from .config import PROFILES, ProvisionConfig, load_provision_config
from .confirm import Confirmer, TerminalConfirmer
from .context import ProvisionCtx
from .lib.command import CommandRunner, run_cmd
from .lib.env import PATHS
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .models import Precondition, RunPlan, RunReport, Step
from .pipeline import ProvisioningRunner
from .preflight import DEFAULT_PRECONDITIONS
from .report import Reporter, make_console
from .steps import (
    BackupConfigStep,
    ChangeLoginShellStep,
    CheckHyprlandConfigStep,
    CloneSubmodulesStep,
    InstallAurHelperStep,
    InstallAurPackagesStep,
    InstallOhMyZshStep,
    InstallPackagesStep,
    SymlinkConfigStep,
    UpdateSystemStep,
)

logger = logging.getLogger(__name__)


def build_steps(cfg: ProvisionConfig) -> List[Step]:
    steps: List[Step] = [
        UpdateSystemStep(),
        InstallPackagesStep(cfg.packages),
        InstallAurHelperStep(cfg.aur_helpers, cfg.yay_bin_url),
        InstallAurPackagesStep(cfg.aur_helpers, cfg.aur_packages),
        InstallOhMyZshStep(cfg.oh_my_zsh_installer_url),
        CloneSubmodulesStep(),
    ]
    steps += [BackupConfigStep(t) for t in cfg.backup_targets]
    steps += [SymlinkConfigStep(g) for g in cfg.stow_packages]
    steps.append(ChangeLoginShellStep(cfg.login_shell))
    if cfg.check_hyprland_config:
        steps.append(CheckHyprlandConfigStep())
    return steps


def build_plan(cfg: ProvisionConfig, *, preconditions: Sequence[Precondition] = DEFAULT_PRECONDITIONS) -> RunPlan:
    return RunPlan(steps=tuple(build_steps(cfg)), preconditions=tuple(preconditions))


def run(
    *,
    config_path: Optional[str] = None,
    profile: Optional[str] = None,
    home: Optional[str] = None,
    dotfiles: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    interactive: bool = True,
    dry_run: bool = False,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    verbose: bool = False,
    console: Optional[Console] = None,
    confirmer: Optional[Confirmer] = None,
    cmd: CommandRunner = run_cmd,
    which: Callable[[str], Optional[str]] = shutil.which,
    preconditions: Sequence[Precondition] = DEFAULT_PRECONDITIONS,
) -> RunReport:
    """Provision the home directory and return the run report."""

    console = console or make_console()
    configure_logging(
        log_path=log_path,
        level=logging.DEBUG if verbose else logging.INFO,
        console=console if verbose else None,
    )

    cfg = load_provision_config(config_path, profile=profile, overrides={"dotfiles_dir": dotfiles})
    home_dir = Path(home).expanduser() if home else Path.home()
    ctx = ProvisionCtx(cfg=cfg, home=home_dir, dry_run=dry_run, cmd=cmd, which=which, console=console)

    plan = build_plan(cfg, preconditions=preconditions).select(start_at=start_at, stop_after=stop_after)

    reporter = Reporter(console)
    reporter.info(f"Starting setup (profile={cfg.profile}, home={home_dir}, dotfiles={ctx.dotfiles_dir})")
    logger.info("Plan: %s", ", ".join(plan.names))

    runner = ProvisioningRunner(
        ctx,
        confirmer=confirmer or TerminalConfirmer(console),
        reporter=reporter,
        backup_prefix=PATHS.backup_prefix,
    )
    report = runner.run(plan, interactive=interactive)

    reporter.summary(report)
    if report.precondition_error is None:
        reporter.closing_notes(
            report,
            home=home_dir,
            mise="mise-bin" in cfg.aur_packages,
            hyprland=cfg.check_hyprland_config,
        )
    logger.info("Run finished: exit=%d", report.exit_code())
    return report


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dotfiles-provision", description="Provision a fresh Arch/CachyOS desktop from a dotfiles repo")
    p.add_argument("--config", default=None, help="YAML file overriding package lists, stow groups, ...")
    p.add_argument("--profile", default=None, choices=sorted(PROFILES), help="Built-in profile (default: secure)")
    p.add_argument("--home", default=None, help="Home directory to provision (default: current user's)")
    p.add_argument("--dotfiles", default=None, help="Dotfiles repo (default: ~/dotfiles)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the provisioning log")
    p.add_argument("-y", "--yes", action="store_true", help="Non-interactive: apply every step without prompting")
    p.add_argument("--dry-run", action="store_true", help="Log commands instead of running them")
    p.add_argument("--start-at", default=None, help="Start at step name (e.g. install-oh-my-zsh)")
    p.add_argument("--stop-after", default=None, help="Stop after step name")
    p.add_argument("--list", action="store_true", help="Print the plan and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Also show log records on the console")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.list:
            cfg = load_provision_config(args.config, profile=args.profile, overrides={"dotfiles_dir": args.dotfiles})
            for step in build_steps(cfg):
                confirm = "confirm" if step.requires_confirmation else "auto"
                print(f"{step.name:<32} [{confirm}, on failure: {step.on_failure.value}] {step.description}")
            return 0

        report = run(
            config_path=args.config,
            profile=args.profile,
            home=args.home,
            dotfiles=args.dotfiles,
            log_path=args.log,
            interactive=not args.yes,
            dry_run=bool(args.dry_run),
            start_at=args.start_at,
            stop_after=args.stop_after,
            verbose=bool(args.verbose),
        )
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"dotfiles-provision: {e}", file=sys.stderr)
        return 2
    return report.exit_code()
