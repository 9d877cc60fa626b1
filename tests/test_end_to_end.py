from __future__ import annotations

from datetime import datetime

import pytest

from dotfiles_provisioner.confirm import ScriptedConfirmer
from dotfiles_provisioner.models import RunPlan, StepStatus
from dotfiles_provisioner.pipeline import ProvisioningRunner
from dotfiles_provisioner.steps import (
    BackupConfigStep,
    CloneSubmodulesStep,
    InstallPackagesStep,
    SymlinkConfigStep,
)


@pytest.fixture
def plan() -> RunPlan:
    return RunPlan(
        steps=(
            InstallPackagesStep(["zsh", "stow"]),
            CloneSubmodulesStep(),
            BackupConfigStep(".zshrc"),
            SymlinkConfigStep("zsh"),
        )
    )


def _runner(ctx) -> ProvisioningRunner:
    return ProvisioningRunner(ctx, clock=lambda: datetime(2026, 3, 1, 12, 0, 0))


def test_fresh_home(ctx, plan, home, dotfiles):
    report = _runner(ctx).run(plan, interactive=False)

    assert report.names == [
        "install-packages",
        "clone-dotfiles-submodules",
        "backup-existing-zshrc",
        "symlink-zsh-config",
    ]
    assert report.statuses == [
        StepStatus.APPLIED,
        StepStatus.APPLIED,
        StepStatus.SATISFIED,
        StepStatus.APPLIED,
    ]
    assert report.result_for("backup-existing-zshrc").detail == "no existing file to back up"

    zshrc = home / ".zshrc"
    assert zshrc.is_symlink()
    assert zshrc.resolve() == (dotfiles / "zsh" / ".zshrc").resolve()
    assert report.backup_dir is None
    assert report.exit_code() == 0


def test_second_run_changes_nothing(ctx, plan, home, system, snapshot):
    _runner(ctx).run(plan, interactive=False)
    before = snapshot(home)
    mutating = len(system.mutating_calls)

    again = _runner(ctx).run(plan, interactive=False)

    assert again.statuses == [StepStatus.SATISFIED] * 4
    assert len(system.mutating_calls) == mutating
    assert snapshot(home) == before


def test_hand_written_zshrc_is_kept(ctx, plan, home, dotfiles):
    (home / ".zshrc").write_text("# mine\n")

    report = _runner(ctx).run(plan, interactive=False)

    assert report.statuses == [StepStatus.APPLIED] * 4
    backup_dir = home / ".config-backup-20260301-120000"
    assert report.backup_dir == backup_dir
    assert (backup_dir / ".zshrc").read_text() == "# mine\n"
    saved = report.result_for("backup-existing-zshrc").backups
    assert saved == (backup_dir / ".zshrc",)
    assert report.result_for("symlink-zsh-config").backups == saved
    assert sorted(p.name for p in backup_dir.iterdir()) == [".zshrc"]
    assert (home / ".zshrc").resolve() == (dotfiles / "zsh" / ".zshrc").resolve()


def test_rerun_with_user_file_in_stowed_config_dir(ctx, home, system, snapshot):
    themes = home / ".config" / "ghostty" / "themes"
    themes.mkdir(parents=True)
    (themes / "mine").write_text("palette = 0=#000000\n")
    plan = RunPlan(steps=(BackupConfigStep(".config/ghostty"), SymlinkConfigStep("ghostty")))

    first = ProvisioningRunner(ctx, clock=lambda: datetime(2026, 3, 1, 12, 0, 0)).run(plan, interactive=False)
    before = snapshot(home)
    second = ProvisioningRunner(ctx, clock=lambda: datetime(2026, 3, 2, 12, 0, 0)).run(plan, interactive=False)

    assert first.statuses == [StepStatus.SATISFIED, StepStatus.APPLIED]
    assert second.statuses == [StepStatus.SATISFIED, StepStatus.SATISFIED]
    assert (home / ".config" / "ghostty" / "config").is_symlink()
    assert (themes / "mine").read_text() == "palette = 0=#000000\n"
    assert not list(home.glob(".config-backup-*"))
    assert snapshot(home) == before


def test_interactive_decline_leaves_home_alone(ctx, plan, home, system, snapshot):
    (home / ".zshrc").write_text("# mine\n")
    before = snapshot(home)
    runner = ProvisioningRunner(ctx, confirmer=ScriptedConfirmer(["n", "n", "n"]))

    report = runner.run(plan, interactive=True)

    # The backup step never prompts, so it still copies .zshrc aside.
    assert report.statuses == [
        StepStatus.SKIPPED,
        StepStatus.SKIPPED,
        StepStatus.APPLIED,
        StepStatus.SKIPPED,
    ]
    assert system.mutating_calls == []
    assert (home / ".zshrc").read_text() == "# mine\n"
    after = snapshot(home)
    assert {k: v for k, v in after.items() if not k.startswith(".config-backup-")} == before
