from __future__ import annotations

from pathlib import Path
from typing import List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from .models import RunReport, Step, StepResult, StepStatus

THEME = Theme(
    {
        "success": "green",
        "error": "bold red",
        "info": "yellow",
        "warning": "blue",
        "debug": "dim",
    }
)

# status -> (marker, style)
_MARKERS = {
    StepStatus.SATISFIED: ("✓", "success"),
    StepStatus.APPLIED: ("✓", "success"),
    StepStatus.SKIPPED: ("!", "warning"),
    StepStatus.FAILED: ("✗", "error"),
}


def make_console(**kwargs) -> Console:
    return Console(theme=THEME, highlight=False, **kwargs)


class Reporter:
    """Plain status lines and a closing summary. Colors are cosmetic."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def info(self, message: str) -> None:
        self.console.print(f"[info]\\[i][/info] {escape(message)}")

    def step_started(self, step: Step) -> None:
        self.info(f"{step.name}: {step.description}")

    def step_finished(self, name: str, result: StepResult) -> None:
        marker, style = _MARKERS[result.status]
        line = f"[{style}]\\[{marker}][/{style}] {escape(name)}: {result.status.value}"
        if result.detail:
            line += f" ({escape(result.detail)})"
        self.console.print(line)
        for b in result.backups:
            self.console.print(f"    backup saved to {escape(str(b))}")
        if result.status is StepStatus.FAILED and result.hint:
            self.console.print(f"    [info]hint:[/info] {escape(result.hint)}")

    def summary(self, report: RunReport) -> None:
        if report.precondition_error is not None:
            self.console.print(f"[error]\\[✗][/error] Precondition failed: {escape(str(report.precondition_error))}")
        else:
            table = Table(title="Provisioning Summary")
            table.add_column("Step")
            table.add_column("Result")
            table.add_column("Detail")
            for name, r in report.entries:
                _, style = _MARKERS[r.status]
                table.add_row(escape(name), f"[{style}]{r.status.value.upper()}[/{style}]", escape(r.detail))
            self.console.print(table)

            counts = report.counts()
            self.console.print(
                "Satisfied: {s}  Applied: {a}  Skipped: {k}  Failed: {f}".format(
                    s=counts[StepStatus.SATISFIED],
                    a=counts[StepStatus.APPLIED],
                    k=counts[StepStatus.SKIPPED],
                    f=counts[StepStatus.FAILED],
                )
            )
            if report.aborted_at is not None:
                self.console.print(f"[error]Run aborted at {report.aborted_at}[/error]")
            elif report.interrupted:
                self.console.print("[error]Run interrupted[/error]")

        actions = report.next_actions()
        if actions:
            self.console.print(Panel(escape("\n".join(actions)), title="Next actions", border_style="yellow"))

    def closing_notes(self, report: RunReport, *, home: Path, mise: bool = False, hyprland: bool = False) -> None:
        """Post-run reminders that are not steps of their own.

        The follow-up checklist only appears when this run changed something.
        """

        notes: List[str] = []
        changed_shell = report.result_for("change-login-shell")
        if changed_shell is not None and changed_shell.status is StepStatus.APPLIED:
            notes.append("Log out and back in for the login shell change to take effect.")
        if any(s is StepStatus.APPLIED for s in report.statuses):
            notes.append("Open a new terminal to verify everything works.")
            if mise:
                notes.append("Configure mise for any development tools you need (mise use -g <tool>@<version>).")
            if hyprland:
                notes.append("Set up your Hyprland keybindings in ~/.config/hypr/hyprland.conf.")
                notes.append("Set up your wallpapers directory for hyprpaper.")
        if not any((home / ".ssh" / k).is_file() for k in ("id_ed25519", "id_rsa")):
            notes.append("No SSH key found. Generate one with:")
            notes.append("  ssh-keygen -t ed25519 -C 'your_email@example.com'")
        for n in notes:
            self.info(n)
