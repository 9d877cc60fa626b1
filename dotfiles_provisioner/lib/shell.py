from __future__ import annotations

from typing import Optional

from .command import CommandRunner


def login_shell(cmd: CommandRunner, user: str) -> Optional[str]:
    """Login shell from the passwd database.

    $SHELL only changes at the next login, so it cannot confirm a chsh.
    """
    r = cmd(["getent", "passwd", user], check=False)
    if r.returncode != 0 or not r.stdout.strip():
        return None
    fields = r.stdout.strip().splitlines()[0].split(":")
    return fields[6] if len(fields) >= 7 else None


def change_login_shell(cmd: CommandRunner, shell_path: str, *, dry_run: bool = False) -> None:
    cmd(["chsh", "-s", shell_path], dry_run=dry_run)
