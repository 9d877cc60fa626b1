from __future__ import annotations

import os

from dotfiles_provisioner.lib import stow


def test_planned_links_skip_ignored_names(dotfiles, home):
    (dotfiles / "zsh" / ".zshrc~").write_text("editor backup\n")
    links = stow.planned_links(dotfiles / "zsh", home)
    assert [l.target for l in links] == [home / ".zshrc"]


def test_nested_files_map_under_target(dotfiles, home):
    links = stow.planned_links(dotfiles / "ghostty", home)
    assert [l.target for l in links] == [home / ".config" / "ghostty" / "config"]


def test_folded_directory_counts_as_stowed(dotfiles, home):
    # stow folds a whole directory into one symlink when the target has none.
    (home / ".config").mkdir()
    os.symlink(dotfiles / "ghostty" / ".config" / "ghostty", home / ".config" / "ghostty")
    assert stow.is_stowed(dotfiles / "ghostty", home)


def test_conflicts_are_regular_files_only(dotfiles, home, tmp_path):
    (home / ".zshrc").write_text("mine\n")
    assert stow.conflicts(dotfiles / "zsh", home) == [home / ".zshrc"]

    (home / ".zshrc").unlink()
    (home / ".zshrc").symlink_to(tmp_path / "dangling")
    assert stow.conflicts(dotfiles / "zsh", home) == []
    assert not stow.is_stowed(dotfiles / "zsh", home)


def test_empty_package_is_stowed(home, tmp_path):
    pkg = tmp_path / "empty"
    pkg.mkdir()
    (pkg / "README.md").write_text("docs only\n")
    assert stow.is_stowed(pkg, home)


def test_stow_command(system, dotfiles, home):
    stow.stow(system, dotfiles, "tmux", home)
    assert system.calls[-1] == ["stow", "-d", str(dotfiles), "-t", str(home), "tmux"]
    assert (home / ".tmux.conf").is_symlink()


def test_conflicts_skip_files_behind_a_directory_symlink(dotfiles, home, tmp_path):
    old = tmp_path / "old-dotfiles" / "ghostty"
    old.mkdir(parents=True)
    (old / "config").write_text("font-size = 10\n")
    (home / ".config").mkdir()
    (home / ".config" / "ghostty").symlink_to(old)

    assert stow.conflicts(dotfiles / "ghostty", home) == []
    assert not stow.is_stowed(dotfiles / "ghostty", home)
