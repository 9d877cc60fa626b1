from __future__ import annotations

import io

import pytest
from rich.console import Console

from dotfiles_provisioner.confirm import ScriptedConfirmer, TerminalConfirmer, is_affirmative


@pytest.mark.parametrize("answer", ["y", "Y", "yes", " YES ", "Yes\n"])
def test_affirmative(answer):
    assert is_affirmative(answer)


@pytest.mark.parametrize("answer", [None, "", " ", "n", "no", "yep", "sure", "1", "y e s"])
def test_everything_else_is_no(answer):
    assert not is_affirmative(answer)


class TestScriptedConfirmer:
    def test_answers_in_order_and_records_questions(self):
        c = ScriptedConfirmer(["y", False, "nope", True])
        assert [c.confirm(f"q{i}") for i in range(4)] == [True, False, False, True]
        assert c.questions == ["q0", "q1", "q2", "q3"]

    def test_exhausted_script_declines(self):
        c = ScriptedConfirmer([])
        assert c.confirm("anything?") is False


class TestTerminalConfirmer:
    def _confirmer(self, monkeypatch, reply):
        console = Console(file=io.StringIO())
        prompts = []

        def fake_input(prompt="", **kwargs):
            prompts.append(prompt)
            if isinstance(reply, BaseException):
                raise reply
            return reply

        monkeypatch.setattr(console, "input", fake_input)
        return TerminalConfirmer(console), prompts

    def test_yes(self, monkeypatch):
        c, prompts = self._confirmer(monkeypatch, "yes")
        assert c.confirm("Install packages") is True
        assert "Install packages (y/N)" in prompts[0]

    def test_enter_defaults_to_no(self, monkeypatch):
        c, _ = self._confirmer(monkeypatch, "")
        assert c.confirm("Install packages") is False

    def test_eof_is_no(self, monkeypatch):
        c, _ = self._confirmer(monkeypatch, EOFError())
        assert c.confirm("Install packages") is False
