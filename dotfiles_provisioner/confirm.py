from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from rich.console import Console

logger = logging.getLogger(__name__)

AFFIRMATIVE = {"y", "yes"}


class Confirmer(Protocol):
    def confirm(self, question: str) -> bool:
        ...


def is_affirmative(answer: Optional[str]) -> bool:
    """Only an explicit yes counts; empty or anything else is a no."""
    if answer is None:
        return False
    return answer.strip().lower() in AFFIRMATIVE


class TerminalConfirmer:
    """Blocking yes/no prompt on the terminal, defaulting to no."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def confirm(self, question: str) -> bool:
        try:
            answer = self.console.input(f"[bold yellow]?[/bold yellow] {question} (y/N) ")
        except EOFError:
            answer = ""
        ok = is_affirmative(answer)
        logger.info("Prompt %r -> %s", question, "yes" if ok else "no")
        return ok


class ScriptedConfirmer:
    """Answers prompts from a fixed sequence; an exhausted script answers no."""

    def __init__(self, answers: Iterable[str | bool]) -> None:
        self._answers: List[str | bool] = list(answers)
        self.questions: List[str] = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        if not self._answers:
            return False
        answer = self._answers.pop(0)
        if isinstance(answer, bool):
            return answer
        return is_affirmative(answer)
