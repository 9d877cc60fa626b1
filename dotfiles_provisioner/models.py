from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional, Protocol, Sequence, Tuple

from .errors import PreconditionFailed

if TYPE_CHECKING:
    from .context import ProvisionCtx


class FailurePolicy(enum.Enum):
    ABORT = "abort"
    SKIP_AND_CONTINUE = "skip-and-continue"


class StepStatus(enum.Enum):
    SATISFIED = "satisfied"
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


class Step(Protocol):
    """A single idempotent provisioning step.

    check() must reflect apply()'s effect: once apply() has succeeded,
    check() reports True and a re-run is a no-op.
    """

    name: str
    description: str
    requires_confirmation: bool
    on_failure: FailurePolicy

    def check(self, ctx: "ProvisionCtx") -> bool:
        ...

    def apply(self, ctx: "ProvisionCtx") -> None:
        ...

    def overwrites(self, ctx: "ProvisionCtx") -> Sequence[Path]:
        ...


Precondition = Callable[["ProvisionCtx"], None]


@dataclass(frozen=True)
class StepResult:
    status: StepStatus
    detail: str = ""
    error: Optional[BaseException] = None
    hint: Optional[str] = None
    backups: Tuple[Path, ...] = ()

    @classmethod
    def satisfied(cls, detail: str = "already satisfied") -> "StepResult":
        return cls(status=StepStatus.SATISFIED, detail=detail)

    @classmethod
    def applied(cls, backups: Sequence[Path] = ()) -> "StepResult":
        return cls(status=StepStatus.APPLIED, backups=tuple(backups))

    @classmethod
    def skipped(cls, reason: str, backups: Sequence[Path] = ()) -> "StepResult":
        return cls(status=StepStatus.SKIPPED, detail=reason, backups=tuple(backups))

    @classmethod
    def failed(cls, error: BaseException, backups: Sequence[Path] = ()) -> "StepResult":
        return cls(
            status=StepStatus.FAILED,
            detail=str(error),
            error=error,
            hint=getattr(error, "hint", None),
            backups=tuple(backups),
        )


@dataclass(frozen=True)
class RunPlan:
    steps: Tuple[Step, ...]
    preconditions: Tuple[Precondition, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "preconditions", tuple(self.preconditions))
        seen = set()
        for step in self.steps:
            if step.name in seen:
                raise ValueError(f"Duplicate step name in plan: {step.name}")
            seen.add(step.name)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def names(self) -> List[str]:
        return [s.name for s in self.steps]

    def select(self, *, start_at: Optional[str] = None, stop_after: Optional[str] = None) -> "RunPlan":
        """Return the window of steps from start_at through stop_after (inclusive)."""

        names = self.names
        for n in (start_at, stop_after):
            if n is not None and n not in names:
                raise ValueError(f"Unknown step: {n}")

        lo = names.index(start_at) if start_at is not None else 0
        hi = names.index(stop_after) + 1 if stop_after is not None else len(names)
        if hi <= lo:
            raise ValueError(f"--stop-after {stop_after} comes before --start-at {start_at}")
        return RunPlan(steps=self.steps[lo:hi], preconditions=self.preconditions)


@dataclass
class RunReport:
    entries: List[Tuple[str, StepResult]] = field(default_factory=list)
    aborted_at: Optional[str] = None
    interrupted: bool = False
    precondition_error: Optional[PreconditionFailed] = None
    backup_dir: Optional[Path] = None

    def record(self, name: str, result: StepResult) -> None:
        self.entries.append((name, result))

    @property
    def names(self) -> List[str]:
        return [n for n, _ in self.entries]

    @property
    def statuses(self) -> List[StepStatus]:
        return [r.status for _, r in self.entries]

    def result_for(self, name: str) -> Optional[StepResult]:
        for n, r in self.entries:
            if n == name:
                return r
        return None

    def counts(self) -> Dict[StepStatus, int]:
        out = {s: 0 for s in StepStatus}
        for _, r in self.entries:
            out[r.status] += 1
        return out

    @property
    def succeeded(self) -> bool:
        return (
            self.precondition_error is None
            and self.aborted_at is None
            and not self.interrupted
            and all(r.status is not StepStatus.FAILED for _, r in self.entries)
        )

    def exit_code(self) -> int:
        if self.interrupted:
            return 130
        if self.precondition_error is not None:
            return 2
        return 0 if self.succeeded else 1

    def next_actions(self) -> List[str]:
        actions: List[str] = []
        if self.precondition_error is not None:
            actions.append(f"Resolve: {self.precondition_error}")
            if self.precondition_error.hint:
                actions.append(self.precondition_error.hint)
            actions.append("Then re-run the provisioner.")
            return actions

        for name, r in self.entries:
            if r.status is not StepStatus.FAILED:
                continue
            actions.append(f"{name}: {r.hint}" if r.hint else f"{name}: {r.detail}")

        if self.interrupted:
            actions.append("The run was interrupted; re-run to continue where it stopped.")
        elif self.aborted_at is not None:
            actions.append(f"Resolve the failure in '{self.aborted_at}' then re-run; completed steps will be no-ops.")
        elif actions:
            actions.append("Re-run after fixing the failures above; satisfied steps are skipped.")

        if self.backup_dir is not None:
            actions.append(f"Review backups at: {self.backup_dir}")
        return actions
