from __future__ import annotations

from typing import Optional


class ProvisioningError(RuntimeError):
    pass


class PreconditionFailed(ProvisioningError):
    """Fatal: the environment is not fit for any step to run."""

    def __init__(self, message: str, *, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.hint = hint


class StepCheckError(ProvisioningError):
    """The satisfaction probe of a step could not be evaluated."""


class StepApplyError(ProvisioningError):
    """The mutating action of a step failed (possibly partway)."""

    def __init__(self, message: str, *, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.hint = hint


class UserDeclined(ProvisioningError):
    """Not a failure: the operator said no. Recorded as Skipped."""


class BackupError(ProvisioningError):
    pass
