from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from ..context import ProvisionCtx
from ..models import FailurePolicy


class ProvisioningStep:
    """Defaults shared by the concrete steps: confirm first, keep going on failure."""

    name: str = ""
    description: str = ""
    requires_confirmation: bool = True
    on_failure: FailurePolicy = FailurePolicy.SKIP_AND_CONTINUE
    satisfied_message: Optional[str] = None

    def check(self, ctx: ProvisionCtx) -> bool:
        raise NotImplementedError

    def apply(self, ctx: ProvisionCtx) -> None:
        raise NotImplementedError

    def overwrites(self, ctx: ProvisionCtx) -> Sequence[Path]:
        return []
