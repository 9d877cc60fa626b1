from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from .backup import DEFAULT_PREFIX, BackupStore
from .confirm import Confirmer, ScriptedConfirmer
from .context import ProvisionCtx
from .errors import BackupError, PreconditionFailed, StepApplyError, StepCheckError, UserDeclined
from .models import FailurePolicy, RunPlan, RunReport, Step, StepResult, StepStatus
from .report import Reporter

logger = logging.getLogger(__name__)

DECLINED = "declined by user"


class ProvisioningRunner:
    """Run plan steps in order: check, confirm, back up, apply, then follow the failure policy.

    Errors never escape run(); they are classified at the step boundary and
    recorded in the returned RunReport. Concurrent runs against the same home
    directory are not supported.
    """

    def __init__(
        self,
        ctx: ProvisionCtx,
        *,
        confirmer: Optional[Confirmer] = None,
        reporter: Optional[Reporter] = None,
        backup_prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.ctx = ctx
        # No confirmer means every prompt is answered no.
        self.confirmer = confirmer or ScriptedConfirmer([])
        self.reporter = reporter
        self.backup_prefix = backup_prefix
        self.clock = clock

    def run(self, plan: RunPlan, interactive: bool) -> RunReport:
        ctx = replace(self.ctx, interactive=interactive, confirmer=self.confirmer)
        backups = BackupStore(ctx.home, prefix=self.backup_prefix, clock=self.clock, dry_run=ctx.dry_run)
        report = RunReport()

        try:
            for pre in plan.preconditions:
                pre(ctx)
        except PreconditionFailed as e:
            logger.error("Precondition failed: %s", e)
            report.precondition_error = e
            return report
        except Exception as e:
            logger.exception("Precondition probe crashed")
            err = PreconditionFailed(f"precondition probe failed: {e}")
            err.__cause__ = e
            report.precondition_error = err
            return report

        for step in plan:
            if self.reporter is not None:
                self.reporter.step_started(step)
            logger.info("Step %s: start", step.name)

            try:
                result = self._run_step(step, ctx, interactive, backups)
            except KeyboardInterrupt:
                logger.warning("Step %s: interrupted", step.name)
                result = StepResult.failed(StepApplyError("interrupted by user"), backups=())
                report.interrupted = True

            report.record(step.name, result)
            if backups.saved:
                report.backup_dir = backups.dir
            logger.info("Step %s: %s %s", step.name, result.status.value, result.detail)
            if self.reporter is not None:
                self.reporter.step_finished(step.name, result)

            if report.interrupted:
                break
            if result.status is StepStatus.FAILED and step.on_failure is FailurePolicy.ABORT:
                logger.error("Aborting run after %s", step.name)
                report.aborted_at = step.name
                break

        return report

    def _run_step(self, step: Step, ctx: ProvisionCtx, interactive: bool, backups: BackupStore) -> StepResult:
        try:
            satisfied = step.check(ctx)
        except Exception as e:
            logger.exception("Step %s: check failed", step.name)
            err = StepCheckError(f"check failed: {e}")
            err.__cause__ = e
            return StepResult.failed(err)

        if satisfied:
            return StepResult.satisfied(getattr(step, "satisfied_message", None) or "already satisfied")

        if interactive and step.requires_confirmation:
            if not self.confirmer.confirm(f"{step.description}. Proceed?"):
                return StepResult.skipped(DECLINED)

        try:
            saved = self._backup(step, ctx, backups)
        except BackupError as e:
            logger.error("Step %s: %s", step.name, e)
            return StepResult.failed(e)

        try:
            step.apply(ctx)
        except UserDeclined as e:
            return StepResult.skipped(str(e) or DECLINED, backups=saved)
        except StepApplyError as e:
            logger.error("Step %s: %s", step.name, e)
            return StepResult.failed(e, backups=saved)
        except Exception as e:
            logger.exception("Step %s: apply failed", step.name)
            err = StepApplyError(str(e))
            err.__cause__ = e
            return StepResult.failed(err, backups=saved)

        return StepResult.applied(backups=saved)

    def _backup(self, step: Step, ctx: ProvisionCtx, backups: BackupStore) -> List[Path]:
        try:
            targets = list(step.overwrites(ctx))
        except Exception as e:
            raise BackupError(f"could not determine files to back up: {e}") from e

        saved: List[Path] = []
        for path in targets:
            if path.is_symlink() or not path.exists():
                continue
            dest = backups.backup(path)
            if dest is not None:
                saved.append(dest)
        return saved
