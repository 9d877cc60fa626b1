"""Idempotent, confirmable provisioning of a fresh desktop from a dotfiles repo.

Core design goals:
- Every step checks before it acts (re-runs are no-ops)
- Nothing is applied without consent when running interactively
- User files are backed up before they are replaced
- Failures are recorded, never raised past the runner
"""

__all__ = []
