"""Bulk executor and outcome reporter shared by every bulk command.

``execute`` applies one already-resolved operation to each target key and
never stops on a per-key failure. ``report`` turns the tally into one of
three outcomes:

- success: nothing failed (exit 0)
- partial: some failed, some succeeded (exit 0, failed keys listed)
- failed: nothing succeeded (exit 1)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from jiractl.errors import JiractlError, ResolutionError
from jiractl.types.core import BatchResultDict, FailedKeyDict, OutcomeKind

logger = logging.getLogger(__name__)

Operation = Callable[[str], object]


@dataclass(frozen=True)
class OperationOutcome:
    key: str
    ok: bool
    detail: str | None = None


@dataclass(frozen=True)
class BatchResult:
    """Every target appears exactly once, in ``succeeded`` or ``failed``."""

    succeeded: tuple[str, ...]
    failed: tuple[OperationOutcome, ...]

    @property
    def failed_keys(self) -> list[str]:
        return [o.key for o in self.failed]

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def outcome(self) -> OutcomeKind:
        if not self.failed:
            return "success"
        if self.succeeded:
            return "partial"
        return "failed"

    def to_dict(self) -> BatchResultDict:
        return BatchResultDict(
            succeeded=list(self.succeeded),
            failed=[FailedKeyDict(key=o.key, error=o.detail or "") for o in self.failed],
            outcome=self.outcome,
        )


def _run_one(key: str, op: Operation) -> OperationOutcome:
    try:
        op(key)
    except JiractlError as exc:
        logger.warning("Operation failed for %s: %s", key, exc, extra={"key": key, "error": str(exc)})
        return OperationOutcome(key=key, ok=False, detail=str(exc))
    return OperationOutcome(key=key, ok=True)


def _collect(outcomes: Sequence[OperationOutcome]) -> BatchResult:
    return BatchResult(
        succeeded=tuple(o.key for o in outcomes if o.ok),
        failed=tuple(o for o in outcomes if not o.ok),
    )


def execute(targets: Sequence[str], op: Operation, *, workers: int = 1) -> BatchResult:
    """Apply ``op`` to every target, recording per-key success or failure.

    ``op`` signals a per-key failure by raising a ``JiractlError`` (every
    ``JiraAPIError`` included); any other exception propagates. With
    ``workers > 1`` keys run on a bounded thread pool; each key writes only
    its own slot, and slots are merged in target order after the pool drains.
    """
    if not targets:
        msg = "no issues found"
        raise ResolutionError(msg)

    if workers <= 1 or len(targets) == 1:
        return _collect([_run_one(key, op) for key in targets])

    slots: list[OperationOutcome | None] = [None] * len(targets)
    pool = ThreadPoolExecutor(max_workers=min(workers, len(targets)), thread_name_prefix="jiractl-bulk")
    try:
        futures: list[Future[OperationOutcome]] = [pool.submit(_run_one, key, op) for key in targets]
        for i, future in enumerate(futures):
            slots[i] = future.result()
    except BaseException:
        # Interrupted: let in-flight calls finish, drop queued ones, report nothing.
        pool.shutdown(wait=True, cancel_futures=True)
        raise
    pool.shutdown(wait=True)
    return _collect([s for s in slots if s is not None])


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BulkMessages:
    """Per-command wording.

    ``{count}``, ``{succeeded}``, ``{failed}`` and ``{subject}`` are filled in.
    Server-supplied names go in ``subject``, never into the templates.
    """

    success: str
    partial: str
    failure: str
    subject: str = ""


@dataclass(frozen=True)
class Report:
    outcome: OutcomeKind
    exit_code: int
    message: str
    failed_line: str = ""


def report(result: BatchResult, messages: BulkMessages) -> Report:
    counts = {
        "count": len(result.succeeded),
        "succeeded": len(result.succeeded),
        "failed": len(result.failed),
        "subject": messages.subject,
    }
    if not result.failed:
        return Report("success", 0, messages.success.format(**counts))
    failed_line = f"Failed: {', '.join(result.failed_keys)}"
    if result.succeeded:
        return Report("partial", 0, messages.partial.format(**counts), failed_line)
    return Report("failed", 1, messages.failure.format(**counts), failed_line)
