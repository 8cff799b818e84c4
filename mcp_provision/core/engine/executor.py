"""
Engine executor — the best-effort step driver.

A run is an ordered list of steps. The driver runs them top to bottom,
records one Receipt per step and keeps going after a failure. Only a
FatalStepError stops it; the error propagates to the caller after the
fatal step's receipt has been recorded.

Flow:
    plan (ordered steps) → run each → collect receipts → report
"""

from __future__ import annotations

import logging
import time
import uuid
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar

from mcp_provision.core.errors import FatalStepError
from mcp_provision.core.models.action import Receipt

logger = logging.getLogger(__name__)

C = TypeVar("C")


@dataclass
class Step(Generic[C]):
    """One named operation of the plan."""

    name: str
    run: Callable[[C], Receipt]
    description: str = ""


@dataclass
class ExecutionReport:
    """Receipts of one run, in execution order.

    ``fatal`` names the step that stopped the run, if any. A run with
    degraded steps but no fatal one is ``partial``.
    """

    operation_id: str = ""
    receipts: list[Receipt] = field(default_factory=list)
    fatal: str | None = None

    def counts(self) -> Counter[str]:
        """Receipt status → number of steps."""
        return Counter(r.status for r in self.receipts)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return self.counts()["ok"]

    @property
    def failed(self) -> int:
        return self.counts()["failed"]

    @property
    def skipped(self) -> int:
        return self.counts()["skipped"]

    @property
    def status(self) -> str:
        if self.fatal:
            return "failed"
        return "partial" if self.failed else "ok"

    def get(self, step: str) -> Receipt | None:
        """Receipt of the named step, or None if it never ran."""
        return next((r for r in self.receipts if r.step == step), None)

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "status": self.status,
            "fatal": self.fatal,
            "counts": {"total": self.total, **self.counts()},
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def execute_steps(
    steps: list[Step[C]],
    context: C,
    report: ExecutionReport | None = None,
) -> ExecutionReport:
    """Run ``steps`` in order against ``context``.

    Unexpected exceptions in a step are logged with a traceback and
    recorded as a failed receipt; the run continues.

    Raises:
        FatalStepError: Re-raised after recording, stops the run.
    """
    report = report or ExecutionReport(operation_id=generate_operation_id())

    for step in steps:
        logger.debug("▶ %s", step.name)
        start = time.monotonic()
        try:
            receipt = step.run(context)
        except FatalStepError as e:
            report.receipts.append(
                Receipt.failure(step.name, error=str(e), metadata={"fatal": True})
            )
            report.fatal = step.name
            raise
        except Exception as e:
            logger.exception("Step %s crashed", step.name)
            receipt = Receipt.failure(step.name, error=f"{type(e).__name__}: {e}")

        receipt.duration_ms = receipt.duration_ms or int((time.monotonic() - start) * 1000)
        receipt.ended_at = datetime.now(UTC).isoformat()
        report.receipts.append(receipt)

        marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.debug("%s %s → %s", marker, step.name, receipt.status)

    return report


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"
