"""
Engine executor — runs a workflow plan step by step.

Flow:
    plan → run each step → collect receipts → stop at the first failed fatal step

There is no rollback: a provisioning run that aborts leaves partial
state behind, which the teardown workflow cleans up.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from vaultdev.core.models.action import Receipt, Step

logger = logging.getLogger(__name__)

StepCallback = Callable[[Step, Receipt], None]


@dataclass
class ExecutionPlan:
    """An ordered list of steps for one workflow."""

    operation_id: str = ""
    workflow: str = ""
    steps: list[Step] = field(default_factory=list)

    def add(self, step_id: str, name: str, run: Callable[[], Receipt], fatal: bool = False) -> None:
        self.steps.append(Step(id=step_id, name=name, fatal=fatal, run=run))


@dataclass
class ExecutionReport:
    """Result of executing a plan."""

    operation_id: str = ""
    workflow: str = ""
    receipts: list[Receipt] = field(default_factory=list)
    aborted_at: str | None = None   # id of the fatal step that stopped the run
    not_run: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.skipped)

    @property
    def aborted(self) -> bool:
        return self.aborted_at is not None

    @property
    def warnings(self) -> list[str]:
        return [w for r in self.receipts for w in r.warnings]

    @property
    def status(self) -> str:
        if self.aborted:
            return "failed"
        if self.failed:
            return "partial"
        return "ok"

    def receipt(self, step_id: str) -> Receipt | None:
        for r in self.receipts:
            if r.step_id == step_id:
                return r
        return None

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "workflow": self.workflow,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "aborted_at": self.aborted_at,
            "not_run": self.not_run,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def execute_plan(plan: ExecutionPlan, on_step: StepCallback | None = None) -> ExecutionReport:
    """Run every step in order; stop after a failed fatal step.

    Step functions are expected to return receipts. An exception that
    escapes one anyway becomes a failed receipt with the same fatal
    classification as the step.
    """
    report = ExecutionReport(operation_id=plan.operation_id, workflow=plan.workflow)

    for index, step in enumerate(plan.steps):
        start = time.monotonic()
        try:
            receipt = step.run()
        except Exception as e:
            logger.exception("Step %s raised", step.id)
            receipt = Receipt.failure(step_id=step.id, error=f"Unexpected error: {e}")
        receipt.duration_ms = int((time.monotonic() - start) * 1000)

        report.receipts.append(receipt)
        status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.info("%s %s:%s → %s", status_marker, plan.workflow, step.id, receipt.status)

        if on_step is not None:
            on_step(step, receipt)

        if receipt.failed and step.fatal:
            report.aborted_at = step.id
            report.not_run = [s.id for s in plan.steps[index + 1:]]
            logger.warning("%s aborted at fatal step %s", plan.workflow, step.id)
            break

    return report


def generate_operation_id(workflow: str = "op") -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"{workflow}-{now}-{short}"
