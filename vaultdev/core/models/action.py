"""
Step and Receipt models — the workflow execution contract.

Steps represent one operation of a workflow. Receipts represent results.
The executor runs steps, step functions return receipts. Never exceptions.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Step(BaseModel):
    """One operation of a provisioning or teardown workflow.

    A fatal step aborts the workflow when its receipt is ``failed``.
    Best-effort steps only report the failure and the workflow moves on.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str                          # stable identifier, e.g. "hosts.register"
    name: str = ""                   # human-readable label
    fatal: bool = False
    run: Callable[[], Receipt] = Field(exclude=True, repr=False)


class Receipt(BaseModel):
    """Result of a single step.

    ``status`` is the typed outcome; the owning Step decides whether a
    failure is fatal or recoverable.
    """

    step_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the step succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the step failed."""
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(cls, step_id: str, output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(step_id=step_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, step_id: str, error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(step_id=step_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, step_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Create a skip receipt (idempotent no-op)."""
        return cls(step_id=step_id, status="skipped", output=reason, **kwargs)


Step.model_rebuild()
