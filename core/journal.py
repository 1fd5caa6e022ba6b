# =============================================================================
# core/journal.py - Commit Journal
# =============================================================================
# PostgREST gives us no transaction spanning several requests, so a save that
# needs delete + insert + renumber can stop half-way. The journal records
# every intended step *before* it is issued and then marks it applied or
# failed. When a save stops, the journal says exactly what reached the store.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.ordering import CommitPlan

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    DELETE = "delete"
    INSERT = "insert"
    RENUMBER = "renumber"


class StepStatus(str, Enum):
    PENDING = "pending"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass
class JournalStep:
    """One write of a commit: which members, at which positions."""
    kind: StepKind
    member_ids: list[str]
    positions: list[tuple[str, int]] = field(default_factory=list)
    status: StepStatus = StepStatus.PENDING
    error: str | None = None

    @property
    def removes(self) -> bool:
        return self.kind == StepKind.DELETE

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "step": self.kind.value,
            "status": self.status.value,
            "member_ids": self.member_ids,
        }
        if self.positions:
            result["positions"] = {m: p for m, p in self.positions}
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class CommitJournal:
    container_id: str
    steps: list[JournalStep] = field(default_factory=list)

    @classmethod
    def from_plan(cls, plan: CommitPlan) -> CommitJournal:
        """Record every step of the plan, in execution order."""
        journal = cls(container_id=plan.container_id)
        if plan.to_remove:
            journal.steps.append(JournalStep(StepKind.DELETE, list(plan.to_remove)))
        if plan.to_add:
            journal.steps.append(JournalStep(
                StepKind.INSERT,
                [m for m, _ in plan.to_add],
                list(plan.to_add),
            ))
        if plan.renumber:
            journal.steps.append(JournalStep(
                StepKind.RENUMBER,
                [m for m, _ in plan.renumber],
                list(plan.renumber),
            ))

        for step in journal.steps:
            logger.info(
                f"Commit {plan.container_id}: intend {step.kind.value} "
                f"of {len(step.member_ids)} members"
            )
        return journal

    def applied(self, step: JournalStep) -> None:
        step.status = StepStatus.APPLIED
        logger.debug(f"Commit {self.container_id}: {step.kind.value} applied")

    def failed(self, step: JournalStep, error: Exception) -> None:
        step.status = StepStatus.FAILED
        step.error = str(error)
        applied = [s.kind.value for s in self.steps if s.status == StepStatus.APPLIED]
        pending = [s.kind.value for s in self.steps if s.status == StepStatus.PENDING]
        logger.error(
            f"Commit {self.container_id}: {step.kind.value} failed ({error}); "
            f"applied={applied} not_run={pending}"
        )

    @property
    def is_complete(self) -> bool:
        return all(step.status == StepStatus.APPLIED for step in self.steps)

    def to_list(self) -> list[dict[str, Any]]:
        return [step.to_dict() for step in self.steps]
