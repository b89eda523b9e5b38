import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction
from django.shortcuts import get_object_or_404

from .models import Payroll
from .status import PAYROLL_TRANSITIONS, PayrollStatus

logger = logging.getLogger(__name__)


ACTION_VERBS = {
    "approve": "approved",
    "mark_paid": "marked as paid",
}


@dataclass(frozen=True)
class StateConflict:
    action: str
    expected: str
    current: str

    @property
    def message(self) -> str:
        return (
            f"Only {PayrollStatus(self.expected).label.lower()} payroll records can be "
            f"{ACTION_VERBS[self.action]}. Current status: {self.current}"
        )


@dataclass(frozen=True)
class TransitionResult:
    record: Payroll
    conflict: Optional[StateConflict] = None

    @property
    def ok(self) -> bool:
        return self.conflict is None


def _transition(record_id, action, **changes) -> TransitionResult:
    expected, target = PAYROLL_TRANSITIONS[action]
    with transaction.atomic():
        record = get_object_or_404(Payroll.objects.select_for_update(), pk=record_id)
        if record.status != expected:
            logger.warning(
                "Payroll #%s: %s refused, status is %s (expected %s).", record.pk, action, record.status, expected
            )
            return TransitionResult(record, StateConflict(action, expected, record.status))

        record.status = target
        for name, value in changes.items():
            setattr(record, name, value)
        record.save(update_fields=["status", "updated_at", *changes])

    logger.info("Payroll #%s: %s -> %s.", record.pk, expected, target)
    return TransitionResult(record)


def approve_payroll(record_id, approved_by=None) -> TransitionResult:
    return _transition(record_id, "approve", approved_by=approved_by)


def mark_payroll_paid(record_id) -> TransitionResult:
    return _transition(record_id, "mark_paid")
