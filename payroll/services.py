import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Count, Max, Min, Q, Sum
from django.db.models.functions import Coalesce
from rest_framework.exceptions import ValidationError

from .aggregation import aggregate_period
from .calculator import ZERO, AttendanceAggregate, calculate, round_money, to_decimal
from .conf import PayrollConfiguration, get_payroll_configuration
from .exceptions import PayrollLockedError, PeriodOverlapError
from .importer import AttendanceImporter, ImportResult
from .models import Attendance, Payroll
from .spreadsheet import read_attendance_rows
from .status import AttendanceStatus, PayrollStatus

logger = logging.getLogger(__name__)


EMPTY_PERIOD_MESSAGE = "No attendance records found for the selected period."


def _check_period(period_start: date, period_end: date):
    if period_start > period_end:
        raise ValidationError({"period_end": "Period end must be on or after period start."})


# ----------------------------
# Attendance
# ----------------------------

def import_attendance(upload, uploaded_by, config: Optional[PayrollConfiguration] = None) -> ImportResult:
    rows = read_attendance_rows(upload)
    return AttendanceImporter(uploaded_by=uploaded_by, config=config).run(rows)


def delete_batch(batch: str) -> int:
    deleted, _ = Attendance.objects.filter(upload_batch=batch).delete()
    logger.info("Attendance batch %s deleted (%s records).", batch, deleted)
    return deleted


def attendance_summary(date_from: date, date_to: date) -> Dict:
    _check_period(date_from, date_to)
    return Attendance.objects.filter(date__gte=date_from, date__lte=date_to).aggregate(
        total_records=Count("id"),
        present=Count("id", filter=Q(status=AttendanceStatus.PRESENT)),
        absent=Count("id", filter=Q(status=AttendanceStatus.ABSENT)),
        late=Count("id", filter=Q(status=AttendanceStatus.LATE)),
        half_day=Count("id", filter=Q(status=AttendanceStatus.HALF_DAY)),
        total_working_hours=Coalesce(Sum("working_hours"), Decimal("0.00")),
        total_overtime_hours=Coalesce(Sum("overtime_hours"), Decimal("0.00")),
    )


def upload_history():
    """One row per import batch, newest first."""
    return (
        Attendance.objects.filter(upload_batch__isnull=False)
        .values("upload_batch")
        .annotate(
            period_start=Min("date"),
            period_end=Max("date"),
            record_count=Count("id"),
            employee_count=Count("employee", distinct=True),
            uploaded_at=Min("created_at"),
            uploaded_by=Max("uploaded_by__username"),
        )
        .order_by("-uploaded_at")
    )


# ----------------------------
# Payroll generation
# ----------------------------

@dataclass
class GenerationResult:
    generated: int = 0
    errors: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return {"generated": self.generated, "errors": list(self.errors)}


class PayrollGenerator:
    """
    Builds draft payroll records for every employee with attendance in a period.

    The period is aggregated once, up front. Each employee is then priced and
    written in its own transaction, so a failure for one employee is reported
    in ``errors`` and never rolls back or blocks the others.
    """

    def __init__(self, config: Optional[PayrollConfiguration] = None):
        self.config = config or get_payroll_configuration()

    def generate(
        self,
        period_start: date,
        period_end: date,
        generated_by=None,
        base_salary_override=None,
        reset_locked: bool = False,
    ) -> GenerationResult:
        _check_period(period_start, period_end)
        base_salary = (
            to_decimal(base_salary_override) if base_salary_override is not None else self.config.default_base_salary
        )
        if base_salary < 0:
            raise ValidationError({"base_salary": "Base salary cannot be negative."})
        base_salary = round_money(base_salary)

        aggregates = aggregate_period(period_start, period_end)
        if not aggregates:
            logger.info("Payroll %s..%s: no attendance, nothing generated.", period_start, period_end)
            return GenerationResult(generated=0, errors=[EMPTY_PERIOD_MESSAGE])

        result = GenerationResult()
        for employee_id, aggregate in aggregates.items():
            try:
                self._upsert(aggregate, period_start, period_end, base_salary, generated_by, reset_locked)
            except (PayrollLockedError, PeriodOverlapError) as exc:
                logger.warning("Payroll %s..%s: employee #%s skipped: %s", period_start, period_end, employee_id, exc)
                result.errors.append(f"employee #{employee_id}: {exc}")
                continue
            except Exception as exc:
                logger.exception("Payroll %s..%s: employee #%s failed.", period_start, period_end, employee_id)
                result.errors.append(f"employee #{employee_id}: {exc}")
                continue
            result.generated += 1

        logger.info(
            "Payroll %s..%s: %s generated, %s errors.",
            period_start,
            period_end,
            result.generated,
            len(result.errors),
        )
        return result

    def _upsert(self, aggregate: AttendanceAggregate, period_start, period_end, base_salary, generated_by, reset_locked):
        compensation = calculate(aggregate, base_salary, self.config)
        figures = {
            "total_working_days": self.config.working_days_per_month,
            "total_present_days": aggregate.present_days,
            "total_absent_days": aggregate.absent_days,
            "total_late_days": aggregate.late_days,
            "total_working_hours": aggregate.total_working_hours,
            "total_overtime_hours": aggregate.total_overtime_hours,
            "base_salary": base_salary,
            "hourly_rate": compensation.hourly_rate,
            "overtime_pay": compensation.overtime_pay,
            "deductions": compensation.deductions,
            "net_salary": compensation.net_salary,
            "status": PayrollStatus.DRAFT,
            "generated_by": generated_by,
            "approved_by": None,
        }
        try:
            return self._write(aggregate.employee_id, period_start, period_end, figures, reset_locked)
        except IntegrityError:
            # a concurrent run created the row first; go again as an update
            return self._write(aggregate.employee_id, period_start, period_end, figures, reset_locked)

    def _write(self, employee_id, period_start, period_end, figures, reset_locked) -> Payroll:
        with transaction.atomic():
            if self.config.forbid_overlapping_periods:
                overlapping = (
                    Payroll.objects.filter(
                        employee_id=employee_id,
                        period_start__lte=period_end,
                        period_end__gte=period_start,
                    )
                    .exclude(period_start=period_start, period_end=period_end)
                    .order_by("period_start")
                    .first()
                )
                if overlapping:
                    raise PeriodOverlapError(overlapping.period_start, overlapping.period_end)

            record = (
                Payroll.objects.select_for_update()
                .filter(employee_id=employee_id, period_start=period_start, period_end=period_end)
                .first()
            )
            if record is None:
                record = Payroll(employee_id=employee_id, period_start=period_start, period_end=period_end)
            elif record.status != PayrollStatus.DRAFT and not reset_locked:
                raise PayrollLockedError(record.status)

            for name, value in figures.items():
                setattr(record, name, value)
            record.save()
            return record


def generate_payroll(
    period_start: date,
    period_end: date,
    generated_by=None,
    base_salary_override=None,
    reset_locked: bool = False,
    config: Optional[PayrollConfiguration] = None,
) -> GenerationResult:
    return PayrollGenerator(config).generate(
        period_start,
        period_end,
        generated_by=generated_by,
        base_salary_override=base_salary_override,
        reset_locked=reset_locked,
    )


def period_summary(period_start: date, period_end: date) -> Dict:
    """Totals over payroll records whose period lies inside the range."""
    _check_period(period_start, period_end)
    return Payroll.objects.filter(period_start__gte=period_start, period_end__lte=period_end).aggregate(
        total_records=Count("id"),
        total_base=Coalesce(Sum("base_salary"), ZERO),
        total_overtime=Coalesce(Sum("overtime_pay"), ZERO),
        total_deductions=Coalesce(Sum("deductions"), ZERO),
        total_net=Coalesce(Sum("net_salary"), ZERO),
        draft_count=Count("id", filter=Q(status=PayrollStatus.DRAFT)),
        approved_count=Count("id", filter=Q(status=PayrollStatus.APPROVED)),
        paid_count=Count("id", filter=Q(status=PayrollStatus.PAID)),
    )
