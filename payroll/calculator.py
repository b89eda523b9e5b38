from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .conf import PayrollConfiguration


TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value, default=ZERO) -> Decimal:
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    """Fixed-point payroll rounding: two places, halves away from zero."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AttendanceAggregate:
    employee_id: int
    present_days: Decimal
    absent_days: int
    late_days: int
    total_working_hours: Decimal
    total_overtime_hours: Decimal


@dataclass(frozen=True)
class Compensation:
    hourly_rate: Decimal
    overtime_pay: Decimal
    daily_rate: Decimal
    deductions: Decimal
    net_salary: Decimal


def calculate(aggregate: AttendanceAggregate, base_salary, config: PayrollConfiguration) -> Compensation:
    """
    Price one employee's period.

    Every intermediate figure is rounded before it feeds the next step, so the
    stored hourly and daily rates reproduce the stored totals exactly. Net pay
    never goes below zero, however large the absence deduction gets.
    """
    base = to_decimal(base_salary)
    days = Decimal(config.working_days_per_month)

    hourly_rate = round_money(base / (days * config.working_hours_per_day))
    overtime_pay = round_money(
        to_decimal(aggregate.total_overtime_hours) * hourly_rate * config.overtime_multiplier
    )

    daily_rate = round_money(base / days)
    deductions = ZERO
    if config.deduct_absences and aggregate.absent_days > 0:
        deductions = round_money(Decimal(aggregate.absent_days) * daily_rate)

    net_salary = max(ZERO, round_money(base + overtime_pay - deductions))

    return Compensation(
        hourly_rate=hourly_rate,
        overtime_pay=overtime_pay,
        daily_rate=daily_rate,
        deductions=deductions,
        net_salary=net_salary,
    )
