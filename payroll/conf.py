from dataclasses import asdict, dataclass, replace
from datetime import time
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


DUPLICATE_SKIP = "skip"
DUPLICATE_REPLACE = "replace"
DUPLICATE_POLICIES = (DUPLICATE_SKIP, DUPLICATE_REPLACE)

DEFAULTS = {
    "WORKING_HOURS_PER_DAY": 8,
    "OVERTIME_MULTIPLIER": "1.5",
    "LATE_THRESHOLD_MINUTES": 15,
    "HALF_DAY_HOURS": 4,
    "DEFAULT_SHIFT_START": "09:00",
    "DEFAULT_SHIFT_END": "17:00",
    "DEFAULT_BASE_SALARY": 50000,
    "WORKING_DAYS_PER_MONTH": 22,
    "CURRENCY": "PKR",
    "DEDUCT_ABSENCES": True,
    "DUPLICATE_ATTENDANCE": DUPLICATE_SKIP,
    "FORBID_OVERLAPPING_PERIODS": True,
}


def _decimal(name, value) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ImproperlyConfigured(f"PAYROLL['{name}'] must be a number, got {value!r}.")
    if not number.is_finite():
        raise ImproperlyConfigured(f"PAYROLL['{name}'] must be a finite number, got {value!r}.")
    return number


def _time(name, value) -> time:
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value).strip())
    except ValueError:
        raise ImproperlyConfigured(f"PAYROLL['{name}'] must be a HH:MM time, got {value!r}.")


def _bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class PayrollConfiguration:
    """
    Read-only snapshot of the payroll knobs.

    Built once per operation and handed to the importer, calculator and
    generator so none of them reach for ``django.conf.settings`` themselves.
    Shift times, late threshold and half-day hours only matter when the
    importer derives a status from clock times; the calculator ignores them.
    """

    working_hours_per_day: Decimal
    working_days_per_month: int
    overtime_multiplier: Decimal
    default_base_salary: Decimal
    deduct_absences: bool
    currency: str
    late_threshold_minutes: int
    half_day_hours: Decimal
    default_shift_start: time
    default_shift_end: time
    duplicate_attendance: str = DUPLICATE_SKIP
    forbid_overlapping_periods: bool = True

    def __post_init__(self):
        if self.working_days_per_month <= 0:
            raise ImproperlyConfigured("PAYROLL['WORKING_DAYS_PER_MONTH'] must be greater than zero.")
        if self.working_hours_per_day <= 0:
            raise ImproperlyConfigured("PAYROLL['WORKING_HOURS_PER_DAY'] must be greater than zero.")
        if self.overtime_multiplier < 1:
            raise ImproperlyConfigured("PAYROLL['OVERTIME_MULTIPLIER'] must be at least 1.")
        if self.default_base_salary < 0:
            raise ImproperlyConfigured("PAYROLL['DEFAULT_BASE_SALARY'] cannot be negative.")
        if self.duplicate_attendance not in DUPLICATE_POLICIES:
            raise ImproperlyConfigured(
                f"PAYROLL['DUPLICATE_ATTENDANCE'] must be one of {', '.join(DUPLICATE_POLICIES)}."
            )

    @classmethod
    def from_dict(cls, values: dict) -> "PayrollConfiguration":
        merged = {**DEFAULTS, **(values or {})}
        try:
            working_days = int(merged["WORKING_DAYS_PER_MONTH"])
            late_threshold = int(merged["LATE_THRESHOLD_MINUTES"])
        except (TypeError, ValueError):
            raise ImproperlyConfigured(
                "PAYROLL['WORKING_DAYS_PER_MONTH'] and PAYROLL['LATE_THRESHOLD_MINUTES'] must be integers."
            )
        return cls(
            working_hours_per_day=_decimal("WORKING_HOURS_PER_DAY", merged["WORKING_HOURS_PER_DAY"]),
            working_days_per_month=working_days,
            overtime_multiplier=_decimal("OVERTIME_MULTIPLIER", merged["OVERTIME_MULTIPLIER"]),
            default_base_salary=_decimal("DEFAULT_BASE_SALARY", merged["DEFAULT_BASE_SALARY"]),
            deduct_absences=_bool(merged["DEDUCT_ABSENCES"]),
            currency=str(merged["CURRENCY"]),
            late_threshold_minutes=late_threshold,
            half_day_hours=_decimal("HALF_DAY_HOURS", merged["HALF_DAY_HOURS"]),
            default_shift_start=_time("DEFAULT_SHIFT_START", merged["DEFAULT_SHIFT_START"]),
            default_shift_end=_time("DEFAULT_SHIFT_END", merged["DEFAULT_SHIFT_END"]),
            duplicate_attendance=str(merged["DUPLICATE_ATTENDANCE"]).strip().lower(),
            forbid_overlapping_periods=_bool(merged["FORBID_OVERLAPPING_PERIODS"]),
        )

    def with_overrides(self, **changes) -> "PayrollConfiguration":
        return replace(self, **changes)

    def as_dict(self) -> dict:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Decimal):
                data[key] = str(value)
            elif isinstance(value, time):
                data[key] = value.strftime("%H:%M")
        return data


def get_payroll_configuration() -> PayrollConfiguration:
    return PayrollConfiguration.from_dict(getattr(settings, "PAYROLL", {}))
