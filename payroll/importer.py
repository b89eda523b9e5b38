import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional

from django.db import IntegrityError, transaction

from .calculator import round_money
from .conf import DUPLICATE_REPLACE, PayrollConfiguration, get_payroll_configuration
from .models import Attendance, Employee
from .status import AttendanceSource, AttendanceStatus

logger = logging.getLogger(__name__)


DATE_FORMATS = ["%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y", "%d-%m-%Y", "%Y/%m/%d"]
TIME_FORMATS = ["%H:%M:%S", "%H:%M", "%I:%M %p", "%I:%M%p", "%I:%M:%S %p"]
EXCEL_EPOCH = date(1899, 12, 30)
EXCEL_SERIAL_MIN = 40000

STATUS_ALIASES = {
    "present": AttendanceStatus.PRESENT,
    "absent": AttendanceStatus.ABSENT,
    "late": AttendanceStatus.LATE,
    "half_day": AttendanceStatus.HALF_DAY,
    "half day": AttendanceStatus.HALF_DAY,
    "half-day": AttendanceStatus.HALF_DAY,
    "halfday": AttendanceStatus.HALF_DAY,
}

# first data row in a spreadsheet sits under the heading row
FIRST_DATA_ROW = 2


@dataclass
class RowError:
    row: int
    field: str
    value: Any
    message: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ImportResult:
    batch: str
    imported: int = 0
    skipped: int = 0
    errors: List[RowError] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "batch": self.batch,
            "errors": [e.as_dict() for e in self.errors],
        }


class RowRejected(Exception):
    def __init__(self, field, value, message):
        self.field = field
        self.value = value
        super().__init__(message)


def _clean(value):
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, float) and value != value:  # NaN from spreadsheets
        return None
    return value


def _display(value):
    if value is None or isinstance(value, (str, int, float)):
        return value
    return str(value)


def parse_date(raw) -> Optional[date]:
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        if raw > EXCEL_SERIAL_MIN:
            return EXCEL_EPOCH + timedelta(days=int(raw))
        return None
    text = str(raw).strip()
    if text.isdigit() and int(text) > EXCEL_SERIAL_MIN:
        return EXCEL_EPOCH + timedelta(days=int(text))
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    # "2026-02-03 00:00:00" style cells exported from spreadsheets
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_time(raw) -> Optional[time]:
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.time().replace(microsecond=0)
    if isinstance(raw, time):
        return raw.replace(microsecond=0)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        # Excel stores times as a fraction of a day
        if 0 <= raw < 1:
            minutes = int(round(raw * 24 * 60))
            return time(minutes // 60 % 24, minutes % 60)
        return None
    text = str(raw).strip()
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(text.upper(), fmt).time()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).time().replace(microsecond=0)
    except ValueError:
        return None


def parse_status(raw) -> Optional[str]:
    if raw is None:
        return None
    return STATUS_ALIASES.get(str(raw).strip().lower())


def parse_hours(raw) -> Optional[Decimal]:
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value < 0:
        return None
    return round_money(value)


class EmployeeDirectory:
    """Resolves spreadsheet identifiers to employees: id, then employee code, then e-mail."""

    def __init__(self):
        self._cache: Dict[str, Optional[Employee]] = {}

    def resolve(self, identifier) -> Optional[Employee]:
        if identifier is None:
            return None
        if isinstance(identifier, float) and identifier.is_integer():
            identifier = int(identifier)
        key = str(identifier).strip()
        if key in self._cache:
            return self._cache[key]

        employee = None
        if key.isdigit():
            employee = Employee.objects.filter(pk=int(key)).first()
        if employee is None:
            employee = Employee.objects.filter(employee_code__iexact=key).first()
        if employee is None and "@" in key:
            employee = Employee.objects.filter(user__email__iexact=key).first()

        self._cache[key] = employee
        return employee


class AttendanceImporter:
    """
    Turns parsed spreadsheet rows into attendance records for one upload batch.

    Rows are handled one at a time, each inside its own savepoint: a row that
    fails validation or hits a database error is reported in the result and
    the rest of the upload carries on. Rows with neither an employee nor a
    date are treated as blank lines and ignored.

    A row may state ``status`` (plus optional ``working_hours`` and
    ``overtime_hours``) directly, or give ``clock_in``/``clock_out`` times from
    which hours and status are worked out against the configured shift.
    """

    def __init__(self, uploaded_by=None, config: Optional[PayrollConfiguration] = None, directory=None):
        self.uploaded_by = uploaded_by
        self.config = config or get_payroll_configuration()
        self.directory = directory or EmployeeDirectory()
        self.batch = str(uuid.uuid4())

    def run(self, rows: Iterable[Mapping[str, Any]], first_row: int = FIRST_DATA_ROW) -> ImportResult:
        result = ImportResult(batch=self.batch)
        for row_number, row in enumerate(rows, start=first_row):
            employee_raw = _clean(row.get("employee"))
            date_raw = _clean(row.get("date"))
            if employee_raw is None and date_raw is None:
                continue

            try:
                values = self._validate(row, employee_raw, date_raw)
                with transaction.atomic():
                    self._persist(values)
            except RowRejected as exc:
                result.errors.append(RowError(row_number, exc.field, _display(exc.value), str(exc)))
                result.skipped += 1
                continue
            except IntegrityError:
                result.errors.append(
                    RowError(
                        row_number,
                        "date",
                        _display(date_raw),
                        "Attendance already recorded for this employee on this date.",
                    )
                )
                result.skipped += 1
                continue
            except Exception as exc:
                logger.exception("Attendance import batch %s: row %s failed unexpectedly.", self.batch, row_number)
                result.errors.append(RowError(row_number, "general", None, f"Unexpected error: {exc}"))
                result.skipped += 1
                continue

            result.imported += 1

        logger.info(
            "Attendance import batch %s: %s imported, %s skipped.", self.batch, result.imported, result.skipped
        )
        return result

    def _validate(self, row, employee_raw, date_raw) -> Dict[str, Any]:
        if employee_raw is None:
            raise RowRejected("employee", None, "Employee is required.")
        employee = self.directory.resolve(employee_raw)
        if employee is None:
            raise RowRejected("employee", employee_raw, f'Employee "{employee_raw}" not found.')

        if date_raw is None:
            raise RowRejected("date", None, "Date is required.")
        day = parse_date(date_raw)
        if day is None:
            raise RowRejected(
                "date", date_raw, f'Invalid date "{date_raw}". Expected YYYY-MM-DD or DD/MM/YYYY.'
            )

        clock_in_raw = _clean(row.get("clock_in"))
        clock_out_raw = _clean(row.get("clock_out"))
        clock_in = parse_time(clock_in_raw)
        if clock_in_raw is not None and clock_in is None:
            raise RowRejected("clock_in", clock_in_raw, f'Invalid clock-in time "{clock_in_raw}".')
        clock_out = parse_time(clock_out_raw)
        if clock_out_raw is not None and clock_out is None:
            raise RowRejected("clock_out", clock_out_raw, f'Invalid clock-out time "{clock_out_raw}".')

        status_raw = _clean(row.get("status"))
        if status_raw is not None:
            status = parse_status(status_raw)
            if status is None:
                raise RowRejected(
                    "status",
                    status_raw,
                    f'Invalid status "{status_raw}". Expected one of present, absent, late, half_day.',
                )
            working_hours, overtime_hours = self._explicit_hours(row, status, clock_in, clock_out, day)
        else:
            status, working_hours, overtime_hours = self._derive_from_clock(day, clock_in, clock_out)

        return {
            "employee": employee,
            "date": day,
            "status": status,
            "clock_in": clock_in,
            "clock_out": clock_out,
            "working_hours": working_hours,
            "overtime_hours": overtime_hours,
            "note": str(_clean(row.get("note")) or "")[:255],
        }

    def _explicit_hours(self, row, status, clock_in, clock_out, day):
        hours = {}
        for name in ("working_hours", "overtime_hours"):
            raw = _clean(row.get(name))
            if raw is None:
                hours[name] = None
                continue
            value = parse_hours(raw)
            if value is None:
                raise RowRejected(name, raw, f'Invalid {name.replace("_", " ")} "{raw}". Expected a non-negative number.')
            hours[name] = value

        if status == AttendanceStatus.ABSENT:
            return Decimal("0.00"), Decimal("0.00")
        if hours["working_hours"] is None and hours["overtime_hours"] is None and clock_in and clock_out:
            _, working, overtime = self._derive_from_clock(day, clock_in, clock_out)
            return working, overtime
        return hours["working_hours"] or Decimal("0.00"), hours["overtime_hours"] or Decimal("0.00")

    def _derive_from_clock(self, day, clock_in, clock_out):
        if clock_in is None and clock_out is None:
            return AttendanceStatus.ABSENT, Decimal("0.00"), Decimal("0.00")

        working = Decimal("0.00")
        overtime = Decimal("0.00")
        if clock_in and clock_out:
            started = datetime.combine(day, clock_in)
            finished = datetime.combine(day, clock_out)
            if finished < started:
                finished += timedelta(days=1)
            minutes = Decimal(int((finished - started).total_seconds() // 60))
            working = round_money(minutes / Decimal(60))
            if working > self.config.working_hours_per_day:
                overtime = round_money(working - self.config.working_hours_per_day)
                working = round_money(self.config.working_hours_per_day)

        if working + overtime < self.config.half_day_hours:
            return AttendanceStatus.HALF_DAY, working, overtime

        if clock_in:
            shift_start = datetime.combine(day, self.config.default_shift_start)
            if datetime.combine(day, clock_in) > shift_start + timedelta(minutes=self.config.late_threshold_minutes):
                return AttendanceStatus.LATE, working, overtime

        return AttendanceStatus.PRESENT, working, overtime

    def _persist(self, values):
        employee = values.pop("employee")
        day = values.pop("date")
        values.update(
            source=AttendanceSource.EXCEL_IMPORT,
            upload_batch=self.batch,
            uploaded_by=self.uploaded_by,
        )

        if self.config.duplicate_attendance == DUPLICATE_REPLACE:
            Attendance.objects.update_or_create(employee=employee, date=day, defaults=values)
            return

        if Attendance.objects.filter(employee=employee, date=day).exists():
            raise RowRejected(
                "date",
                day.isoformat(),
                f"Attendance already recorded for employee #{employee.pk} on {day:%Y-%m-%d}.",
            )
        Attendance.objects.create(employee=employee, date=day, **values)
