from datetime import date
from decimal import Decimal
from typing import Dict

from django.db.models import Count, Q, Sum

from .calculator import AttendanceAggregate, round_money, to_decimal
from .models import Attendance
from .status import AttendanceStatus


HALF_DAY_WEIGHT = Decimal("0.5")


def aggregate_period(period_start: date, period_end: date) -> Dict[int, AttendanceAggregate]:
    """
    Summarise attendance per employee for ``[period_start, period_end]``.

    Late days count as presence as well as lateness; a half day adds 0.5 to
    presence. Employees without any row in the range are left out of the
    result. Runs as one grouped query so the figures come from one snapshot.
    """
    rows = (
        Attendance.objects.filter(date__gte=period_start, date__lte=period_end)
        .values("employee_id")
        .annotate(
            present=Count("id", filter=Q(status__in=[AttendanceStatus.PRESENT, AttendanceStatus.LATE])),
            half=Count("id", filter=Q(status=AttendanceStatus.HALF_DAY)),
            absent=Count("id", filter=Q(status=AttendanceStatus.ABSENT)),
            late=Count("id", filter=Q(status=AttendanceStatus.LATE)),
            working_hours=Sum("working_hours"),
            overtime_hours=Sum("overtime_hours"),
        )
        # clears Meta.ordering so it does not leak into GROUP BY
        .order_by("employee_id")
    )

    result: Dict[int, AttendanceAggregate] = {}
    for row in rows:
        result[row["employee_id"]] = AttendanceAggregate(
            employee_id=row["employee_id"],
            present_days=Decimal(row["present"]) + HALF_DAY_WEIGHT * row["half"],
            absent_days=row["absent"],
            late_days=row["late"],
            total_working_hours=round_money(to_decimal(row["working_hours"])),
            total_overtime_hours=round_money(to_decimal(row["overtime_hours"])),
        )
    return result
