from rest_framework import status
from rest_framework.exceptions import APIException


class PayrollLockedError(Exception):
    """An approved or paid record is in the way of a regeneration."""

    def __init__(self, current_status):
        self.current_status = current_status
        super().__init__(
            f"payroll is already {str(current_status).lower()}; regenerate with reset_locked to overwrite it"
        )


class PeriodOverlapError(Exception):
    def __init__(self, period_start, period_end):
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(f"period overlaps existing payroll {period_start:%Y-%m-%d} to {period_end:%Y-%m-%d}")


class StateConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Payroll record is not in a state that allows this action."
    default_code = "state_conflict"

    def __init__(self, conflict):
        super().__init__(detail={"detail": conflict.message, "current_status": conflict.current})
