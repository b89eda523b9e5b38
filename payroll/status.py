from django.db import models


class AttendanceStatus(models.TextChoices):
    PRESENT = "PRESENT", "Present"
    ABSENT = "ABSENT", "Absent"
    LATE = "LATE", "Late"
    HALF_DAY = "HALF_DAY", "Half day"


class AttendanceSource(models.TextChoices):
    EXCEL_IMPORT = "EXCEL_IMPORT", "Excel import"
    MANUAL = "MANUAL", "Manual"


class PayrollStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    APPROVED = "APPROVED", "Approved"
    PAID = "PAID", "Paid"


# status a record must be in before each lifecycle action
PAYROLL_TRANSITIONS = {
    "approve": (PayrollStatus.DRAFT, PayrollStatus.APPROVED),
    "mark_paid": (PayrollStatus.APPROVED, PayrollStatus.PAID),
}
