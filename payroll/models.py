from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q

from .status import AttendanceSource, AttendanceStatus, PayrollStatus


class Department(models.Model):
    name = models.CharField(max_length=200, unique=True)
    location = models.CharField(max_length=200, blank=True, null=True)

    def __str__(self):
        return self.name


class Employee(models.Model):
    # Link employee record to login account
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="employee",
    )

    department = models.ForeignKey(
        Department,
        on_delete=models.PROTECT,  # prevent deleting dept with employees
        related_name="employees",
        null=True,
        blank=True,
    )

    # identifier used by attendance spreadsheets (badge / payroll number)
    employee_code = models.CharField(max_length=50, unique=True, null=True, blank=True)
    phone = models.CharField(max_length=30, blank=True, null=True)

    def __str__(self):
        return self.employee_code or f"employee #{self.pk}"


class Attendance(models.Model):
    employee = models.ForeignKey(
        "payroll.Employee",
        on_delete=models.PROTECT,
        related_name="attendance_records",
    )
    date = models.DateField()
    status = models.CharField(max_length=20, choices=AttendanceStatus.choices, default=AttendanceStatus.PRESENT)

    clock_in = models.TimeField(null=True, blank=True)
    clock_out = models.TimeField(null=True, blank=True)
    working_hours = models.DecimalField(
        max_digits=5, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    overtime_hours = models.DecimalField(
        max_digits=5, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )

    source = models.CharField(max_length=20, choices=AttendanceSource.choices, default=AttendanceSource.MANUAL)
    upload_batch = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="uploaded_attendance",
    )
    note = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["employee", "date"], name="uniq_attendance_employee_date"),
            models.CheckConstraint(
                condition=Q(working_hours__gte=0) & Q(overtime_hours__gte=0),
                name="attendance_hours_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["date", "status"], name="payroll_att_date_8e2c1b_idx"),
        ]
        permissions = [
            ("upload_attendance", "Can upload attendance spreadsheets"),
            ("delete_attendance_batch", "Can delete an attendance upload batch"),
        ]

    def __str__(self):
        return f"{self.employee_id} - {self.date} - {self.status}"


class Payroll(models.Model):
    employee = models.ForeignKey(
        "payroll.Employee",
        on_delete=models.PROTECT,
        related_name="payrolls",
    )

    period_start = models.DateField()
    period_end = models.DateField()

    total_working_days = models.PositiveSmallIntegerField(default=0)
    total_present_days = models.DecimalField(max_digits=6, decimal_places=1, default=0)
    total_absent_days = models.PositiveSmallIntegerField(default=0)
    total_late_days = models.PositiveSmallIntegerField(default=0)
    total_working_hours = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    total_overtime_hours = models.DecimalField(max_digits=7, decimal_places=2, default=0)

    base_salary = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    hourly_rate = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    overtime_pay = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    deductions = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    net_salary = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])

    status = models.CharField(max_length=10, choices=PayrollStatus.choices, default=PayrollStatus.DRAFT)
    generated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="generated_payrolls",
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="approved_payrolls",
    )
    note = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-period_start", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "period_start", "period_end"], name="uniq_payroll_employee_period"
            ),
            models.CheckConstraint(condition=Q(period_end__gte=F("period_start")), name="payroll_period_ordered"),
            models.CheckConstraint(condition=Q(net_salary__gte=0), name="payroll_net_salary_non_negative"),
        ]
        indexes = [
            models.Index(fields=["status"], name="payroll_pay_status_4f1a9d_idx"),
            models.Index(fields=["period_start", "period_end"], name="payroll_pay_period__b7d03e_idx"),
        ]
        permissions = [
            ("generate_payroll", "Can generate payroll from attendance"),
            ("approve_payroll", "Can approve payroll and mark it paid"),
        ]

    def __str__(self):
        return f"{self.employee_id} {self.period_start:%Y-%m-%d}..{self.period_end:%Y-%m-%d}"
