import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Department",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, unique=True)),
                ("location", models.CharField(blank=True, max_length=200, null=True)),
            ],
        ),
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("employee_code", models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ("phone", models.CharField(blank=True, max_length=30, null=True)),
                (
                    "department",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="employees",
                        to="payroll.department",
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="employee",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Attendance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PRESENT", "Present"),
                            ("ABSENT", "Absent"),
                            ("LATE", "Late"),
                            ("HALF_DAY", "Half day"),
                        ],
                        default="PRESENT",
                        max_length=20,
                    ),
                ),
                ("clock_in", models.TimeField(blank=True, null=True)),
                ("clock_out", models.TimeField(blank=True, null=True)),
                (
                    "working_hours",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=5,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "overtime_hours",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=5,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        choices=[("EXCEL_IMPORT", "Excel import"), ("MANUAL", "Manual")],
                        default="MANUAL",
                        max_length=20,
                    ),
                ),
                ("upload_batch", models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ("note", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="attendance_records",
                        to="payroll.employee",
                    ),
                ),
                (
                    "uploaded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="uploaded_attendance",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "permissions": [
                    ("upload_attendance", "Can upload attendance spreadsheets"),
                    ("delete_attendance_batch", "Can delete an attendance upload batch"),
                ],
                "indexes": [models.Index(fields=["date", "status"], name="payroll_att_date_8e2c1b_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("employee", "date"), name="uniq_attendance_employee_date"),
                    models.CheckConstraint(
                        condition=models.Q(("working_hours__gte", 0), ("overtime_hours__gte", 0)),
                        name="attendance_hours_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payroll",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("period_start", models.DateField()),
                ("period_end", models.DateField()),
                ("total_working_days", models.PositiveSmallIntegerField(default=0)),
                ("total_present_days", models.DecimalField(decimal_places=1, default=0, max_digits=6)),
                ("total_absent_days", models.PositiveSmallIntegerField(default=0)),
                ("total_late_days", models.PositiveSmallIntegerField(default=0)),
                ("total_working_hours", models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                ("total_overtime_hours", models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                (
                    "base_salary",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("hourly_rate", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("overtime_pay", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                (
                    "deductions",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "net_salary",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("DRAFT", "Draft"), ("APPROVED", "Approved"), ("PAID", "Paid")],
                        default="DRAFT",
                        max_length=10,
                    ),
                ),
                ("note", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="approved_payrolls",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payrolls",
                        to="payroll.employee",
                    ),
                ),
                (
                    "generated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="generated_payrolls",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-period_start", "-created_at"],
                "permissions": [
                    ("generate_payroll", "Can generate payroll from attendance"),
                    ("approve_payroll", "Can approve payroll and mark it paid"),
                ],
                "indexes": [
                    models.Index(fields=["status"], name="payroll_pay_status_4f1a9d_idx"),
                    models.Index(fields=["period_start", "period_end"], name="payroll_pay_period__b7d03e_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("employee", "period_start", "period_end"), name="uniq_payroll_employee_period"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("period_end__gte", models.F("period_start"))),
                        name="payroll_period_ordered",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("net_salary__gte", 0)), name="payroll_net_salary_non_negative"
                    ),
                ],
            },
        ),
    ]
