import io
from datetime import date, time
from decimal import Decimal
from unittest import mock

import pandas as pd
from django.contrib.auth.models import Group
from django.core.exceptions import ImproperlyConfigured
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.http import Http404
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APITestCase

from accounts.groups import setup_payroll_groups
from accounts.models import User
from .aggregation import aggregate_period
from .calculator import AttendanceAggregate, calculate
from .conf import PayrollConfiguration, get_payroll_configuration
from .importer import AttendanceImporter, parse_date, parse_status, parse_time
from .lifecycle import approve_payroll, mark_payroll_paid
from .models import Department, Employee, Attendance, Payroll
from .services import EMPTY_PERIOD_MESSAGE, PayrollGenerator, delete_batch, period_summary, upload_history
from .spreadsheet import read_attendance_rows
from .status import AttendanceSource, AttendanceStatus, PayrollStatus


# ----------------------------
# Pagination helper
# ----------------------------

class PaginationMixin:
    """
    Works with paginated and non-paginated responses.
    After you enabled pagination, res.data is a dict with 'results'.
    """
    def results(self, res):
        return res.data["results"] if isinstance(res.data, dict) and "results" in res.data else res.data


# ----------------------------
# Fixtures
# ----------------------------

def make_config(**values) -> PayrollConfiguration:
    return PayrollConfiguration.from_dict(values)


def make_employee(username, department=None, code=None, role=User.Role.EMPLOYEE) -> Employee:
    user = User.objects.create_user(
        username=username, password="Pass12345!", role=role, email=f"{username}@test.com"
    )
    return Employee.objects.create(user=user, department=department, employee_code=code)


def add_attendance(employee, day, status_, hours="8", overtime="0"):
    return Attendance.objects.create(
        employee=employee,
        date=day,
        status=status_,
        working_hours=Decimal(hours),
        overtime_hours=Decimal(overtime),
    )


def csv_upload(text, name="attendance.csv"):
    return SimpleUploadedFile(name, text.encode("utf-8"), content_type="text/csv")


class PayrollPermsTestMixin:
    """
    Seeds the default groups once per TestCase class and hands them out in setUp.
    """
    @classmethod
    def setUpTestData(cls):
        setup_payroll_groups()

    def assign_group(self, user, name):
        user.groups.add(Group.objects.get(name=name))


# -----------------
# Calculator
# -----------------

class CalculatorTests(SimpleTestCase):
    def aggregate(self, absent=0, overtime="0"):
        return AttendanceAggregate(
            employee_id=1,
            present_days=Decimal("20"),
            absent_days=absent,
            late_days=0,
            total_working_hours=Decimal("160"),
            total_overtime_hours=Decimal(overtime),
        )

    def test_reference_figures(self):
        config = make_config(WORKING_DAYS_PER_MONTH=26, WORKING_HOURS_PER_DAY=8, OVERTIME_MULTIPLIER="1.5")
        result = calculate(self.aggregate(absent=2, overtime="5"), Decimal("30000"), config)

        self.assertEqual(result.hourly_rate, Decimal("144.23"))
        self.assertEqual(result.overtime_pay, Decimal("1081.73"))
        self.assertEqual(result.daily_rate, Decimal("1153.85"))
        # two rounded daily rates
        self.assertEqual(result.deductions, Decimal("2307.70"))
        self.assertEqual(result.net_salary, Decimal("28774.03"))

    def test_no_deduction_when_disabled(self):
        config = make_config(WORKING_DAYS_PER_MONTH=26, DEDUCT_ABSENCES=False)
        result = calculate(self.aggregate(absent=3), Decimal("30000"), config)
        self.assertEqual(result.deductions, Decimal("0.00"))
        self.assertEqual(result.net_salary, Decimal("30000.00"))

    def test_no_deduction_without_absences(self):
        result = calculate(self.aggregate(absent=0), Decimal("22000"), make_config())
        self.assertEqual(result.deductions, Decimal("0.00"))
        self.assertEqual(result.daily_rate, Decimal("1000.00"))

    def test_net_salary_never_negative(self):
        result = calculate(self.aggregate(absent=40), Decimal("22000"), make_config())
        self.assertEqual(result.deductions, Decimal("40000.00"))
        self.assertEqual(result.net_salary, Decimal("0.00"))

    def test_zero_base_salary(self):
        result = calculate(self.aggregate(absent=1, overtime="3"), Decimal("0"), make_config())
        self.assertEqual(result.hourly_rate, Decimal("0.00"))
        self.assertEqual(result.net_salary, Decimal("0.00"))


# -----------------
# Configuration
# -----------------

class ConfigurationTests(SimpleTestCase):
    def test_defaults(self):
        config = make_config()
        self.assertEqual(config.working_days_per_month, 22)
        self.assertEqual(config.working_hours_per_day, Decimal("8"))
        self.assertEqual(config.overtime_multiplier, Decimal("1.5"))
        self.assertEqual(config.default_shift_start, time(9, 0))
        self.assertTrue(config.deduct_absences)
        self.assertEqual(config.duplicate_attendance, "skip")

    def test_env_style_strings_are_parsed(self):
        config = make_config(WORKING_DAYS_PER_MONTH="26", DEDUCT_ABSENCES="false", DUPLICATE_ATTENDANCE="Replace")
        self.assertEqual(config.working_days_per_month, 26)
        self.assertFalse(config.deduct_absences)
        self.assertEqual(config.duplicate_attendance, "replace")

    def test_invalid_values_are_rejected(self):
        for values in (
            {"WORKING_DAYS_PER_MONTH": 0},
            {"WORKING_HOURS_PER_DAY": "0"},
            {"OVERTIME_MULTIPLIER": "0.5"},
            {"DEFAULT_BASE_SALARY": "-1"},
            {"DUPLICATE_ATTENDANCE": "merge"},
            {"DEFAULT_SHIFT_START": "nine"},
            {"WORKING_DAYS_PER_MONTH": "many"},
            {"WORKING_HOURS_PER_DAY": "nan"},
            {"OVERTIME_MULTIPLIER": "Infinity"},
            {"DEFAULT_BASE_SALARY": "-inf"},
        ):
            with self.subTest(values=values):
                with self.assertRaises(ImproperlyConfigured):
                    make_config(**values)

    @override_settings(PAYROLL={"CURRENCY": "USD", "WORKING_DAYS_PER_MONTH": "20"})
    def test_read_from_settings(self):
        data = get_payroll_configuration().as_dict()
        self.assertEqual(data["currency"], "USD")
        self.assertEqual(data["working_days_per_month"], 20)
        self.assertEqual(data["default_shift_end"], "17:00")
        self.assertEqual(data["overtime_multiplier"], "1.5")


# -----------------
# Cell parsing
# -----------------

class CellParsingTests(SimpleTestCase):
    def test_dates(self):
        self.assertEqual(parse_date("2026-02-03"), date(2026, 2, 3))
        # day first wins for ambiguous slashes
        self.assertEqual(parse_date("02/03/2026"), date(2026, 3, 2))
        self.assertEqual(parse_date("12/31/2026"), date(2026, 12, 31))
        self.assertEqual(parse_date("2026-02-03 00:00:00"), date(2026, 2, 3))
        self.assertEqual(parse_date(46056), date(2026, 2, 3))
        self.assertIsNone(parse_date("31/31/2026"))
        self.assertIsNone(parse_date(12))

    def test_times(self):
        self.assertEqual(parse_time("09:05"), time(9, 5))
        self.assertEqual(parse_time("5:30 pm"), time(17, 30))
        self.assertEqual(parse_time(0.375), time(9, 0))
        self.assertIsNone(parse_time("25:99"))

    def test_statuses(self):
        self.assertEqual(parse_status("Present"), AttendanceStatus.PRESENT)
        self.assertEqual(parse_status(" half day "), AttendanceStatus.HALF_DAY)
        self.assertEqual(parse_status("HALF_DAY"), AttendanceStatus.HALF_DAY)
        self.assertIsNone(parse_status("holiday"))


# -----------------
# Aggregation
# -----------------

class AggregationTests(TestCase):
    def setUp(self):
        self.emp = make_employee("agg1", code="A-1")
        self.other = make_employee("agg2", code="A-2")
        self.idle = make_employee("agg3", code="A-3")

        add_attendance(self.emp, date(2026, 2, 2), AttendanceStatus.PRESENT)
        add_attendance(self.emp, date(2026, 2, 3), AttendanceStatus.LATE, overtime="1.5")
        add_attendance(self.emp, date(2026, 2, 4), AttendanceStatus.HALF_DAY, hours="4")
        add_attendance(self.emp, date(2026, 2, 5), AttendanceStatus.ABSENT, hours="0")
        # outside the period
        add_attendance(self.emp, date(2026, 3, 1), AttendanceStatus.PRESENT, overtime="9")
        add_attendance(self.other, date(2026, 2, 28), AttendanceStatus.PRESENT)

    def test_per_employee_totals(self):
        result = aggregate_period(date(2026, 2, 1), date(2026, 2, 28))
        agg = result[self.emp.id]

        self.assertEqual(agg.present_days, Decimal("2.5"))
        self.assertEqual(agg.late_days, 1)
        self.assertEqual(agg.absent_days, 1)
        self.assertEqual(agg.total_working_hours, Decimal("20.00"))
        self.assertEqual(agg.total_overtime_hours, Decimal("1.50"))

    def test_range_is_inclusive_and_idle_employees_left_out(self):
        result = aggregate_period(date(2026, 2, 2), date(2026, 2, 28))
        self.assertEqual(set(result), {self.emp.id, self.other.id})
        self.assertNotIn(self.idle.id, result)
        self.assertEqual(result[self.other.id].present_days, Decimal("1"))

    def test_empty_period(self):
        self.assertEqual(aggregate_period(date(2025, 1, 1), date(2025, 1, 31)), {})


# -----------------
# Importer
# -----------------

class AttendanceImporterTests(TestCase):
    def setUp(self):
        self.uploader = User.objects.create_user(username="hr_imp", password="Pass12345!", role=User.Role.HR)
        self.emp = make_employee("imp1", code="E-100")
        self.other = make_employee("imp2", code="E-200")

    def importer(self, **config):
        return AttendanceImporter(uploaded_by=self.uploader, config=make_config(**config))

    def test_partial_success_reports_unknown_employees(self):
        rows = []
        for i in range(10):
            employee = "NOPE" if i in (3, 7) else "E-100"
            rows.append({"employee": employee, "date": f"2026-02-{i + 1:02d}", "status": "present"})

        result = self.importer().run(rows)

        self.assertEqual(result.imported, 8)
        self.assertEqual(result.skipped, 2)
        self.assertEqual([(e.row, e.field) for e in result.errors], [(5, "employee"), (9, "employee")])
        self.assertEqual(result.errors[0].value, "NOPE")
        self.assertEqual(Attendance.objects.filter(employee=self.emp).count(), 8)

    def test_rows_share_one_batch(self):
        result = self.importer().run([
            {"employee": "E-100", "date": "2026-02-02", "status": "present"},
            {"employee": "e-200", "date": "2026-02-02", "status": "absent", "working_hours": "8"},
        ])

        self.assertEqual(result.imported, 2)
        records = Attendance.objects.filter(upload_batch=result.batch)
        self.assertEqual(records.count(), 2)
        self.assertTrue(all(r.source == AttendanceSource.EXCEL_IMPORT for r in records))
        self.assertTrue(all(r.uploaded_by_id == self.uploader.id for r in records))
        # absent rows carry no hours
        self.assertEqual(records.get(employee=self.other).working_hours, Decimal("0.00"))

    def test_employee_resolved_by_id_and_email(self):
        result = self.importer().run([
            {"employee": self.emp.id, "date": "2026-02-02", "status": "present"},
            {"employee": "IMP2@test.com", "date": "2026-02-02", "status": "present"},
        ])
        self.assertEqual(result.imported, 2)
        self.assertEqual(result.errors, [])

    def test_field_errors(self):
        result = self.importer().run([
            {"employee": None, "date": "2026-02-02", "status": "present"},
            {"employee": "E-100", "date": "31/31/2026", "status": "present"},
            {"employee": "E-100", "date": None, "status": "present"},
            {"employee": "E-100", "date": "2026-02-03", "status": "holiday"},
            {"employee": "E-100", "date": "2026-02-04", "status": "present", "working_hours": "-2"},
            {"employee": "E-100", "date": "2026-02-05", "clock_in": "late-ish"},
        ])

        self.assertEqual(result.imported, 0)
        self.assertEqual(
            [(e.row, e.field) for e in result.errors],
            [(2, "employee"), (3, "date"), (4, "date"), (5, "status"), (6, "working_hours"), (7, "clock_in")],
        )
        self.assertEqual(Attendance.objects.count(), 0)

    def test_blank_rows_ignored_but_numbered(self):
        result = self.importer().run([
            {"employee": "E-100", "date": "2026-02-02", "status": "present"},
            {"employee": "  ", "date": None},
            {"employee": "GHOST", "date": "2026-02-02", "status": "present"},
        ])

        self.assertEqual(result.imported, 1)
        self.assertEqual(result.skipped, 1)
        self.assertEqual(result.errors[0].row, 4)

    def test_status_derived_from_clock_times(self):
        result = self.importer().run([
            {"employee": "E-100", "date": "2026-02-02", "clock_in": "09:05", "clock_out": "18:30"},
            {"employee": "E-100", "date": "2026-02-03", "clock_in": "09:30", "clock_out": "17:00"},
            {"employee": "E-100", "date": "2026-02-04", "clock_in": "09:00", "clock_out": "12:00"},
            {"employee": "E-100", "date": "2026-02-05"},
            {"employee": "E-100", "date": "2026-02-06", "clock_in": "22:00", "clock_out": "06:00"},
        ])
        self.assertEqual(result.imported, 5)

        by_day = {a.date.day: a for a in Attendance.objects.filter(employee=self.emp)}
        self.assertEqual(by_day[2].status, AttendanceStatus.PRESENT)
        self.assertEqual(by_day[2].working_hours, Decimal("8.00"))
        self.assertEqual(by_day[2].overtime_hours, Decimal("1.42"))
        self.assertEqual(by_day[3].status, AttendanceStatus.LATE)
        self.assertEqual(by_day[3].working_hours, Decimal("7.50"))
        self.assertEqual(by_day[4].status, AttendanceStatus.HALF_DAY)
        self.assertEqual(by_day[5].status, AttendanceStatus.ABSENT)
        # overnight shift
        self.assertEqual(by_day[6].working_hours, Decimal("8.00"))
        self.assertEqual(by_day[6].clock_in, time(22, 0))

    def test_explicit_status_keeps_given_hours(self):
        self.importer().run([
            {"employee": "E-100", "date": "2026-02-02", "status": "late", "working_hours": "7.25", "overtime_hours": "1"},
        ])
        record = Attendance.objects.get(employee=self.emp)
        self.assertEqual(record.status, AttendanceStatus.LATE)
        self.assertEqual(record.working_hours, Decimal("7.25"))
        self.assertEqual(record.overtime_hours, Decimal("1.00"))

    def test_duplicate_skipped_by_default(self):
        first = self.importer().run([{"employee": "E-100", "date": "2026-02-02", "status": "present"}])
        second = self.importer().run([{"employee": "E-100", "date": "2026-02-02", "status": "absent"}])

        self.assertEqual(second.imported, 0)
        self.assertEqual(second.errors[0].field, "date")
        record = Attendance.objects.get(employee=self.emp)
        self.assertEqual(record.status, AttendanceStatus.PRESENT)
        self.assertEqual(record.upload_batch, first.batch)

    def test_duplicate_replaced_when_configured(self):
        self.importer().run([{"employee": "E-100", "date": "2026-02-02", "status": "present"}])
        second = self.importer(DUPLICATE_ATTENDANCE="replace").run(
            [{"employee": "E-100", "date": "2026-02-02", "status": "absent"}]
        )

        self.assertEqual(second.imported, 1)
        record = Attendance.objects.get(employee=self.emp)
        self.assertEqual(record.status, AttendanceStatus.ABSENT)
        self.assertEqual(record.upload_batch, second.batch)

    def test_result_payload(self):
        result = self.importer().run([{"employee": "X", "date": "2026-02-02", "status": "present"}])
        data = result.as_dict()
        self.assertEqual(set(data), {"imported", "skipped", "batch", "errors"})
        self.assertEqual(
            data["errors"][0], {"row": 2, "field": "employee", "value": "X", "message": 'Employee "X" not found.'}
        )


# -----------------
# Spreadsheet reader
# -----------------

class SpreadsheetReaderTests(SimpleTestCase):
    def test_csv_headings_are_mapped(self):
        upload = csv_upload(
            "Employee Code, Date ,Status,Hours,Remarks\n"
            "E-100,2026-02-02,Present,8,\n"
            ",,,,\n"
        )
        rows = read_attendance_rows(upload)

        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]["employee"], "E-100")
        self.assertEqual(rows[0]["working_hours"], "8")
        self.assertNotIn("Remarks", rows[0])

    def test_xlsx_is_read(self):
        buf = io.BytesIO()
        pd.DataFrame(
            {"employee_id": ["E-100", "E-200"], "date": ["2026-02-02", None], "status": ["present", "absent"]}
        ).to_excel(buf, index=False)
        upload = SimpleUploadedFile("attendance.xlsx", buf.getvalue())

        rows = read_attendance_rows(upload)
        self.assertEqual(rows[0]["employee"], "E-100")
        self.assertIsNone(rows[1]["date"])

    def test_missing_required_columns(self):
        with self.assertRaises(ValidationError):
            read_attendance_rows(csv_upload("name,status\nx,present\n"))

    def test_unsupported_extension(self):
        with self.assertRaises(ValidationError):
            read_attendance_rows(csv_upload("employee,date\n", name="attendance.txt"))


# -----------------
# Generator
# -----------------

class PayrollGeneratorTests(TestCase):
    def setUp(self):
        self.hr = User.objects.create_user(username="hr_gen", password="Pass12345!", role=User.Role.HR)
        self.emp = make_employee("gen1", code="G-1")
        self.other = make_employee("gen2", code="G-2")
        self.config = make_config(WORKING_DAYS_PER_MONTH=26, DEFAULT_BASE_SALARY=30000)
        self.start, self.end = date(2026, 2, 1), date(2026, 2, 28)

        add_attendance(self.emp, date(2026, 2, 2), AttendanceStatus.PRESENT)
        add_attendance(self.emp, date(2026, 2, 3), AttendanceStatus.PRESENT)
        add_attendance(self.emp, date(2026, 2, 4), AttendanceStatus.LATE, overtime="2")
        add_attendance(self.emp, date(2026, 2, 5), AttendanceStatus.ABSENT, hours="0")
        add_attendance(self.emp, date(2026, 2, 6), AttendanceStatus.HALF_DAY, hours="4")

    def generate(self, config=None, **kwargs):
        return PayrollGenerator(config or self.config).generate(self.start, self.end, generated_by=self.hr, **kwargs)

    def test_generates_draft_record(self):
        result = self.generate()

        self.assertEqual(result.as_dict(), {"generated": 1, "errors": []})
        record = Payroll.objects.get(employee=self.emp)
        self.assertEqual(record.status, PayrollStatus.DRAFT)
        self.assertEqual(record.generated_by, self.hr)
        self.assertEqual(record.total_working_days, 26)
        self.assertEqual(record.total_present_days, Decimal("3.5"))
        self.assertEqual(record.total_absent_days, 1)
        self.assertEqual(record.total_late_days, 1)
        self.assertEqual(record.total_working_hours, Decimal("28.00"))
        self.assertEqual(record.total_overtime_hours, Decimal("2.00"))
        self.assertEqual(record.base_salary, Decimal("30000.00"))
        self.assertEqual(record.hourly_rate, Decimal("144.23"))
        self.assertEqual(record.overtime_pay, Decimal("432.69"))
        self.assertEqual(record.deductions, Decimal("1153.85"))
        self.assertEqual(record.net_salary, Decimal("29278.84"))

    def test_regeneration_updates_in_place(self):
        self.generate()
        first = Payroll.objects.get(employee=self.emp)
        add_attendance(self.emp, date(2026, 2, 9), AttendanceStatus.ABSENT, hours="0")

        result = self.generate()

        self.assertEqual(result.generated, 1)
        self.assertEqual(Payroll.objects.count(), 1)
        record = Payroll.objects.get(employee=self.emp)
        self.assertEqual(record.pk, first.pk)
        self.assertEqual(record.total_absent_days, 2)
        self.assertEqual(record.deductions, Decimal("2307.70"))

    def test_empty_period(self):
        self.start, self.end = date(2025, 1, 1), date(2025, 1, 31)
        result = self.generate()
        self.assertEqual(result.generated, 0)
        self.assertEqual(result.errors, [EMPTY_PERIOD_MESSAGE])
        self.assertFalse(Payroll.objects.exists())

    def test_inverted_period_rejected(self):
        self.start, self.end = self.end, self.start
        with self.assertRaises(ValidationError):
            self.generate()

    def test_base_salary_override(self):
        self.generate(base_salary_override=Decimal("26000"))
        record = Payroll.objects.get(employee=self.emp)
        self.assertEqual(record.base_salary, Decimal("26000.00"))
        self.assertEqual(record.deductions, Decimal("1000.00"))

    def test_approved_record_is_not_reset(self):
        self.generate()
        record = Payroll.objects.get(employee=self.emp)
        approve_payroll(record.pk, approved_by=self.hr)

        result = self.generate()

        self.assertEqual(result.generated, 0)
        self.assertEqual(len(result.errors), 1)
        self.assertTrue(result.errors[0].startswith(f"employee #{self.emp.id}: "))
        record.refresh_from_db()
        self.assertEqual(record.status, PayrollStatus.APPROVED)

    def test_reset_locked_overwrites_approved_record(self):
        self.generate()
        record = Payroll.objects.get(employee=self.emp)
        approve_payroll(record.pk, approved_by=self.hr)

        result = self.generate(reset_locked=True)

        self.assertEqual(result.generated, 1)
        record.refresh_from_db()
        self.assertEqual(record.status, PayrollStatus.DRAFT)
        self.assertIsNone(record.approved_by)

    def test_overlapping_period_refused(self):
        self.generate()
        add_attendance(self.emp, date(2026, 3, 2), AttendanceStatus.PRESENT)
        self.start, self.end = date(2026, 2, 15), date(2026, 3, 15)

        result = self.generate()

        self.assertEqual(result.generated, 0)
        self.assertIn("overlaps", result.errors[0])
        self.assertEqual(Payroll.objects.count(), 1)

    def test_overlapping_period_allowed_when_configured(self):
        self.generate()
        add_attendance(self.emp, date(2026, 3, 2), AttendanceStatus.PRESENT)
        self.start, self.end = date(2026, 2, 15), date(2026, 3, 15)

        result = self.generate(config=self.config.with_overrides(forbid_overlapping_periods=False))

        self.assertEqual(result.generated, 1)
        self.assertEqual(Payroll.objects.count(), 2)

    def test_one_failing_employee_does_not_block_others(self):
        add_attendance(self.other, date(2026, 2, 2), AttendanceStatus.PRESENT)
        failing_id = self.emp.id

        def flaky(aggregate, base_salary, config):
            if aggregate.employee_id == failing_id:
                raise RuntimeError("boom")
            return calculate(aggregate, base_salary, config)

        with mock.patch("payroll.services.calculate", side_effect=flaky):
            with self.assertLogs("payroll.services", level="ERROR"):
                result = self.generate()

        self.assertEqual(result.generated, 1)
        self.assertEqual(result.errors, [f"employee #{failing_id}: boom"])
        self.assertFalse(Payroll.objects.filter(employee=self.emp).exists())
        self.assertTrue(Payroll.objects.filter(employee=self.other).exists())

    def test_write_failure_rolls_back_only_that_employee(self):
        add_attendance(self.other, date(2026, 2, 2), AttendanceStatus.PRESENT)
        self.generate()
        before = Payroll.objects.get(employee=self.emp)
        add_attendance(self.emp, date(2026, 2, 9), AttendanceStatus.ABSENT, hours="0")
        add_attendance(self.other, date(2026, 2, 3), AttendanceStatus.ABSENT, hours="0")
        original_save = Payroll.save

        def failing_save(record, *args, **kwargs):
            # the row hits the database before the fault, so only a rollback undoes it
            original_save(record, *args, **kwargs)
            if record.employee_id == self.emp.id:
                raise DatabaseError("disk full")

        with mock.patch.object(Payroll, "save", autospec=True, side_effect=failing_save):
            with self.assertLogs("payroll.services", level="ERROR"):
                result = self.generate()

        self.assertEqual(result.generated, 1)
        self.assertEqual(result.errors, [f"employee #{self.emp.id}: disk full"])

        record = Payroll.objects.get(employee=self.emp)
        self.assertEqual(record.total_absent_days, before.total_absent_days)
        self.assertEqual(record.deductions, before.deductions)
        self.assertEqual(record.net_salary, before.net_salary)
        self.assertEqual(record.updated_at, before.updated_at)

        other = Payroll.objects.get(employee=self.other)
        self.assertEqual(other.total_absent_days, 1)
        self.assertEqual(other.deductions, Decimal("1153.85"))

    def test_regeneration_without_changes_is_identical(self):
        figures = [
            "total_working_days",
            "total_present_days",
            "total_absent_days",
            "total_late_days",
            "total_working_hours",
            "total_overtime_hours",
            "base_salary",
            "hourly_rate",
            "overtime_pay",
            "deductions",
            "net_salary",
            "status",
        ]
        self.generate()
        first = Payroll.objects.values("id", *figures).get(employee=self.emp)

        result = self.generate()

        self.assertEqual(result.as_dict(), {"generated": 1, "errors": []})
        self.assertEqual(Payroll.objects.count(), 1)
        self.assertEqual(Payroll.objects.values("id", *figures).get(employee=self.emp), first)


# -----------------
# Lifecycle
# -----------------

class PayrollLifecycleTests(TestCase):
    def setUp(self):
        self.approver = User.objects.create_user(username="boss", password="Pass12345!", role=User.Role.ADMIN)
        self.emp = make_employee("life1")
        self.record = Payroll.objects.create(
            employee=self.emp,
            period_start=date(2026, 2, 1),
            period_end=date(2026, 2, 28),
            base_salary=Decimal("22000"),
            net_salary=Decimal("22000"),
        )

    def test_draft_to_approved_to_paid(self):
        result = approve_payroll(self.record.pk, approved_by=self.approver)
        self.assertTrue(result.ok)
        self.assertEqual(result.record.status, PayrollStatus.APPROVED)
        self.assertEqual(result.record.approved_by, self.approver)

        result = mark_payroll_paid(self.record.pk)
        self.assertTrue(result.ok)
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, PayrollStatus.PAID)

    def test_approve_twice_is_a_conflict(self):
        approve_payroll(self.record.pk, approved_by=self.approver)
        result = approve_payroll(self.record.pk, approved_by=None)

        self.assertFalse(result.ok)
        self.assertEqual(result.conflict.current, PayrollStatus.APPROVED)
        self.assertEqual(
            result.conflict.message, "Only draft payroll records can be approved. Current status: APPROVED"
        )
        self.record.refresh_from_db()
        self.assertEqual(self.record.approved_by, self.approver)

    def test_paid_cannot_be_approved(self):
        Payroll.objects.filter(pk=self.record.pk).update(status=PayrollStatus.PAID)
        result = approve_payroll(self.record.pk, approved_by=self.approver)
        self.assertEqual(result.conflict.current, PayrollStatus.PAID)

    def test_draft_cannot_be_marked_paid(self):
        result = mark_payroll_paid(self.record.pk)
        self.assertFalse(result.ok)
        self.assertEqual(result.conflict.expected, PayrollStatus.APPROVED)
        self.assertIn("marked as paid", result.conflict.message)
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, PayrollStatus.DRAFT)

    def test_unknown_record(self):
        with self.assertRaises(Http404):
            approve_payroll(999999, approved_by=self.approver)
        with self.assertRaises(Http404):
            mark_payroll_paid(999999)


# -----------------
# Reporting
# -----------------

class ReportingTests(TestCase):
    def setUp(self):
        self.emp = make_employee("rep1", code="R-1")
        self.uploader = User.objects.create_user(username="rep_hr", password="Pass12345!", role=User.Role.HR)

    def test_period_summary_counts_contained_periods(self):
        for start, end, net, status_ in (
            (date(2026, 1, 1), date(2026, 1, 31), "1000.00", PayrollStatus.PAID),
            (date(2026, 2, 1), date(2026, 2, 28), "2000.00", PayrollStatus.APPROVED),
            (date(2026, 3, 1), date(2026, 3, 31), "4000.00", PayrollStatus.DRAFT),
        ):
            Payroll.objects.create(
                employee=self.emp, period_start=start, period_end=end,
                base_salary=Decimal(net), net_salary=Decimal(net), status=status_,
            )

        summary = period_summary(date(2026, 1, 1), date(2026, 2, 28))

        self.assertEqual(summary["total_records"], 2)
        self.assertEqual(summary["total_net"], Decimal("3000.00"))
        self.assertEqual(summary["paid_count"], 1)
        self.assertEqual(summary["approved_count"], 1)
        self.assertEqual(summary["draft_count"], 0)

    def test_upload_history_and_batch_delete(self):
        result = AttendanceImporter(uploaded_by=self.uploader, config=make_config()).run([
            {"employee": "R-1", "date": "2026-02-02", "status": "present"},
            {"employee": "R-1", "date": "2026-02-03", "status": "present"},
        ])
        add_attendance(self.emp, date(2026, 2, 4), AttendanceStatus.PRESENT)

        history = list(upload_history())
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["upload_batch"], result.batch)
        self.assertEqual(history[0]["record_count"], 2)
        self.assertEqual(history[0]["employee_count"], 1)
        self.assertEqual(history[0]["period_start"], date(2026, 2, 2))
        self.assertEqual(history[0]["period_end"], date(2026, 2, 3))
        self.assertEqual(history[0]["uploaded_by"], "rep_hr")

        self.assertEqual(delete_batch(result.batch), 2)
        # manual rows stay
        self.assertEqual(Attendance.objects.count(), 1)
        self.assertEqual(delete_batch(result.batch), 0)


# -----------------
# Attendance API Tests
# -----------------

class AttendanceAPITests(PayrollPermsTestMixin, PaginationMixin, APITestCase):
    def setUp(self):
        self.dept_a = Department.objects.create(name="Dept A", location="Floor 1")
        self.dept_b = Department.objects.create(name="Dept B", location="Floor 2")

        self.admin = User.objects.create_user(
            username="admin_att", password="Pass12345!", role=User.Role.ADMIN, email="admin_att@test.com"
        )
        self.hr = User.objects.create_user(
            username="hr_att", password="Pass12345!", role=User.Role.HR, email="hr_att@test.com"
        )
        self.manager_emp = make_employee("mgr_att", department=self.dept_a, code="M-1", role=User.Role.MANAGER)
        self.emp_a = make_employee("emp_att", department=self.dept_a, code="A-1")
        self.emp_b = make_employee("emp2_att", department=self.dept_b, code="B-1")

        self.assign_group(self.admin, "Admin")
        self.assign_group(self.hr, "HR Staff")
        self.assign_group(self.manager_emp.user, "Manager")
        self.assign_group(self.emp_a.user, "Employee")
        self.assign_group(self.emp_b.user, "Employee")

        self.a1 = add_attendance(self.emp_a, date(2025, 12, 1), AttendanceStatus.PRESENT)
        self.b1 = add_attendance(self.emp_b, date(2025, 12, 1), AttendanceStatus.ABSENT, hours="0")

        self.list_url = reverse("attendance-list")
        self.upload_url = reverse("attendance-upload")

    def auth(self, user):
        self.client.force_authenticate(user=user)

    def upload(self, text, name="attendance.csv"):
        return self.client.post(self.upload_url, {"file": csv_upload(text, name=name)}, format="multipart")

    def test_admin_and_hr_see_all_attendance(self):
        for user in (self.admin, self.hr):
            self.auth(user)
            res = self.client.get(self.list_url)
            self.assertEqual(res.status_code, status.HTTP_200_OK)
            self.assertEqual(len(self.results(res)), 2)

    def test_manager_sees_only_department_attendance(self):
        self.auth(self.manager_emp.user)
        res = self.client.get(self.list_url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        items = self.results(res)
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["employee"], self.emp_a.id)

    def test_employee_sees_only_own_attendance(self):
        self.auth(self.emp_a.user)
        res = self.client.get(self.list_url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        items = self.results(res)
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["employee"], self.emp_a.id)

    def test_list_filters(self):
        self.auth(self.admin)
        res = self.client.get(self.list_url, {"status": "absent"})
        self.assertEqual([i["id"] for i in self.results(res)], [self.b1.id])

        res = self.client.get(self.list_url, {"employee": self.emp_a.id, "date_from": "2025-12-01", "date_to": "2025-12-31"})
        self.assertEqual([i["id"] for i in self.results(res)], [self.a1.id])

    def test_blank_filters_are_ignored(self):
        self.auth(self.admin)
        res = self.client.get(self.list_url, {"employee": "", "date": ""})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(self.results(res)), 2)

    def test_malformed_filters_rejected(self):
        self.auth(self.admin)
        for params, field in (
            ({"employee": "abc"}, "employee"),
            ({"date": "not-a-date"}, "date"),
            ({"date_from": "x", "date_to": "2025-12-31"}, "date_from"),
            ({"date_from": "2025-12-01", "date_to": "y"}, "date_to"),
            ({"date_from": "2025-12-31", "date_to": "2025-12-01"}, "date_to"),
        ):
            with self.subTest(params=params):
                res = self.client.get(self.list_url, params)
                self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(field, res.data)

    def test_employee_cannot_create_attendance(self):
        self.auth(self.emp_a.user)
        payload = {"employee": self.emp_a.id, "date": "2025-12-02", "status": "PRESENT"}
        res = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_can_create_attendance_for_own_department(self):
        self.auth(self.manager_emp.user)
        payload = {"employee": self.emp_a.id, "date": "2025-12-02", "status": "LATE", "working_hours": "7.5"}
        res = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["source"], AttendanceSource.MANUAL)

    def test_manager_cannot_create_attendance_outside_department(self):
        self.auth(self.manager_emp.user)
        payload = {"employee": self.emp_b.id, "date": "2025-12-02", "status": "PRESENT"}
        res = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_attendance_same_employee_same_date_rejected(self):
        self.auth(self.admin)
        payload = {"employee": self.emp_a.id, "date": "2025-12-01", "status": "ABSENT"}
        res = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("non_field_errors", res.data)

    def test_negative_hours_rejected(self):
        self.auth(self.admin)
        payload = {"employee": self.emp_a.id, "date": "2025-12-05", "status": "PRESENT", "working_hours": "-1"}
        res = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("working_hours", res.data)

    def test_employee_cannot_access_other_employee_attendance_detail(self):
        self.auth(self.emp_a.user)
        res = self.client.get(reverse("attendance-detail", args=[self.b1.id]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

        res = self.client.get(reverse("attendance-detail", args=[self.a1.id]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)

    def test_upload_all_rows_valid(self):
        self.auth(self.hr)
        res = self.upload("employee_code,date,status\nA-1,2026-02-02,present\nB-1,02/02/2026,late\n")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["imported"], 2)
        self.assertEqual(res.data["errors"], [])
        self.assertEqual(Attendance.objects.filter(upload_batch=res.data["batch"]).count(), 2)

    def test_upload_with_bad_rows_is_multi_status(self):
        self.auth(self.hr)
        res = self.upload("employee,date,status\nA-1,2026-02-02,present\nZZ-9,2026-02-02,present\n")

        self.assertEqual(res.status_code, status.HTTP_207_MULTI_STATUS)
        self.assertEqual(res.data["imported"], 1)
        self.assertEqual(res.data["skipped"], 1)
        self.assertEqual(res.data["errors"][0]["row"], 3)
        self.assertEqual(res.data["errors"][0]["field"], "employee")

    def test_upload_rejects_other_file_types(self):
        self.auth(self.hr)
        res = self.upload("employee,date\n", name="attendance.pdf")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("file", res.data)

    def test_upload_rejects_file_without_required_columns(self):
        self.auth(self.hr)
        res = self.upload("name,status\nx,present\n")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_manager_and_employee_cannot_upload(self):
        for user in (self.manager_emp.user, self.emp_a.user):
            self.auth(user)
            res = self.upload("employee,date,status\nA-1,2026-02-02,present\n")
            self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_upload_history_and_batch_delete(self):
        self.auth(self.hr)
        batch = self.upload("employee,date,status\nA-1,2026-02-02,present\nB-1,2026-02-03,absent\n").data["batch"]

        res = self.client.get(reverse("attendance-uploads"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        items = self.results(res)
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["record_count"], 2)

        self.auth(self.manager_emp.user)
        res = self.client.delete(reverse("attendance-batch-delete", args=[batch]))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        self.auth(self.hr)
        res = self.client.delete(reverse("attendance-batch-delete", args=[batch]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["deleted"], 2)
        self.assertEqual(Attendance.objects.count(), 2)

        res = self.client.delete(reverse("attendance-batch-delete", args=[batch]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_attendance_summary(self):
        self.auth(self.hr)
        res = self.client.get(reverse("attendance-summary"), {"date_from": "2025-12-01", "date_to": "2025-12-31"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_records"], 2)
        self.assertEqual(res.data["present"], 1)
        self.assertEqual(res.data["absent"], 1)
        self.assertEqual(Decimal(res.data["total_working_hours"]), Decimal("8.00"))

    def test_attendance_summary_requires_range(self):
        self.auth(self.hr)
        res = self.client.get(reverse("attendance-summary"), {"date_from": "2025-12-31", "date_to": "2025-12-01"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        res = self.client.get(reverse("attendance-summary"))
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)


# -----------------
# Payroll API Tests
# -----------------

@override_settings(PAYROLL={"WORKING_DAYS_PER_MONTH": 22, "DEFAULT_BASE_SALARY": 22000})
class PayrollAPITests(PayrollPermsTestMixin, PaginationMixin, APITestCase):
    def setUp(self):
        self.dept_a = Department.objects.create(name="Dept A", location="Floor 1")
        self.dept_b = Department.objects.create(name="Dept B", location="Floor 2")

        self.admin = User.objects.create_user(
            username="admin_pay", password="Pass12345!", role=User.Role.ADMIN, email="admin_pay@test.com"
        )
        self.hr = User.objects.create_user(
            username="hr_pay", password="Pass12345!", role=User.Role.HR, email="hr_pay@test.com"
        )
        self.manager_emp = make_employee("mgr_pay", department=self.dept_a, role=User.Role.MANAGER)
        self.emp_a = make_employee("emp_pay", department=self.dept_a)
        self.emp_b = make_employee("emp2_pay", department=self.dept_b)

        self.assign_group(self.admin, "Admin")
        self.assign_group(self.hr, "HR Staff")
        self.assign_group(self.manager_emp.user, "Manager")
        self.assign_group(self.emp_a.user, "Employee")
        self.assign_group(self.emp_b.user, "Employee")

        add_attendance(self.emp_a, date(2026, 2, 2), AttendanceStatus.PRESENT, overtime="2")
        add_attendance(self.emp_a, date(2026, 2, 3), AttendanceStatus.ABSENT, hours="0")
        add_attendance(self.emp_b, date(2026, 2, 2), AttendanceStatus.PRESENT)

        self.list_url = reverse("payroll-list")
        self.generate_url = reverse("payroll-generate")
        self.period = {"period_start": "2026-02-01", "period_end": "2026-02-28"}

    def auth(self, user):
        self.client.force_authenticate(user=user)

    def generate(self, **extra):
        self.auth(self.hr)
        res = self.client.post(self.generate_url, {**self.period, **extra}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        return res

    def record_of(self, employee):
        return Payroll.objects.get(employee=employee)

    def test_hr_generates_payroll(self):
        res = self.generate()
        self.assertEqual(res.data["generated"], 2)
        self.assertEqual(res.data["errors"], [])

        record = self.record_of(self.emp_a)
        self.assertEqual(record.base_salary, Decimal("22000.00"))
        self.assertEqual(record.hourly_rate, Decimal("125.00"))
        self.assertEqual(record.overtime_pay, Decimal("375.00"))
        self.assertEqual(record.deductions, Decimal("1000.00"))
        self.assertEqual(record.net_salary, Decimal("21375.00"))
        self.assertEqual(record.generated_by, self.hr)

    def test_generate_with_salary_override(self):
        self.generate(base_salary="44000")
        self.assertEqual(self.record_of(self.emp_b).net_salary, Decimal("44000.00"))

    def test_generate_empty_period_is_unprocessable(self):
        self.auth(self.hr)
        res = self.client.post(
            self.generate_url, {"period_start": "2025-01-01", "period_end": "2025-01-31"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(res.data["generated"], 0)
        self.assertEqual(res.data["errors"], [EMPTY_PERIOD_MESSAGE])

    def test_generate_rejects_inverted_period(self):
        self.auth(self.hr)
        res = self.client.post(
            self.generate_url, {"period_start": "2026-02-28", "period_end": "2026-02-01"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("period_end", res.data)

    def test_manager_and_employee_cannot_generate(self):
        for user in (self.manager_emp.user, self.emp_a.user):
            self.auth(user)
            res = self.client.post(self.generate_url, self.period, format="json")
            self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_is_scoped(self):
        self.generate()

        self.auth(self.admin)
        self.assertEqual(len(self.results(self.client.get(self.list_url))), 2)

        self.auth(self.manager_emp.user)
        items = self.results(self.client.get(self.list_url))
        self.assertEqual([i["employee"] for i in items], [self.emp_a.id])

        self.auth(self.emp_b.user)
        items = self.results(self.client.get(self.list_url))
        self.assertEqual([i["employee"] for i in items], [self.emp_b.id])

    def test_list_filters(self):
        self.generate()
        self.auth(self.admin)

        res = self.client.get(self.list_url, {"employee": self.emp_a.id, **self.period})
        self.assertEqual([i["employee"] for i in self.results(res)], [self.emp_a.id])

        res = self.client.get(self.list_url, {"period_start": "2026-03-01", "period_end": "2026-03-31"})
        self.assertEqual(self.results(res), [])

    def test_malformed_filters_rejected(self):
        self.auth(self.admin)
        for params, field in (
            ({"employee": "abc"}, "employee"),
            ({"period_start": "x", "period_end": "y"}, "period_start"),
            ({"period_start": "2026-02-01", "period_end": "y"}, "period_end"),
            ({"period_start": "2026-02-28", "period_end": "2026-02-01"}, "period_end"),
        ):
            with self.subTest(params=params):
                res = self.client.get(self.list_url, params)
                self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(field, res.data)

    def test_employee_cannot_access_other_employee_payroll_detail(self):
        self.generate()
        self.auth(self.emp_a.user)
        res = self.client.get(reverse("payroll-detail", args=[self.record_of(self.emp_b).id]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_approve_and_mark_paid(self):
        self.generate()
        record = self.record_of(self.emp_a)
        self.auth(self.admin)

        res = self.client.patch(reverse("payroll-mark-paid", args=[record.id]))
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["current_status"], PayrollStatus.DRAFT)

        res = self.client.patch(reverse("payroll-approve", args=[record.id]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], PayrollStatus.APPROVED)
        self.assertEqual(res.data["approved_by"], self.admin.id)

        res = self.client.patch(reverse("payroll-approve", args=[record.id]))
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["current_status"], PayrollStatus.APPROVED)

        res = self.client.patch(reverse("payroll-mark-paid", args=[record.id]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], PayrollStatus.PAID)

    def test_hr_cannot_approve(self):
        self.generate()
        res = self.client.patch(reverse("payroll-approve", args=[self.record_of(self.emp_a).id]))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_approve_unknown_record(self):
        self.auth(self.admin)
        res = self.client.patch(reverse("payroll-approve", args=[999999]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_regenerate_after_approval_reports_locked_record(self):
        self.generate()
        approve_payroll(self.record_of(self.emp_a).id, approved_by=self.admin)

        res = self.generate()
        self.assertEqual(res.data["generated"], 1)
        self.assertEqual(len(res.data["errors"]), 1)
        self.assertEqual(self.record_of(self.emp_a).status, PayrollStatus.APPROVED)

        res = self.generate(reset_locked=True)
        self.assertEqual(res.data["generated"], 2)
        self.assertEqual(self.record_of(self.emp_a).status, PayrollStatus.DRAFT)

    def test_only_draft_can_be_deleted(self):
        self.generate()
        draft = self.record_of(self.emp_b)
        approved = self.record_of(self.emp_a)
        approve_payroll(approved.id, approved_by=self.admin)
        self.auth(self.admin)

        res = self.client.delete(reverse("payroll-detail", args=[approved.id]))
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.delete(reverse("payroll-detail", args=[draft.id]))
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Payroll.objects.filter(id=draft.id).exists())

    def test_employee_cannot_delete_payroll(self):
        self.generate()
        self.auth(self.emp_a.user)
        res = self.client.delete(reverse("payroll-detail", args=[self.record_of(self.emp_a).id]))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_period_summary(self):
        self.generate()
        self.auth(self.admin)
        res = self.client.get(reverse("payroll-summary"), self.period)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_records"], 2)
        self.assertEqual(res.data["draft_count"], 2)
        self.assertEqual(Decimal(res.data["total_net"]), Decimal("43375.00"))

    def test_config_snapshot(self):
        self.auth(self.emp_a.user)
        res = self.client.get(reverse("payroll-config"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["working_days_per_month"], 22)
        self.assertEqual(res.data["default_base_salary"], "22000")
        self.assertEqual(res.data["currency"], "PKR")
