from rest_framework import serializers
from accounts.models import User
from .models import Attendance, Payroll
from .spreadsheet import ALLOWED_EXTENSIONS
from .status import AttendanceSource, AttendanceStatus
from django.db import IntegrityError, transaction
import os


MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class AttendanceSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.user.get_full_name", read_only=True)

    class Meta:
        model = Attendance
        fields = [
            "id",
            "employee",
            "employee_name",
            "date",
            "status",
            "clock_in",
            "clock_out",
            "working_hours",
            "overtime_hours",
            "source",
            "upload_batch",
            "uploaded_by",
            "note",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "source", "upload_batch", "uploaded_by", "created_at", "updated_at"]
        # the unique constraint is reported from create() instead
        validators = []

    def validate(self, attrs):
        """
        Manual entries:
        - ABSENT rows carry no hours.
        - Manager can only record attendance for employees in their department.
        """
        request = self.context["request"]
        user = request.user

        if attrs.get("status") == AttendanceStatus.ABSENT:
            attrs["working_hours"] = 0
            attrs["overtime_hours"] = 0

        target_employee = attrs.get("employee") or getattr(self.instance, "employee", None)
        if not target_employee or user.sees_all_records:
            return attrs

        if user.role == User.Role.MANAGER:
            own = getattr(user, "employee", None)
            if own is None or own.department_id is None:
                raise serializers.ValidationError("Manager must have an Employee profile with a department.")
            if own.department_id != target_employee.department_id:
                raise serializers.ValidationError("Managers can only manage attendance within their department.")
            return attrs

        raise serializers.ValidationError("Employees are not allowed to create or modify attendance records.")

    def create(self, validated_data):
        validated_data["source"] = AttendanceSource.MANUAL
        # Convert DB constraint error into clean 400
        try:
            with transaction.atomic():
                return super().create(validated_data)
        except IntegrityError:
            raise serializers.ValidationError(
                {"non_field_errors": ["Attendance already exists for this employee on this date."]}
            )


class PayrollSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.user.get_full_name", read_only=True)
    department = serializers.CharField(source="employee.department.name", read_only=True, default=None)

    class Meta:
        model = Payroll
        fields = [
            "id",
            "employee",
            "employee_name",
            "department",
            "period_start",
            "period_end",
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
            "generated_by",
            "approved_by",
            "note",
            "created_at",
            "updated_at",
        ]
        # figures only ever come from the generator
        read_only_fields = fields


class AttendanceUploadSerializer(serializers.Serializer):
    file = serializers.FileField()

    def validate_file(self, upload):
        ext = os.path.splitext(upload.name)[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise serializers.ValidationError("Upload an .xlsx, .xls or .csv file.")
        if upload.size > MAX_UPLOAD_BYTES:
            raise serializers.ValidationError("File too large. Maximum size is 10 MB.")
        return upload


class DateRangeSerializer(serializers.Serializer):
    date_from = serializers.DateField()
    date_to = serializers.DateField()

    def validate(self, attrs):
        if attrs["date_to"] < attrs["date_from"]:
            raise serializers.ValidationError({"date_to": "Must be on or after date_from."})
        return attrs


class PeriodSerializer(serializers.Serializer):
    period_start = serializers.DateField()
    period_end = serializers.DateField()

    def validate(self, attrs):
        if attrs["period_end"] < attrs["period_start"]:
            raise serializers.ValidationError({"period_end": "Period end must be on or after period start."})
        return attrs


class AttendanceFilterSerializer(serializers.Serializer):
    employee = serializers.IntegerField(required=False, min_value=1)
    date = serializers.DateField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    status = serializers.CharField(required=False)
    batch = serializers.CharField(required=False)

    def validate(self, attrs):
        date_from, date_to = attrs.get("date_from"), attrs.get("date_to")
        if date_from and date_to and date_to < date_from:
            raise serializers.ValidationError({"date_to": "Must be on or after date_from."})
        return attrs


class PayrollFilterSerializer(serializers.Serializer):
    employee = serializers.IntegerField(required=False, min_value=1)
    period_start = serializers.DateField(required=False)
    period_end = serializers.DateField(required=False)
    status = serializers.CharField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("period_start"), attrs.get("period_end")
        if start and end and end < start:
            raise serializers.ValidationError({"period_end": "Period end must be on or after period start."})
        return attrs


class PayrollGenerateSerializer(PeriodSerializer):
    base_salary = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    reset_locked = serializers.BooleanField(default=False)

