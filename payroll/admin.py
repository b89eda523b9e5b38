from django.contrib import admin
from .models import Department, Employee, Attendance, Payroll

@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("name", "location")
    search_fields = ("name",)

@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("user", "employee_code", "department", "phone")
    search_fields = ("user__username", "user__email", "employee_code")
    list_filter = ("department",)

@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("employee", "date", "status", "working_hours", "overtime_hours", "source", "upload_batch")
    search_fields = ("employee__employee_code", "employee__user__username", "upload_batch")
    list_filter = ("status", "source", "date")
    date_hierarchy = "date"

@admin.register(Payroll)
class PayrollAdmin(admin.ModelAdmin):
    list_display = ("employee", "period_start", "period_end", "net_salary", "status")
    search_fields = ("employee__employee_code", "employee__user__username")
    list_filter = ("status", "period_start")
    # figures come from the generator, status from the approval endpoints
    readonly_fields = (
        "total_working_days", "total_present_days", "total_absent_days", "total_late_days",
        "total_working_hours", "total_overtime_hours", "base_salary", "hourly_rate",
        "overtime_pay", "deductions", "net_salary", "status", "generated_by", "approved_by",
    )
