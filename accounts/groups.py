from django.contrib.auth.models import Group, Permission
from django.contrib.contenttypes.models import ContentType


PAYROLL_MODELS = ["department", "employee", "attendance", "payroll"]
ACTIONS = ["add", "change", "delete", "view"]


def setup_payroll_groups():
    def get_perm(model, codename):
        ct = ContentType.objects.get(app_label="payroll", model=model)
        return Permission.objects.get(content_type=ct, codename=codename)

    admin, _ = Group.objects.get_or_create(name="Admin")
    hr_staff, _ = Group.objects.get_or_create(name="HR Staff")
    manager, _ = Group.objects.get_or_create(name="Manager")
    employee, _ = Group.objects.get_or_create(name="Employee")

    # Admin: everything on the payroll models, custom perms included
    admin.permissions.set(
        Permission.objects.filter(content_type__app_label="payroll", content_type__model__in=PAYROLL_MODELS)
    )

    # HR Staff: imports attendance and drafts payroll, approval stays with Admin
    hr_staff.permissions.set([
        get_perm("department", "view_department"),
        get_perm("employee", "view_employee"),
        get_perm("attendance", "add_attendance"),
        get_perm("attendance", "change_attendance"),
        get_perm("attendance", "view_attendance"),
        get_perm("attendance", "upload_attendance"),
        get_perm("attendance", "delete_attendance_batch"),
        get_perm("payroll", "view_payroll"),
        get_perm("payroll", "delete_payroll"),
        get_perm("payroll", "generate_payroll"),
    ])

    # Manager: department-scoped in queryset
    manager.permissions.set([
        get_perm("department", "view_department"),
        get_perm("employee", "view_employee"),
        get_perm("attendance", "add_attendance"),
        get_perm("attendance", "view_attendance"),
        get_perm("payroll", "view_payroll"),
    ])

    # Employee: self-scoped in queryset
    employee.permissions.set([
        get_perm("employee", "view_employee"),
        get_perm("attendance", "view_attendance"),
        get_perm("payroll", "view_payroll"),
    ])

    return {group.name: group.permissions.count() for group in (admin, hr_staff, manager, employee)}
