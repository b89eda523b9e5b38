import logging

from rest_framework.generics import GenericAPIView, ListAPIView, ListCreateAPIView, RetrieveAPIView, RetrieveDestroyAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import ValidationError

from accounts.models import User
from accounts.permissions import DjangoModelPermissionsWithView, HasRequiredPerms
from .conf import get_payroll_configuration
from .exceptions import StateConflictError
from .lifecycle import approve_payroll, mark_payroll_paid
from .models import Attendance, Payroll
from .serializers import (
    AttendanceFilterSerializer,
    AttendanceSerializer,
    AttendanceUploadSerializer,
    DateRangeSerializer,
    PayrollFilterSerializer,
    PayrollGenerateSerializer,
    PayrollSerializer,
    PeriodSerializer,
)
from . import services
from .status import PayrollStatus

logger = logging.getLogger(__name__)


def scope_to_user(qs, user, employee_field="employee"):
    """
    ADMIN / HR see everything, MANAGER their department, EMPLOYEE themselves.
    """
    if user.sees_all_records:
        return qs

    employee = getattr(user, "employee", None)

    # Manager sees department only
    if user.role == User.Role.MANAGER:
        if employee is None or not employee.department_id:
            return qs.none()
        return qs.filter(**{f"{employee_field}__department_id": employee.department_id})

    # Employee sees self only
    if employee is not None:
        return qs.filter(**{f"{employee_field}_id": employee.id})

    return qs.none()


def query_params(serializer_class, request):
    ser = serializer_class(data=request.query_params)
    ser.is_valid(raise_exception=True)
    return ser.validated_data


# ----------------------------
# Attendance
# ----------------------------

class AttendanceScopedMixin:
    queryset = Attendance.objects.select_related("employee", "employee__user", "employee__department")

    def get_queryset(self):
        return scope_to_user(super().get_queryset(), self.request.user)


class AttendanceListCreateView(AttendanceScopedMixin, ListCreateAPIView):
    serializer_class = AttendanceSerializer
    permission_classes = [IsAuthenticated, DjangoModelPermissionsWithView]

    def get_queryset(self):
        qs = super().get_queryset()
        if self.request.method != "GET":
            return qs
        params = query_params(AttendanceFilterSerializer, self.request)

        if params.get("employee"):
            qs = qs.filter(employee_id=params["employee"])
        if params.get("date"):
            qs = qs.filter(date=params["date"])
        if params.get("date_from") and params.get("date_to"):
            qs = qs.filter(date__gte=params["date_from"], date__lte=params["date_to"])
        if params.get("status"):
            qs = qs.filter(status=params["status"].upper())
        if params.get("batch"):
            qs = qs.filter(upload_batch=params["batch"])
        return qs


class AttendanceDetailView(AttendanceScopedMixin, RetrieveAPIView):
    serializer_class = AttendanceSerializer
    permission_classes = [IsAuthenticated, DjangoModelPermissionsWithView]


class AttendanceUploadView(GenericAPIView):
    serializer_class = AttendanceUploadSerializer
    permission_classes = [HasRequiredPerms]
    required_perms = ["payroll.upload_attendance"]

    def post(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = services.import_attendance(ser.validated_data["file"], uploaded_by=request.user)
        data = result.as_dict()
        data["detail"] = f"{result.imported} records imported, {result.skipped} skipped."
        return Response(data, status=status.HTTP_207_MULTI_STATUS if result.errors else status.HTTP_200_OK)


class AttendanceSummaryView(GenericAPIView):
    permission_classes = [HasRequiredPerms]
    required_perms = ["payroll.view_attendance"]

    def get(self, request, *args, **kwargs):
        params = query_params(DateRangeSerializer, request)
        return Response(services.attendance_summary(params["date_from"], params["date_to"]))


class AttendanceUploadHistoryView(ListAPIView):
    permission_classes = [HasRequiredPerms]
    required_perms = ["payroll.view_attendance"]

    def get_queryset(self):
        return services.upload_history()

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        if page is not None:
            return self.get_paginated_response(page)
        return Response(list(self.get_queryset()))


class AttendanceBatchDeleteView(GenericAPIView):
    permission_classes = [HasRequiredPerms]
    required_perms = ["payroll.delete_attendance_batch"]

    def delete(self, request, batch, *args, **kwargs):
        deleted = services.delete_batch(batch)
        if not deleted:
            return Response({"detail": "No attendance records found for this batch."}, status=status.HTTP_404_NOT_FOUND)
        return Response({"detail": f"{deleted} attendance records deleted.", "deleted": deleted})


# ----------------------------
# Payroll
# ----------------------------

class PayrollScopedMixin:
    queryset = Payroll.objects.select_related("employee", "employee__user", "employee__department")

    def get_queryset(self):
        return scope_to_user(super().get_queryset(), self.request.user)


class PayrollListView(PayrollScopedMixin, ListAPIView):
    serializer_class = PayrollSerializer
    permission_classes = [IsAuthenticated, DjangoModelPermissionsWithView]

    def get_queryset(self):
        qs = super().get_queryset()
        params = query_params(PayrollFilterSerializer, self.request)

        if params.get("employee"):
            qs = qs.filter(employee_id=params["employee"])
        if params.get("period_start") and params.get("period_end"):
            qs = qs.filter(period_start__gte=params["period_start"], period_end__lte=params["period_end"])
        if params.get("status"):
            qs = qs.filter(status=params["status"].upper())
        return qs


class PayrollDetailView(PayrollScopedMixin, RetrieveDestroyAPIView):
    serializer_class = PayrollSerializer
    permission_classes = [IsAuthenticated, DjangoModelPermissionsWithView]

    def perform_destroy(self, instance):
        if instance.status != PayrollStatus.DRAFT:
            raise ValidationError({"detail": "Only draft payroll records can be deleted."})
        logger.info("Payroll #%s deleted by %s.", instance.pk, self.request.user)
        instance.delete()


class PayrollGenerateView(GenericAPIView):
    serializer_class = PayrollGenerateSerializer
    permission_classes = [HasRequiredPerms]
    required_perms = ["payroll.generate_payroll"]

    def post(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        result = services.generate_payroll(
            data["period_start"],
            data["period_end"],
            generated_by=request.user,
            base_salary_override=data.get("base_salary"),
            reset_locked=data["reset_locked"],
        )
        body = result.as_dict()
        if result.generated == 0 and result.errors:
            body["detail"] = "No payroll records were generated."
            return Response(body, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        body["detail"] = f"Payroll generated for {result.generated} employees."
        return Response(body, status=status.HTTP_200_OK)


class PayrollTransitionView(PayrollScopedMixin, GenericAPIView):
    serializer_class = PayrollSerializer
    permission_classes = [HasRequiredPerms]
    required_perms = ["payroll.approve_payroll"]

    def transition(self, record):
        raise NotImplementedError

    def patch(self, request, *args, **kwargs):
        # 404 for ids outside the caller's scope before touching the row
        record = self.get_object()
        result = self.transition(record)
        if not result.ok:
            raise StateConflictError(result.conflict)
        return Response(self.get_serializer(result.record).data)


class PayrollApproveView(PayrollTransitionView):
    def transition(self, record):
        return approve_payroll(record.pk, approved_by=self.request.user)


class PayrollMarkPaidView(PayrollTransitionView):
    def transition(self, record):
        return mark_payroll_paid(record.pk)


class PayrollSummaryView(GenericAPIView):
    permission_classes = [HasRequiredPerms]
    required_perms = ["payroll.view_payroll"]

    def get(self, request, *args, **kwargs):
        params = query_params(PeriodSerializer, request)
        return Response(services.period_summary(params["period_start"], params["period_end"]))


class PayrollConfigView(GenericAPIView):
    permission_classes = [HasRequiredPerms]
    required_perms = ["payroll.view_payroll"]

    def get(self, request, *args, **kwargs):
        return Response(get_payroll_configuration().as_dict())
