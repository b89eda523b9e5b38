from django.urls import path
from payroll.views import (
    AttendanceListCreateView,
    AttendanceDetailView,
    AttendanceUploadView,
    AttendanceSummaryView,
    AttendanceUploadHistoryView,
    AttendanceBatchDeleteView,
    PayrollListView,
    PayrollDetailView,
    PayrollGenerateView,
    PayrollApproveView,
    PayrollMarkPaidView,
    PayrollSummaryView,
    PayrollConfigView,
)

urlpatterns = [
    path("attendance/", AttendanceListCreateView.as_view(), name="attendance-list"),
    path("attendance/upload/", AttendanceUploadView.as_view(), name="attendance-upload"),
    path("attendance/summary/", AttendanceSummaryView.as_view(), name="attendance-summary"),
    path("attendance/uploads/", AttendanceUploadHistoryView.as_view(), name="attendance-uploads"),
    path("attendance/batch/<str:batch>/", AttendanceBatchDeleteView.as_view(), name="attendance-batch-delete"),
    path("attendance/<int:pk>/", AttendanceDetailView.as_view(), name="attendance-detail"),
    path("payrolls/", PayrollListView.as_view(), name="payroll-list"),
    path("payrolls/generate/", PayrollGenerateView.as_view(), name="payroll-generate"),
    path("payrolls/summary/", PayrollSummaryView.as_view(), name="payroll-summary"),
    path("payrolls/config/", PayrollConfigView.as_view(), name="payroll-config"),
    path("payrolls/<int:pk>/", PayrollDetailView.as_view(), name="payroll-detail"),
    path("payrolls/<int:pk>/approve/", PayrollApproveView.as_view(), name="payroll-approve"),
    path("payrolls/<int:pk>/mark-paid/", PayrollMarkPaidView.as_view(), name="payroll-mark-paid"),
]
