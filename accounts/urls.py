from django.urls import path
from .views import (
    MeView,
    UserListView,
    CustomTokenObtainPairView,
    SeedPayrollGroupsView,
)
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

urlpatterns = [
    path("auth/me/", MeView.as_view(), name="me"),
    path("users/", UserListView.as_view(), name="list-users"),
    path("auth/login/", CustomTokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("auth/verify/", TokenVerifyView.as_view(), name="token_verify"),
    path("admin/seed-payroll-groups/", SeedPayrollGroupsView.as_view(), name="admin-seed-payroll-groups"),
]
