from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from .serializers import CustomTokenObtainPairSerializer, UserListSerializer, employee_ids
from .permissions import DjangoModelPermissionsWithView, IsAdminGroup
from .models import User
from .groups import setup_payroll_groups


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class MeView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        u = request.user
        employee_id, _ = employee_ids(u)
        return Response({
            "id": u.id,
            "username": u.username,
            "email": u.email,
            "role": u.role,
            "employee_id": employee_id,
            "permissions": sorted(p for p in u.get_all_permissions() if p.startswith("payroll.")),
        })


class UserListView(ListAPIView):
    permission_classes = [IsAuthenticated, DjangoModelPermissionsWithView]
    serializer_class = UserListSerializer
    queryset = User.objects.select_related("employee").order_by("id")


class SeedPayrollGroupsView(GenericAPIView):
    permission_classes = [IsAdminGroup]

    def post(self, request, *args, **kwargs):
        counts = setup_payroll_groups()
        return Response(
            {"detail": "Payroll groups seeded.", "counts": counts},
            status=status.HTTP_200_OK
        )
