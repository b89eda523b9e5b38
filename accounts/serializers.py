from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework import serializers
from .models import User


def employee_ids(user):
    """(employee_id, department_id) for the user's payroll profile, or Nones."""
    employee = getattr(user, "employee", None)
    if employee is None:
        return None, None
    return employee.id, employee.department_id


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Login payload for payroll clients.

    Besides the role, the access token carries the employee and department ids
    so a client can tell "my payslips" and "my department" apart without
    calling /auth/me/ first. Scoping is still enforced server side.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        employee_id, department_id = employee_ids(user)
        token["role"] = user.role
        token["username"] = user.username
        token["employee_id"] = employee_id
        token["department_id"] = department_id
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        employee_id, department_id = employee_ids(self.user)
        data["user"] = {
            "id": self.user.id,
            "username": self.user.username,
            "role": self.user.role,
            "sees_all_records": self.user.sees_all_records,
            "employee_id": employee_id,
            "department_id": department_id,
        }
        return data


class UserListSerializer(serializers.ModelSerializer):
    employee_id = serializers.IntegerField(source="employee.id", read_only=True, default=None)

    class Meta:
        model = User
        fields = ["id", "username", "email", "role", "employee_id"]
