from rest_framework.test import APITestCase
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

from accounts.groups import setup_payroll_groups
from accounts.models import User
from payroll.models import Department, Employee
from django.contrib.auth.models import Group, Permission
from django.contrib.contenttypes.models import ContentType
from django.test import TestCase


class AuthRBACTests(APITestCase):
    def results(self, res):
        return res.data["results"] if isinstance(res.data, dict) and "results" in res.data else res.data

    def setUp(self):
        # Users
        self.admin = User.objects.create_user(
            username="admin1",
            password="Pass12345!",
            role=User.Role.ADMIN,
            email="admin1@test.com",
        )
        self.manager = User.objects.create_user(
            username="manager1",
            password="Pass12345!",
            role=User.Role.MANAGER,
            email="manager1@test.com",
        )
        self.employee = User.objects.create_user(
            username="employee1",
            password="Pass12345!",
            role=User.Role.EMPLOYEE,
            email="employee1@test.com",
        )

        # Groups
        admin_g, _ = Group.objects.get_or_create(name="Admin")
        manager_g, _ = Group.objects.get_or_create(name="Manager")
        employee_g, _ = Group.objects.get_or_create(name="Employee")

        # HARD reset group permissions (the post_migrate seeding would leak perms)
        admin_g.permissions.clear()
        manager_g.permissions.clear()
        employee_g.permissions.clear()

        # Give ONLY admin permission required for GET /users/ under DjangoModelPermissions
        app_label = User._meta.app_label
        model_name = User._meta.model_name
        ct = ContentType.objects.get(app_label=app_label, model=model_name)
        view_user = Permission.objects.get(content_type=ct, codename=f"view_{model_name}")
        admin_g.permissions.add(view_user)

        # Assign groups to users
        self.admin.groups.set([admin_g])
        self.manager.groups.set([manager_g])
        self.employee.groups.set([employee_g])

        # URLs
        self.login_url = "/api/auth/login/"
        self.refresh_url = "/api/auth/refresh/"
        self.me_url = "/api/auth/me/"
        self.users_url = "/api/users/"

    def login(self, username, password):
        return self.client.post(self.login_url, {"username": username, "password": password}, format="json")

    def auth_as(self, username, password):
        res = self.login(username, password)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        access = res.data["access"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        return res.data

    def test_login_returns_tokens_and_user(self):
        res = self.login("manager1", "Pass12345!")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("access", res.data)
        self.assertIn("refresh", res.data)
        self.assertIn("user", res.data)
        self.assertEqual(res.data["user"]["role"], User.Role.MANAGER)
        self.assertFalse(res.data["user"]["sees_all_records"])
        self.assertIsNone(res.data["user"]["employee_id"])

    def test_login_carries_employee_profile(self):
        dept = Department.objects.create(name="Ops")
        emp = Employee.objects.create(user=self.manager, department=dept)

        res = self.login("manager1", "Pass12345!")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["user"]["employee_id"], emp.id)
        self.assertEqual(res.data["user"]["department_id"], dept.id)

        token = AccessToken(res.data["access"])
        self.assertEqual(token["role"], User.Role.MANAGER)
        self.assertEqual(token["employee_id"], emp.id)
        self.assertEqual(token["department_id"], dept.id)

    def test_login_with_wrong_password_is_rejected(self):
        res = self.login("manager1", "wrong")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_auth(self):
        res = self.client.get(self.me_url)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_returns_current_user(self):
        self.auth_as("employee1", "Pass12345!")
        res = self.client.get(self.me_url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["username"], "employee1")
        self.assertEqual(res.data["role"], User.Role.EMPLOYEE)
        self.assertIsNone(res.data["employee_id"])
        self.assertEqual(res.data["permissions"], [])

    def test_refresh_returns_new_access(self):
        login_res = self.login("employee1", "Pass12345!")
        self.assertEqual(login_res.status_code, status.HTTP_200_OK)
        refresh = login_res.data["refresh"]

        res = self.client.post(self.refresh_url, {"refresh": refresh}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("access", res.data)

    def test_admin_can_list_users(self):
        self.auth_as("admin1", "Pass12345!")
        res = self.client.get(self.users_url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        usernames = {item["username"] for item in self.results(res)}
        self.assertEqual(usernames, {"admin1", "manager1", "employee1"})

    def test_manager_cannot_list_users(self):
        self.auth_as("manager1", "Pass12345!")
        res = self.client.get(self.users_url)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_employee_cannot_list_users(self):
        self.auth_as("employee1", "Pass12345!")
        res = self.client.get(self.users_url)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_only_admin_group_can_seed_groups(self):
        self.auth_as("manager1", "Pass12345!")
        res = self.client.post("/api/admin/seed-payroll-groups/", {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        self.auth_as("admin1", "Pass12345!")
        res = self.client.post("/api/admin/seed-payroll-groups/", {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("HR Staff", res.data["counts"])


class PayrollGroupSeedTests(TestCase):
    def perms_of(self, name):
        return set(Group.objects.get(name=name).permissions.values_list("codename", flat=True))

    def test_seeding_is_idempotent(self):
        first = setup_payroll_groups()
        second = setup_payroll_groups()
        self.assertEqual(first, second)
        self.assertEqual(Group.objects.filter(name__in=first.keys()).count(), 4)

    def test_only_admin_may_approve(self):
        setup_payroll_groups()
        self.assertIn("approve_payroll", self.perms_of("Admin"))
        for name in ("HR Staff", "Manager", "Employee"):
            self.assertNotIn("approve_payroll", self.perms_of(name))

    def test_hr_staff_can_upload_and_generate(self):
        setup_payroll_groups()
        perms = self.perms_of("HR Staff")
        self.assertTrue({"upload_attendance", "delete_attendance_batch", "generate_payroll"} <= perms)

    def test_employee_is_read_only(self):
        setup_payroll_groups()
        self.assertEqual(self.perms_of("Employee"), {"view_employee", "view_attendance", "view_payroll"})
