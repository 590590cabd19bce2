# users/tests/test_users.py

import os
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import RequestFactory, TestCase

from users.permissions import IsAdmin, is_admin

User = get_user_model()


class UserModelTests(TestCase):
    def test_create_user_defaults_to_customer(self):
        user = User.objects.create_user(email="Buyer@Example.com", password="pass12345")

        self.assertEqual(user.role, "customer")
        self.assertFalse(user.is_admin)
        self.assertTrue(user.check_password("pass12345"))

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="  ", password="pass12345")

    def test_create_superuser_is_admin(self):
        admin = User.objects.create_superuser(email="ops@example.com", password="pass12345")

        self.assertEqual(admin.role, "admin")
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)


class IsAdminPermissionTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.customer = User.objects.create_user(email="c@example.com", password="pass12345")
        self.admin = User.objects.create_user(
            email="a@example.com", password="pass12345", role="admin"
        )

    def _request(self, user):
        request = self.factory.get("/")
        request.user = user
        return request

    def test_admin_allowed_customer_denied(self):
        permission = IsAdmin()

        self.assertTrue(permission.has_permission(self._request(self.admin), None))
        self.assertFalse(permission.has_permission(self._request(self.customer), None))

    def test_is_admin_helper(self):
        self.assertTrue(is_admin(self.admin))
        self.assertFalse(is_admin(self.customer))
        self.assertFalse(is_admin(None))


class EnsureAdminCommandTests(TestCase):
    def test_skips_without_env(self):
        with mock.patch.dict(os.environ, {"AUTO_ADMIN_EMAIL": "", "AUTO_ADMIN_PASSWORD": ""}):
            call_command("ensure_admin", verbosity=0)

        self.assertFalse(User.objects.exists())

    def test_creates_then_updates(self):
        env = {"AUTO_ADMIN_EMAIL": "boss@example.com", "AUTO_ADMIN_PASSWORD": "first-pass"}
        with mock.patch.dict(os.environ, env):
            call_command("ensure_admin", verbosity=0)

        env["AUTO_ADMIN_PASSWORD"] = "second-pass"
        with mock.patch.dict(os.environ, env):
            call_command("ensure_admin", verbosity=0)

        user = User.objects.get(email="boss@example.com")
        self.assertEqual(User.objects.count(), 1)
        self.assertEqual(user.role, "admin")
        self.assertTrue(user.check_password("second-pass"))
