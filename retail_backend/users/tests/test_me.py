# users/tests/test_me.py

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient

User = get_user_model()


class MeEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.cashier = User.objects.create_user(
            email="cashier@example.com",
            password="pass12345",
            role=User.ROLE_CASHIER,
        )

    def test_requires_authentication(self):
        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, 401)

    def test_returns_role_capabilities(self):
        self.client.force_authenticate(user=self.cashier)
        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["role"], "cashier")
        self.assertEqual(res.data["username"], "cashier")
        self.assertIn("orders.sell", res.data["capabilities"])
        self.assertNotIn("orders.void", res.data["capabilities"])


class SeedAdminCommandTests(TestCase):
    def test_creates_admin_once(self):
        call_command("seed_admin", email="admin@example.com", password="s3cret!!")
        call_command("seed_admin", email="other@example.com", password="s3cret!!")

        self.assertEqual(User.objects.count(), 1)
        admin = User.objects.get()
        self.assertEqual(admin.role, User.ROLE_ADMIN)
        self.assertTrue(admin.is_superuser)
        self.assertTrue(admin.check_password("s3cret!!"))
