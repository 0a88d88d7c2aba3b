# customers/tests/test_customers.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from audit.models import AuditLog
from customers.models import Customer

User = get_user_model()


class CustomerApiTests(TestCase):
    """
    GUARANTEES:
    - Cashiers can look up and register customers
    - DELETE deactivates; the row stays for order history
    """

    def setUp(self):
        self.client = APIClient()
        self.cashier = User.objects.create_user(
            email="cashier@example.com",
            password="pass12345",
            role=User.ROLE_CASHIER,
        )
        self.client.force_authenticate(user=self.cashier)

    def test_create_normalizes_fields(self):
        with self.captureOnCommitCallbacks(execute=True):
            res = self.client.post(
                "/api/customers/",
                {"first_name": " Grace ", "last_name": "Hopper", "email": "Grace@Example.com"},
                format="json",
            )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["full_name"], "Grace Hopper")
        self.assertEqual(res.data["email"], "grace@example.com")
        self.assertTrue(AuditLog.objects.filter(entity_name="Customer", action="Create").exists())

    def test_blank_last_name_rejected(self):
        res = self.client.post("/api/customers/", {"first_name": "Grace", "last_name": " "}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("last_name", res.data)

    def test_search(self):
        Customer.objects.create(first_name="Grace", last_name="Hopper")
        Customer.objects.create(first_name="Alan", last_name="Turing")

        res = self.client.get("/api/customers/", {"q": "turi"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual([c["last_name"] for c in res.data["results"]], ["Turing"])

    def test_delete_deactivates(self):
        customer = Customer.objects.create(first_name="Grace", last_name="Hopper")

        res = self.client.delete(f"/api/customers/{customer.id}/")

        self.assertEqual(res.status_code, 204)
        customer.refresh_from_db()
        self.assertFalse(customer.is_active)

    def test_plain_user_forbidden(self):
        user = User.objects.create_user(email="someone@example.com", password="pass12345")
        self.client.force_authenticate(user=user)

        self.assertEqual(self.client.get("/api/customers/").status_code, 403)
