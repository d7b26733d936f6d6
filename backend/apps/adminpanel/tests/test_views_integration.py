from decimal import Decimal

from django.test import TestCase

from apps.catalog.models import Product
from apps.users.models import User


class SignedInAdminPanelTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            username="staff@ariesmall.com", email="staff@ariesmall.com", password="StaffPass123", is_staff=True
        )
        Product.objects.create(name="Oak Dining Table", brand="Woodcraft", category="Furniture", price=Decimal("24999"))

    def test_dashboard_renders_for_signed_in_admin(self):
        self.client.force_login(self.admin)
        response = self.client.get("/admin-panel/dashboard")
        self.assertEqual(response.status_code, 200)
        html = response.content.decode()
        self.assertIn("<title>Dashboard | Aries Mall Admin</title>", html)
        self.assertIn("staff@ariesmall.com", html)
        self.assertIn("Oak Dining Table", html)

    def test_signed_in_admin_skips_login_page(self):
        self.client.force_login(self.admin)
        response = self.client.get("/admin-panel/admin-login")
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response["Location"], "/admin-panel/dashboard")

    def test_shopper_is_sent_to_admin_login(self):
        shopper = User.objects.create_user(
            username="shopper@example.com", email="shopper@example.com", password="ShopperPass123"
        )
        self.client.force_login(shopper)
        response = self.client.get("/admin-panel/media-hub")
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response["Location"], "/admin-panel/admin-login")
