from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User

from .models import Property


class PropertyModelTests(TestCase):
    def test_total_cost_defaults_to_area_times_rate(self):
        prop = Property.objects.create(
            property_type=Property.Type.BUY,
            area=Decimal("2.5"),
            area_unit=Property.AreaUnit.BIGHA,
            partner_name="Gopal",
            rate_per_unit=Decimal("40000"),
            total_cost=None,
        )
        self.assertEqual(prop.total_cost, Decimal("100000.00"))
        self.assertEqual(prop.amount_pending, Decimal("100000.00"))

    def test_pending_never_negative(self):
        prop = Property.objects.create(
            property_type=Property.Type.SELL,
            area=Decimal("1"),
            area_unit=Property.AreaUnit.GAJ,
            partner_name="Gopal",
            rate_per_unit=Decimal("100"),
            total_cost=Decimal("100"),
            amount_paid=Decimal("150"),
        )
        self.assertEqual(prop.amount_pending, Decimal("0.00"))
        self.assertEqual(prop.profit, Decimal("50"))


class PropertyApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="owner", email="owner@example.com", password="StrongPass123!")
        self.client.force_authenticate(user=self.user)

    def _create(self, **overrides):
        values = {
            "property_type": "buy",
            "area": Decimal("1"),
            "area_unit": "Bigha",
            "partner_name": "Gopal",
            "rate_per_unit": Decimal("1000"),
            "total_cost": Decimal("1000"),
            "transaction_date": date(2024, 1, 1),
        }
        values.update(overrides)
        return Property.objects.create(**values)

    @patch("apps.properties.views.PropertiesAuditService.log_property_created")
    def test_create_defaults_paid_and_computes_pending(self, log_created):
        response = self.client.post(
            "/api/properties/",
            {
                "property_type": "buy",
                "area": "2",
                "area_unit": "Bigha",
                "partner_name": "Gopal",
                "rate_per_unit": "5000",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["total_cost"], Decimal("10000.00"))
        self.assertEqual(response.data["amount_paid"], Decimal("0.00"))
        self.assertEqual(response.data["amount_pending"], Decimal("10000.00"))
        log_created.assert_called_once()

    def test_create_rejects_bad_unit_and_missing_partner(self):
        response = self.client.post(
            "/api/properties/",
            {"property_type": "rent", "area": "2", "area_unit": "Acre", "rate_per_unit": "5"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        for field in ("property_type", "area_unit", "partner_name"):
            self.assertIn(field, response.data)

    def test_update_recomputes_pending(self):
        prop = self._create()
        response = self.client.patch(f"/api/properties/{prop.id}/", {"amount_paid": "400"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["amount_pending"], Decimal("600.00"))

    def test_list_filters(self):
        self._create(partner_name="Gopal Singh")
        self._create(property_type="sell", partner_name="Hari", transaction_date=date(2024, 5, 1))

        response = self.client.get("/api/properties/", {"partner_name": "gopal"})
        self.assertEqual(len(response.data), 1)

        response = self.client.get("/api/properties/", {"property_type": "sell"})
        self.assertEqual(response.data[0]["partner_name"], "Hari")

        response = self.client.get("/api/properties/", {"start_date": "2024-04-01", "end_date": "2024-06-01"})
        self.assertEqual(len(response.data), 1)

    def test_overview(self):
        self._create(total_cost=Decimal("1000"), amount_paid=Decimal("200"))
        self._create(
            property_type="sell",
            area=Decimal("2"),
            total_cost=Decimal("1500"),
            amount_paid=Decimal("1200"),
        )

        response = self.client.get("/api/properties/summary/overview/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total_properties"], 2)
        self.assertEqual(response.data["buy_properties"], 1)
        self.assertEqual(response.data["sell_properties"], 1)
        self.assertEqual(response.data["total_investment"], Decimal("1000"))
        self.assertEqual(response.data["total_revenue"], Decimal("1200"))
        self.assertEqual(response.data["total_pending"], Decimal("1100"))
        self.assertEqual(response.data["total_area"], Decimal("3"))
        self.assertEqual(response.data["total_profit"], Decimal("200"))

    def test_delete_unknown_returns_404(self):
        response = self.client.delete("/api/properties/999/")
        self.assertEqual(response.status_code, 404)
