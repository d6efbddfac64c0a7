from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User

from .models import Meel, MeelPartner
from .services import MeelService


PARTNERS = [
    {"name": "Ravi", "mobile": "9876543210", "contribution": "600"},
    {"name": "Kiran", "mobile": "9876500000", "contribution": "300"},
]


class MeelApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="owner", email="owner@example.com", password="StrongPass123!")
        self.other = User.objects.create_user(username="other", email="other@example.com", password="StrongPass123!")
        self.client.force_authenticate(user=self.user)

    def _payload(self, **overrides):
        payload = {
            "crop_name": "Wheat",
            "transaction_type": "Buy",
            "transaction_mode": "With Partner",
            "total_cost": "1000",
            "tag": "rabi-2024",
            "partners": PARTNERS,
        }
        payload.update(overrides)
        return payload

    def _create(self, user=None, **overrides):
        values = {
            "crop_name": "Wheat",
            "transaction_type": Meel.TransactionType.BUY,
            "transaction_mode": Meel.TransactionMode.INDIVIDUAL,
            "total_cost": Decimal("1000"),
            "tag": "rabi",
        }
        values.update(overrides)
        return MeelService.create(user=user or self.user, **values)

    @patch("apps.meel.views.MeelAuditService.log_meel_created")
    def test_create_with_partners_exposes_computed_fields(self, log_created):
        response = self.client.post("/api/meel/", self._payload(), format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["message"], "Meel record created successfully")
        meel = response.data["meel"]
        self.assertEqual(meel["total_partners"], 2)
        self.assertEqual(meel["total_contribution"], Decimal("900"))
        self.assertEqual(meel["pending_amount"], Decimal("100"))
        self.assertEqual(meel["created_by"], "owner")
        log_created.assert_called_once()

    def test_partner_mode_requires_partners(self):
        response = self.client.post("/api/meel/", self._payload(partners=[]), format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("partners", response.data)

    def test_buy_contribution_cannot_exceed_total_cost(self):
        response = self.client.post("/api/meel/", self._payload(total_cost="800"), format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("cannot exceed total cost", str(response.data["partners"]))

    def test_sell_contribution_may_exceed_total_cost(self):
        response = self.client.post(
            "/api/meel/",
            self._payload(transaction_type="Sell", total_cost="800"),
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["meel"]["pending_amount"], Decimal("0"))

    def test_individual_mode_drops_partners(self):
        response = self.client.post(
            "/api/meel/",
            self._payload(transaction_mode="Individual"),
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["meel"]["partners"], [])
        self.assertFalse(MeelPartner.objects.exists())

    def test_partner_field_validation(self):
        response = self.client.post(
            "/api/meel/",
            self._payload(partners=[{"name": "Ravi", "mobile": "123", "contribution": "-1"}]),
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("partners", response.data)

    def test_list_is_scoped_filtered_and_paginated(self):
        for index in range(3):
            self._create(tag=f"kharif-{index}")
        self._create(crop_name="Rice", transaction_type=Meel.TransactionType.SELL, tag="rabi")
        self._create(user=self.other, tag="kharif-x")

        response = self.client.get("/api/meel/", {"tag": "KHARIF", "limit": 2})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["meel_records"]), 2)
        self.assertEqual(response.data["pagination"], {"page": 1, "limit": 2, "total": 3, "pages": 2})

        response = self.client.get("/api/meel/", {"transaction_type": "Sell"})
        self.assertEqual([item["crop_name"] for item in response.data["meel_records"]], ["Rice"])

    def test_limit_over_hundred_is_rejected(self):
        response = self.client.get("/api/meel/", {"limit": 101})
        self.assertEqual(response.status_code, 400)

    def test_other_users_record_is_not_found(self):
        meel = self._create(user=self.other)
        self.assertEqual(self.client.get(f"/api/meel/{meel.id}/").status_code, 404)
        self.assertEqual(self.client.delete(f"/api/meel/{meel.id}/").status_code, 404)
        self.assertTrue(Meel.objects.filter(id=meel.id).exists())

    @patch("apps.meel.views.MeelAuditService.log_meel_updated")
    def test_put_is_partial_and_revalidates_contributions(self, log_updated):
        meel = MeelService.create(
            user=self.user,
            crop_name="Wheat",
            transaction_type=Meel.TransactionType.BUY,
            transaction_mode=Meel.TransactionMode.WITH_PARTNER,
            total_cost=Decimal("1000"),
            tag="rabi",
            partners=[{"name": "Ravi", "mobile": "9876543210", "contribution": Decimal("900")}],
        )

        response = self.client.put(f"/api/meel/{meel.id}/", {"tag": "rabi-late"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["meel"]["tag"], "rabi-late")
        self.assertEqual(response.data["meel"]["total_partners"], 1)
        log_updated.assert_called_once()

        response = self.client.put(f"/api/meel/{meel.id}/", {"total_cost": "500"}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_stats_overview(self):
        self._create(total_cost=Decimal("1000"), tag="a")
        self._create(total_cost=Decimal("500"), tag="a")
        self._create(transaction_type=Meel.TransactionType.SELL, total_cost=Decimal("2000"), tag="b")
        self._create(user=self.other, total_cost=Decimal("99999"))

        response = self.client.get("/api/meel/stats/overview/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["overview"]["total_meel_records"], 3)
        self.assertEqual(response.data["overview"]["buy_records"], 2)
        self.assertEqual(response.data["overview"]["individual_records"], 3)
        self.assertEqual(response.data["financials"]["total_buy_cost"], Decimal("1500"))
        self.assertEqual(response.data["financials"]["net_profit"], Decimal("500"))
        self.assertEqual(response.data["top_tags"][0], {"tag": "a", "count": 2})
