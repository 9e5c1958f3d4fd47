import json
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from accounts.tokens import create_access_token
from memberships.models import Membership, SubscriptionType, add_months
from payments.models import Payment


class AddMonthsTests(TestCase):
    def test_end_of_month_is_clamped(self):
        self.assertEqual(add_months(date(2026, 1, 31), 1), date(2026, 2, 28))
        self.assertEqual(add_months(date(2026, 11, 15), 3), date(2027, 2, 15))


class SubscriptionTypeApiTests(TestCase):
    def setUp(self):
        SubscriptionType.objects.create(name="ESSENTIAL", monthly_price=Decimal("7.99"))
        SubscriptionType.objects.create(name="ULTRA", monthly_price=Decimal("10.99"))

    def test_list_all(self):
        response = self.client.get(reverse("memberships:types"))
        self.assertEqual([t["nom_type_abonnement"] for t in response.json()], ["ESSENTIAL", "ULTRA"])

    def test_lookup_is_case_insensitive(self):
        response = self.client.get(reverse("memberships:types"), {"nom": "ultra"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]["prix_type_abonnement"], "10.99")

    def test_unknown_type_is_404(self):
        response = self.client.get(reverse("memberships:types"), {"nom": "GOLD"})
        self.assertEqual(response.status_code, 404)


class MembershipApiTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            username="sophie@example.com", email="sophie@example.com", password="Str0ng-Passw0rd!x"
        )
        self.headers = {"HTTP_AUTHORIZATION": f"Bearer {create_access_token(self.user)}"}
        self.original = SubscriptionType.objects.create(name="ORIGINAL", monthly_price=Decimal("9.99"))

    def _subscribe(self, **overrides):
        body = {
            "id_type_abonnement": self.original.id,
            "duree_abonnement": 3,
            "datedebut_abonnement": "2026-01-31",
            "type_paiement": "visa",
        }
        body.update(overrides)
        return self.client.post(
            reverse("memberships:subscribe"),
            data=json.dumps(body),
            content_type="application/json",
            **self.headers,
        )

    def test_check_without_membership_is_404(self):
        response = self.client.get(reverse("memberships:check"), **self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Aucun abonnement actif trouvé")

    def test_subscribe_creates_membership_and_payment(self):
        response = self._subscribe()
        self.assertEqual(response.status_code, 201)

        data = response.json()
        self.assertEqual(data["abonnement"]["prix_abonnement"], "29.97")
        self.assertEqual(data["abonnement"]["datefin_abonnement"], "2026-04-30")
        self.assertEqual(data["paiement"]["id_abonnement"], data["abonnement"]["id_abonnement"])
        self.assertEqual(Payment.objects.get().amount, Decimal("29.97"))

        check = self.client.get(reverse("memberships:check"), **self.headers).json()
        self.assertEqual(check["nom_type_abonnement"], "ORIGINAL")

    def test_second_active_subscription_conflicts(self):
        self._subscribe()
        response = self._subscribe()
        self.assertEqual(response.status_code, 409)
        self.assertEqual(Membership.objects.count(), 1)
        self.assertEqual(Payment.objects.count(), 1)

    def test_unknown_type(self):
        response = self._subscribe(id_type_abonnement=999)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "id_type_abonnement")
        self.assertFalse(Membership.objects.exists())

    def test_cancel_then_subscribe_again(self):
        self._subscribe()
        response = self.client.put(reverse("memberships:cancel"), **self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["abonnement"]["actif_abonnement"])

        self.assertEqual(self.client.put(reverse("memberships:cancel"), **self.headers).status_code, 404)
        self.assertEqual(self._subscribe().status_code, 201)

    def test_subscribe_locks_member_before_checking(self):
        user_model = get_user_model()
        with patch.object(
            user_model.objects, "select_for_update", wraps=user_model.objects.select_for_update
        ) as lock:
            self._subscribe()
        lock.assert_called_once_with()
        self.assertEqual(Membership.objects.filter(user=self.user, is_active=True).count(), 1)

    def test_concurrent_subscribe_sees_committed_membership(self):
        # the other request committed while this one waited on the member lock
        def other_request_commits(user):
            Membership.objects.create(
                user=user,
                subscription_type=self.original,
                end_date=date(2026, 12, 31),
                price=Decimal("9.99"),
            )

        with patch("memberships.services.lock_member", side_effect=other_request_commits):
            response = self._subscribe()
        self.assertEqual(response.status_code, 409)
        self.assertEqual(Membership.objects.filter(user=self.user, is_active=True).count(), 1)
        self.assertFalse(Payment.objects.exists())
