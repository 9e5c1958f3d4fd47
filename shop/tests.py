import json
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.sessions.backends.db import SessionStore
from django.test import RequestFactory, TestCase
from django.urls import reverse

from accounts.tokens import create_access_token
from core.errors import InvalidInputError
from shop.cart import Cart
from shop.checkout import summarize, validate_checkout
from shop.models import Product


class CartTests(TestCase):
    def setUp(self):
        self.request = RequestFactory().get("/")
        self.request.session = SessionStore()
        self.leggings = Product.objects.create(name="Leggings", price=Decimal("5.99"))
        self.hoodie = Product.objects.create(name="Hoodie", price=Decimal("24.99"))

    def test_adding_same_product_merges_quantities(self):
        cart = Cart(self.request)
        cart.add(self.leggings.id, 2)
        cart.add(self.leggings.id, 3)

        items = list(cart)
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].qty, 5)
        self.assertEqual(cart.count, 5)

    def test_set_zero_removes_line(self):
        cart = Cart(self.request)
        cart.add(self.leggings.id, 1)
        cart.add(self.hoodie.id, 1)
        cart.set(self.leggings.id, 0)
        self.assertEqual([it.product_id for it in cart], [self.hoodie.id])

    def test_cart_survives_in_session(self):
        Cart(self.request).add(self.hoodie.id, 2)
        self.assertEqual(Cart(self.request).count, 2)

    def test_inactive_products_are_hidden(self):
        cart = Cart(self.request)
        cart.add(self.hoodie.id, 1)
        Product.objects.filter(pk=self.hoodie.id).update(is_active=False)
        self.assertEqual(list(cart), [])


class CheckoutSummaryTests(TestCase):
    def setUp(self):
        self.request = RequestFactory().get("/")
        self.request.session = SessionStore()
        self.leggings = Product.objects.create(name="Leggings", price=Decimal("5.99"))

    def test_total_includes_shipping(self):
        cart = Cart(self.request)
        cart.add(self.leggings.id, 2)

        summary = summarize(list(cart), "express")
        self.assertEqual(summary["items_total"], Decimal("11.98"))
        self.assertEqual(summary["shipping_cost"], Decimal("7.85"))
        self.assertEqual(summary["total"], Decimal("19.83"))

    def test_no_shipping_selected_costs_nothing(self):
        self.assertEqual(summarize([], None)["total"], Decimal("0.00"))

    def test_both_options_required(self):
        with self.assertRaises(InvalidInputError) as ctx:
            validate_checkout("standard", "")
        self.assertEqual(ctx.exception.field, "payment")
        with self.assertRaises(InvalidInputError) as ctx:
            validate_checkout("", "visa")
        self.assertEqual(ctx.exception.field, "shipping")


class CatalogApiTests(TestCase):
    def setUp(self):
        Product.objects.create(name="Leggings", price=Decimal("5.99"))
        self.staff = get_user_model().objects.create_user(
            username="staff@example.com", email="staff@example.com", password="Str0ng-Passw0rd!x", is_staff=True
        )

    def test_lookup_by_name(self):
        response = self.client.get(reverse("shop:product"), {"nom": "Leggings"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["prix_produit"], "5.99")

    def test_lookup_missing_is_404(self):
        response = self.client.get(reverse("shop:product"), {"nom": "Haltères"})
        self.assertEqual(response.status_code, 404)

    def test_list_without_name(self):
        response = self.client.get(reverse("shop:product"))
        self.assertEqual([p["nom_produit"] for p in response.json()["produits"]], ["Leggings"])

    def test_bulk_add_skips_invalid_and_duplicates(self):
        body = {
            "produits": [
                {"nom_produit": "Gilet", "prix_produit": "9.99"},
                {"nom_produit": "Leggings", "prix_produit": "1.00"},
                {"nom_produit": "", "prix_produit": "3"},
                {"nom_produit": "Short", "prix_produit": "abc"},
                {"nom_produit": "Gilet", "prix_produit": "8.00"},
            ]
        }
        response = self.client.post(
            reverse("shop:product_add"),
            data=json.dumps(body),
            content_type="application/json",
            HTTP_AUTHORIZATION=f"Bearer {create_access_token(self.staff)}",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["ignores"], 4)
        self.assertEqual(Product.objects.get(name="Gilet").price, Decimal("9.99"))
        self.assertEqual(Product.objects.get(name="Leggings").price, Decimal("5.99"))

    def test_bulk_add_needs_staff(self):
        member = get_user_model().objects.create_user(
            username="m@example.com", email="m@example.com", password="Str0ng-Passw0rd!x"
        )
        response = self.client.post(
            reverse("shop:product_add"),
            data=json.dumps({"produits": [{"nom_produit": "Gilet", "prix_produit": "9.99"}]}),
            content_type="application/json",
            HTTP_AUTHORIZATION=f"Bearer {create_access_token(member)}",
        )
        self.assertEqual(response.status_code, 403)
        self.assertFalse(Product.objects.filter(name="Gilet").exists())


class CartApiTests(TestCase):
    def setUp(self):
        self.product = Product.objects.create(name="Hoodie", price=Decimal("24.99"))

    def _post(self, name, body=None):
        return self.client.post(reverse(name), data=json.dumps(body or {}), content_type="application/json")

    def test_add_set_clear(self):
        self._post("shop:cart_add", {"id": self.product.id, "quantity": 1})
        data = self._post("shop:cart_add", {"id": self.product.id, "quantity": 2}).json()
        self.assertEqual(data["count"], 3)
        self.assertEqual(data["items_total"], "74.97")

        data = self._post("shop:cart_set", {"id": self.product.id, "quantity": 0}).json()
        self.assertEqual(data["items"], [])

        self._post("shop:cart_add", {"id": self.product.id})
        data = self._post("shop:cart_clear").json()
        self.assertEqual(data["count"], 0)

    def test_summary_with_shipping(self):
        self._post("shop:cart_add", {"id": self.product.id, "quantity": 1})
        data = self.client.get(reverse("shop:cart"), {"shipping": "economy"}).json()
        self.assertEqual(data["shipping_cost"], "1.99")
        self.assertEqual(data["total"], "26.98")

    def test_add_unknown_product(self):
        response = self._post("shop:cart_add", {"id": 999})
        self.assertEqual(response.status_code, 404)
