import json
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from accounts.tokens import create_access_token
from orders.models import Order, OrderItem
from payments.models import Payment
from shop.models import Product


class PurchaseTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            username="lea@example.com", email="lea@example.com", password="Str0ng-Passw0rd!x"
        )
        self.headers = {"HTTP_AUTHORIZATION": f"Bearer {create_access_token(self.user)}"}
        self.leggings = Product.objects.create(name="Leggings", price=Decimal("5.99"))
        self.hoodie = Product.objects.create(name="Hoodie", price=Decimal("24.99"))

    def _post(self, name, body):
        return self.client.post(reverse(name), data=json.dumps(body), content_type="application/json", **self.headers)

    def test_purchase_total_and_payment(self):
        response = self._post(
            "orders:purchase",
            {
                "type_paiement": "visa",
                "produits": [
                    {"id_produit": self.leggings.id, "quantite": 2},
                    {"id_produit": self.hoodie.id, "quantite": 1},
                    {"id_produit": self.leggings.id, "quantite": 1},
                ],
            },
        )
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data["panier"], "La somme est de 42.96")
        self.assertEqual(data["paiement"]["montant_paiement"], "42.96")
        self.assertEqual(data["paiement"]["type_paiement"], "visa")

        order = Order.objects.get()
        self.assertEqual(order.items.count(), 2)
        self.assertEqual(order.items.get(product=self.leggings).qty, 3)
        self.assertEqual(Payment.objects.get().order, order)

    def test_unknown_product_writes_nothing(self):
        response = self._post(
            "orders:purchase",
            {"type_paiement": "visa", "produits": [{"id_produit": 999, "quantite": 1}]},
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Order.objects.exists())
        self.assertFalse(Payment.objects.exists())

    def test_zero_quantity_rejected(self):
        response = self._post(
            "orders:purchase",
            {"type_paiement": "visa", "produits": [{"id_produit": self.leggings.id, "quantite": 0}]},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "quantite")

    def test_payment_type_required(self):
        response = self._post("orders:purchase", {"produits": [{"id_produit": self.leggings.id}]})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "type_paiement")

    def test_history_keeps_price_at_purchase(self):
        self._post("orders:purchase", {"type_paiement": "coupon", "produits": [{"id_produit": self.hoodie.id}]})
        Product.objects.filter(pk=self.hoodie.id).update(price=Decimal("30.00"))

        response = self.client.get(reverse("orders:list"), **self.headers)
        rows = response.json()["orders"]
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["nom_produit"], "Hoodie")
        self.assertEqual(rows[0]["prix_produit"], "24.99")
        self.assertEqual(rows[0]["quantite_achat"], 1)

    def test_purchase_needs_token(self):
        response = self.client.post(
            reverse("orders:purchase"),
            data=json.dumps({"type_paiement": "visa", "produits": [{"id_produit": self.leggings.id}]}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 401)


class CartCheckoutTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            username="marc@example.com", email="marc@example.com", password="Str0ng-Passw0rd!x"
        )
        self.headers = {"HTTP_AUTHORIZATION": f"Bearer {create_access_token(self.user)}"}
        self.product = Product.objects.create(name="Gilet", price=Decimal("9.99"))

    def _checkout(self, body):
        return self.client.post(
            reverse("orders:checkout"), data=json.dumps(body), content_type="application/json", **self.headers
        )

    def test_checkout_records_order_with_shipping_and_empties_cart(self):
        self.client.post(
            reverse("shop:cart_add"),
            data=json.dumps({"id": self.product.id, "quantity": 2}),
            content_type="application/json",
        )
        response = self._checkout({"shipping": "standard", "payment": "apple-pay"})
        self.assertEqual(response.status_code, 201)

        order = OrderItem.objects.get().order
        self.assertEqual(order.shipping_cost, Decimal("3.90"))
        self.assertEqual(order.total, Decimal("23.88"))
        self.assertEqual(self.client.get(reverse("shop:cart")).json()["count"], 0)

    def test_checkout_needs_both_options(self):
        response = self._checkout({"shipping": "standard"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "payment")

    def test_empty_cart(self):
        response = self._checkout({"shipping": "express", "payment": "visa"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(OrderItem.objects.exists())
