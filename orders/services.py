from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from core.errors import InvalidInputError
from payments.models import Payment
from shop.checkout import SHIPPING_OPTIONS, shipping_cost
from shop.models import Product

from .models import Order, OrderItem


logger = logging.getLogger(__name__)


def normalize_lines(lines) -> list[tuple[int, int]]:
    """``[{id_produit, quantite}, ...]`` (or a single dict) → merged ``[(id, qty)]``."""
    if isinstance(lines, dict):
        lines = [lines]
    if not isinstance(lines, list) or not lines:
        raise InvalidInputError("Aucun produit dans l'achat", field="produits")

    merged: dict[int, int] = {}
    for line in lines:
        if not isinstance(line, dict):
            raise InvalidInputError("Ligne de produit invalide", field="produits")
        try:
            pid = int(line.get("id_produit"))
            qty = int(line.get("quantite", 1))
        except (TypeError, ValueError):
            raise InvalidInputError("Ligne de produit invalide", field="produits")
        if qty <= 0:
            raise InvalidInputError("Quantité invalide", field="quantite")
        merged[pid] = merged.get(pid, 0) + qty
    return list(merged.items())


def validate_payment_method(method) -> str:
    method = str(method or "").strip()
    if not method or len(method) > 32:
        raise InvalidInputError("Type de paiement requis", field="type_paiement")
    return method


@transaction.atomic
def create_order(user, lines, payment_method, *, shipping_key: str | None = None) -> tuple[Order, Payment]:
    """Record a purchase, its lines and its payment in one transaction.

    Amount = Σ(qty × current product price) + shipping.
    """
    lines = normalize_lines(lines)
    payment_method = validate_payment_method(payment_method)
    if shipping_key and shipping_key not in SHIPPING_OPTIONS:
        raise InvalidInputError("Option de livraison inconnue", field="shipping")

    ids = [pid for pid, _ in lines]
    products_by_id = {p.id: p for p in Product.objects.filter(id__in=ids, is_active=True)}
    missing = [pid for pid in ids if pid not in products_by_id]
    if missing:
        raise InvalidInputError(f"Produit introuvable : {missing[0]}", field="id_produit")

    shipping = shipping_cost(shipping_key)
    order = Order.objects.create(
        user=user,
        shipping_method=shipping_key or "",
        shipping_cost=shipping,
    )

    items_total = Decimal("0.00")
    for pid, qty in lines:
        p = products_by_id[pid]
        OrderItem.objects.create(
            order=order,
            product=p,
            product_name=p.name,
            unit_price=p.price,
            qty=qty,
        )
        items_total += p.price * qty

    order.total = items_total + shipping
    order.save(update_fields=["total"])

    payment = Payment.objects.create(
        user=user,
        amount=order.total,
        method=payment_method,
        order=order,
    )
    logger.info("Order #%s recorded for member %s: %s", order.id, user.pk, order.total)
    return order, payment


def purchase_history(user) -> list[dict]:
    """One row per purchased line, newest purchase first."""
    items = (
        OrderItem.objects
        .filter(order__user=user)
        .select_related("order")
        .order_by("-order__created_at", "-order_id", "id")
    )
    return [
        {
            "id_achat": it.order_id,
            "date_achat": it.order.created_at.isoformat(),
            "quantite_achat": it.qty,
            "id_produit": it.product_id,
            "nom_produit": it.product_name,
            "prix_produit": str(it.unit_price),
        }
        for it in items
    ]
