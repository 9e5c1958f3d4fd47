from dataclasses import dataclass
from decimal import Decimal

from core.errors import InvalidInputError


@dataclass(frozen=True)
class ShippingOption:
    key: str
    label: str
    price: Decimal
    delay: str


SHIPPING_OPTIONS = {
    "standard": ShippingOption("standard", "LIVRAISON STANDARD", Decimal("3.90"), "9-11 jours ouvrés"),
    "express": ShippingOption("express", "LIVRAISON EXPRESS", Decimal("7.85"), "5-7 jours ouvrés"),
    "economy": ShippingOption("economy", "LIVRAISON ÉCONOMIQUE", Decimal("1.99"), "16-22 jours ouvrés"),
}

PAYMENT_METHODS = {
    "visa": "Visa",
    "coupon": "Coupon Limité",
    "apple-pay": "Apple Pay",
}


def shipping_cost(shipping_key: str | None) -> Decimal:
    option = SHIPPING_OPTIONS.get(shipping_key or "")
    return option.price if option else Decimal("0.00")


def summarize(items, shipping_key: str | None = None) -> dict:
    """Items total plus shipping (0 while no option is selected)."""
    items_total = sum((it.total_price for it in items), Decimal("0.00"))
    shipping = shipping_cost(shipping_key)
    return {
        "items_total": items_total,
        "shipping_cost": shipping,
        "total": items_total + shipping,
    }


def validate_checkout(shipping_key: str | None, payment_method: str | None) -> None:
    if (shipping_key or "") not in SHIPPING_OPTIONS:
        raise InvalidInputError(
            "Veuillez sélectionner une option de livraison et un mode de paiement.", field="shipping"
        )
    if (payment_method or "") not in PAYMENT_METHODS:
        raise InvalidInputError(
            "Veuillez sélectionner une option de livraison et un mode de paiement.", field="payment"
        )
