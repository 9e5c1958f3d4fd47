import logging
from decimal import Decimal, InvalidOperation

from django.http import JsonResponse

from core.api import api_view, parse_json
from core.errors import ForbiddenError, InvalidInputError, NotFoundError

from .cart import Cart
from .checkout import SHIPPING_OPTIONS, summarize
from .models import Product


logger = logging.getLogger(__name__)


def serialize_product(p: Product) -> dict:
    return {"id_produit": p.id, "nom_produit": p.name, "prix_produit": str(p.price)}


@api_view(["GET"])
def product_lookup(request):
    name = (request.GET.get("nom") or "").strip()
    if not name:
        return JsonResponse({"produits": [serialize_product(p) for p in Product.objects.filter(is_active=True)]})
    product = Product.objects.filter(name=name, is_active=True).first()
    if product is None:
        raise NotFoundError("Produit non trouvé")
    return JsonResponse(serialize_product(product))


def _parse_price(value):
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite() or price < 0:
        return None
    return price.quantize(Decimal("0.01"))


@api_view(["POST"], auth=True)
def product_bulk_add(request):
    """Bulk insert ``{"produits": [{nom_produit, prix_produit}, ...]}``.

    Invalid entries and names already in the catalogue are skipped.
    """
    if not request.member.is_staff:
        raise ForbiddenError("Réservé au personnel")

    data = parse_json(request)
    rows = data.get("produits")
    if not isinstance(rows, list) or not rows:
        raise InvalidInputError("Une liste de produits est attendue", field="produits")

    existing = set(Product.objects.values_list("name", flat=True))
    created, skipped = [], []
    for row in rows:
        name = str(row.get("nom_produit") or "").strip() if isinstance(row, dict) else ""
        price = _parse_price(row.get("prix_produit")) if isinstance(row, dict) else None
        if not name or price is None or name in existing:
            skipped.append(row)
            continue
        created.append(Product.objects.create(name=name, price=price))
        existing.add(name)

    logger.info("Bulk add: %s created, %s skipped", len(created), len(skipped))
    return JsonResponse(
        {
            "message": f"{len(created)} produit(s) ajouté(s)",
            "produits": [serialize_product(p) for p in created],
            "ignores": len(skipped),
        },
        status=201 if created else 200,
    )


def _cart_payload(cart: Cart, shipping_key: str = "") -> dict:
    items = list(cart)
    summary = summarize(items, shipping_key)
    return {
        "items": [it.as_dict() for it in items],
        "count": sum(it.qty for it in items),
        "shipping": shipping_key if shipping_key in SHIPPING_OPTIONS else "",
        "items_total": str(summary["items_total"]),
        "shipping_cost": str(summary["shipping_cost"]),
        "total": str(summary["total"]),
    }


def _line_from_body(request):
    data = parse_json(request)
    try:
        product_id = int(data.get("id"))
        qty = int(data.get("quantity", 1))
    except (TypeError, ValueError):
        raise InvalidInputError("Produit ou quantité invalide", field="id")
    return product_id, qty


@api_view(["GET"])
def cart_view(request):
    shipping = (request.GET.get("shipping") or "").strip()
    return JsonResponse(_cart_payload(Cart(request), shipping))


@api_view(["POST"])
def cart_add(request):
    product_id, qty = _line_from_body(request)
    if qty <= 0:
        raise InvalidInputError("Quantité invalide", field="quantity")
    if not Product.objects.filter(id=product_id, is_active=True).exists():
        raise NotFoundError("Produit non trouvé")
    cart = Cart(request)
    cart.add(product_id, qty)
    return JsonResponse(_cart_payload(cart))


@api_view(["POST"])
def cart_set(request):
    product_id, qty = _line_from_body(request)
    cart = Cart(request)
    cart.set(product_id, qty)
    return JsonResponse(_cart_payload(cart))


@api_view(["POST"])
def cart_clear(request):
    cart = Cart(request)
    cart.clear()
    return JsonResponse(_cart_payload(cart))
