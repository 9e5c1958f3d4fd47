from django.http import JsonResponse

from core.api import api_view, parse_json
from core.errors import InvalidInputError
from shop.cart import Cart
from shop.checkout import validate_checkout

from .services import create_order, purchase_history


def _order_response(order, payment) -> JsonResponse:
    return JsonResponse(
        {
            "message": "Panier et paiement créés avec succès",
            "panier": f"La somme est de {order.total}",
            "id_achat": order.id,
            "paiement": payment.as_dict(),
        },
        status=201,
    )


@api_view(["POST"], auth=True)
def purchase(request):
    data = parse_json(request)
    order, payment = create_order(
        request.member,
        data.get("produits"),
        data.get("type_paiement"),
    )
    return _order_response(order, payment)


@api_view(["POST"], auth=True)
def checkout(request):
    """Validate the session cart with shipping + payment and record it."""
    data = parse_json(request)
    shipping = (data.get("shipping") or "").strip()
    payment_method = (data.get("payment") or "").strip()
    validate_checkout(shipping, payment_method)

    cart = Cart(request)
    items = list(cart)
    if not items:
        raise InvalidInputError("Panier vide", field="cart")

    lines = [{"id_produit": it.product_id, "quantite": it.qty} for it in items]
    order, payment = create_order(request.member, lines, payment_method, shipping_key=shipping)
    cart.clear()
    return _order_response(order, payment)


@api_view(["GET"], auth=True)
def orders(request):
    return JsonResponse({
        "message": "Achats récupérés avec succès",
        "orders": purchase_history(request.member),
    })
