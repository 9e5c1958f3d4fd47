from django.http import JsonResponse

from core.api import api_view, parse_json
from core.errors import NotFoundError

from . import services


@api_view(["GET"])
def subscription_types(request):
    """All types, or the one matching ``?nom=`` (case-insensitive)."""
    found = services.find_subscription_types(request.GET.get("nom"))
    return JsonResponse([t.as_dict() for t in found], safe=False)


@api_view(["GET"], auth=True)
def check(request):
    membership = services.active_membership(request.member)
    if membership is None:
        raise NotFoundError("Aucun abonnement actif trouvé")
    return JsonResponse(membership.as_dict())


@api_view(["POST"], auth=True)
def subscribe(request):
    data = parse_json(request)
    membership, payment = services.subscribe(
        request.member,
        data.get("id_type_abonnement"),
        data.get("type_paiement"),
        duration_months=data.get("duree_abonnement"),
        start=data.get("datedebut_abonnement"),
    )
    return JsonResponse(
        {
            "message": "Abonnement et paiement créés avec succès",
            "abonnement": membership.as_dict(),
            "paiement": payment.as_dict(),
        },
        status=201,
    )


@api_view(["PUT"], auth=True)
def cancel(request):
    membership = services.cancel(request.member)
    return JsonResponse({"message": "Abonnement annulé avec succès", "abonnement": membership.as_dict()})
