from __future__ import annotations

import logging
from datetime import date, datetime

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from core.errors import ConflictError, InvalidInputError, NotFoundError
from orders.services import validate_payment_method
from payments.models import Payment

from .models import Membership, SubscriptionType, add_months


logger = logging.getLogger(__name__)

MAX_DURATION_MONTHS = 36


def find_subscription_types(name: str | None = None) -> list[SubscriptionType]:
    qs = SubscriptionType.objects.all()
    if not name:
        return list(qs)
    found = list(qs.filter(name__iexact=name.strip()))
    if not found:
        raise NotFoundError("Type d’abonnement non trouvé")
    return found


def active_membership(user) -> Membership | None:
    return (
        Membership.objects
        .select_related("subscription_type")
        .filter(user=user, is_active=True)
        .first()
    )


def _parse_start(value) -> date:
    if not value:
        return timezone.localdate()
    try:
        return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        raise InvalidInputError("Date de début invalide, format attendu AAAA-MM-JJ", field="datedebut_abonnement")


def _parse_duration(value) -> int:
    try:
        months = int(value if value not in (None, "") else 1)
    except (TypeError, ValueError):
        raise InvalidInputError("Durée invalide", field="duree_abonnement")
    if not 1 <= months <= MAX_DURATION_MONTHS:
        raise InvalidInputError("Durée invalide", field="duree_abonnement")
    return months


def lock_member(user) -> None:
    # verrou sur la ligne du membre, même sans abonnement existant
    get_user_model().objects.select_for_update().get(pk=user.pk)


@transaction.atomic
def subscribe(user, type_id, payment_method, *, duration_months=1, start=None) -> tuple[Membership, Payment]:
    """Create the member's subscription and its payment.

    Price = monthly price × months, computed here and never taken from the client.
    """
    try:
        sub_type = SubscriptionType.objects.get(pk=int(type_id))
    except (TypeError, ValueError, SubscriptionType.DoesNotExist):
        raise InvalidInputError("Type d’abonnement inconnu", field="id_type_abonnement")

    months = _parse_duration(duration_months)
    start_date = _parse_start(start)
    payment_method = validate_payment_method(payment_method)

    lock_member(user)
    if Membership.objects.filter(user=user, is_active=True).exists():
        raise ConflictError("Un abonnement actif existe déjà")

    membership = Membership.objects.create(
        user=user,
        subscription_type=sub_type,
        duration_months=months,
        start_date=start_date,
        end_date=add_months(start_date, months),
        price=sub_type.monthly_price * months,
    )
    payment = Payment.objects.create(
        user=user,
        amount=membership.price,
        method=payment_method,
        membership=membership,
    )
    logger.info("Membership #%s (%s) created for member %s", membership.id, sub_type.name, user.pk)
    return membership, payment


def cancel(user) -> Membership:
    membership = active_membership(user)
    if membership is None:
        raise NotFoundError("Aucun abonnement actif à annuler")
    membership.is_active = False
    membership.save(update_fields=["is_active"])
    logger.info("Membership #%s cancelled by member %s", membership.id, user.pk)
    return membership
