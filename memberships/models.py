import calendar
from datetime import date

from django.conf import settings
from django.db import models
from django.utils import timezone


def add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class SubscriptionType(models.Model):
    """Formule d'abonnement (ESSENTIAL, ORIGINAL, ULTRA …)."""

    name = models.CharField("Nom", max_length=64, unique=True)
    monthly_price = models.DecimalField("Prix mensuel", max_digits=8, decimal_places=2)
    description = models.TextField("Description", blank=True, default="")

    class Meta:
        verbose_name = "Type d'abonnement"
        verbose_name_plural = "Types d'abonnement"
        ordering = ["monthly_price", "name"]

    def __str__(self):
        return self.name

    def as_dict(self) -> dict:
        return {
            "id_type_abonnement": self.id,
            "nom_type_abonnement": self.name,
            "prix_type_abonnement": str(self.monthly_price),
            "description_type_abonnement": self.description,
        }


class Membership(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name="Inscrit",
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    subscription_type = models.ForeignKey(
        SubscriptionType,
        verbose_name="Type",
        on_delete=models.PROTECT,
        related_name="memberships",
    )

    duration_months = models.PositiveIntegerField("Durée, mois", default=1)
    start_date = models.DateField("Début", default=timezone.localdate)
    end_date = models.DateField("Fin")
    price = models.DecimalField("Prix", max_digits=10, decimal_places=2)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Abonnement"
        verbose_name_plural = "Abonnements"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.subscription_type} — {self.user} ({self.start_date} → {self.end_date})"

    def as_dict(self) -> dict:
        return {
            "id_abonnement": self.id,
            "duree_abonnement": self.duration_months,
            "datedebut_abonnement": self.start_date.isoformat(),
            "datefin_abonnement": self.end_date.isoformat(),
            "prix_abonnement": str(self.price),
            "actif_abonnement": self.is_active,
            "id_type_abonnement": self.subscription_type_id,
            "nom_type_abonnement": self.subscription_type.name,
            "id_inscrit": self.user_id,
        }
