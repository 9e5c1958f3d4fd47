from django.conf import settings
from django.db import models
from django.utils import timezone


class Payment(models.Model):
    """Paiement enregistré (achat boutique ou abonnement). Aucun débit réel."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name="Inscrit",
        on_delete=models.CASCADE,
        related_name="payments",
        db_index=True,
    )
    amount = models.DecimalField("Montant", max_digits=10, decimal_places=2)
    paid_on = models.DateField("Date", default=timezone.localdate)
    method = models.CharField("Type de paiement", max_length=32)

    order = models.ForeignKey(
        "orders.Order",
        verbose_name="Achat",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
    )
    membership = models.ForeignKey(
        "memberships.Membership",
        verbose_name="Abonnement",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
    )

    class Meta:
        verbose_name = "Paiement"
        verbose_name_plural = "Paiements"
        ordering = ["-paid_on", "-id"]

    def __str__(self):
        return f"Paiement#{self.id} {self.amount} ({self.method})"

    def as_dict(self) -> dict:
        return {
            "id_paiement": self.id,
            "montant_paiement": str(self.amount),
            "date_paiement": self.paid_on.isoformat(),
            "type_paiement": self.method,
            "id_achat": self.order_id,
            "id_abonnement": self.membership_id,
            "id_inscrit": self.user_id,
        }
