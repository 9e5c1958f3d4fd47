from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    class Civility(models.TextChoices):
        MR = "M", "Monsieur"
        MRS = "Mme", "Madame"
        OTHER = "Autre", "Autre"

    civility = models.CharField("Civilité", max_length=8, choices=Civility.choices, blank=True, default="")
    phone = models.CharField("Téléphone", max_length=32, blank=True)
    address = models.CharField("Adresse", max_length=255, blank=True)
    birth_date = models.DateField("Date de naissance", null=True, blank=True)
    member_type = models.CharField("Type d'inscrit", max_length=32, default="client")

    class Meta:
        verbose_name = "Inscrit"
        verbose_name_plural = "Inscrits"

    def get_full_name(self):
        return " ".join(
            part.strip() for part in [self.first_name, self.last_name] if part and part.strip()
        ).strip()

    def __str__(self):
        return self.get_full_name() or self.email or f"Inscrit #{self.pk}"
