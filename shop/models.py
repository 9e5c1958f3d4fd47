from django.db import models


class Product(models.Model):
    name = models.CharField("Nom", max_length=140, unique=True)
    price = models.DecimalField("Prix", max_digits=10, decimal_places=2)
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name = "Produit"
        verbose_name_plural = "Produits"
        ordering = ("name",)

    def __str__(self):
        return self.name
