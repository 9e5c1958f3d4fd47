import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SubscriptionType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=64, unique=True, verbose_name="Nom")),
                ("monthly_price", models.DecimalField(decimal_places=2, max_digits=8, verbose_name="Prix mensuel")),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
            ],
            options={
                "verbose_name": "Type d'abonnement",
                "verbose_name_plural": "Types d'abonnement",
                "ordering": ["monthly_price", "name"],
            },
        ),
        migrations.CreateModel(
            name="Membership",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("duration_months", models.PositiveIntegerField(default=1, verbose_name="Durée, mois")),
                ("start_date", models.DateField(default=django.utils.timezone.localdate, verbose_name="Début")),
                ("end_date", models.DateField(verbose_name="Fin")),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Prix")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "subscription_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="memberships",
                        to="memberships.subscriptiontype",
                        verbose_name="Type",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Inscrit",
                    ),
                ),
            ],
            options={"verbose_name": "Abonnement", "verbose_name_plural": "Abonnements", "ordering": ["-created_at", "-id"]},
        ),
    ]
