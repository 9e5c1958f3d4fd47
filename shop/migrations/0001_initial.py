from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=140, unique=True, verbose_name="Nom")),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Prix")),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={"verbose_name": "Produit", "verbose_name_plural": "Produits", "ordering": ("name",)},
        ),
    ]
