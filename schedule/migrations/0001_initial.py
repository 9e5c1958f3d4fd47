import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Coach",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120, unique=True, verbose_name="Nom")),
            ],
            options={"verbose_name": "Coach", "verbose_name_plural": "Coachs", "ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "name",
                    models.CharField(
                        choices=[
                            ("Cours Collectifs", "Cours Collectifs"),
                            ("Pole Dance", "Pole Dance"),
                            ("Crosstraining", "Crosstraining"),
                            ("Boxe", "Boxe"),
                            ("Haltérophilie", "Haltérophilie"),
                            ("MMA", "MMA"),
                        ],
                        db_index=True,
                        max_length=64,
                        verbose_name="Nom du cours",
                    ),
                ),
                ("start_at", models.DateTimeField(db_index=True, verbose_name="Date/heure")),
                ("duration_min", models.PositiveIntegerField(default=120, verbose_name="Durée, min")),
                ("price", models.DecimalField(decimal_places=2, default=0, max_digits=8, verbose_name="Prix")),
                (
                    "coach",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="courses",
                        to="schedule.coach",
                        verbose_name="Coach",
                    ),
                ),
            ],
            options={"verbose_name": "Cours", "verbose_name_plural": "Cours", "ordering": ["start_at"]},
        ),
        migrations.AddConstraint(
            model_name="course",
            constraint=models.UniqueConstraint(fields=("name", "start_at"), name="uniq_course_name_start"),
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Inscrit le")),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="schedule.course",
                        verbose_name="Cours",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Inscrit",
                    ),
                ),
            ],
            options={"verbose_name": "Inscription", "verbose_name_plural": "Inscriptions"},
        ),
        migrations.AddConstraint(
            model_name="booking",
            constraint=models.UniqueConstraint(fields=("user", "course"), name="uniq_user_course"),
        ),
    ]
