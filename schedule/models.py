from django.conf import settings
from django.db import models
from django.utils import timezone


class Coach(models.Model):
    name = models.CharField("Nom", max_length=120, unique=True)

    class Meta:
        verbose_name = "Coach"
        verbose_name_plural = "Coachs"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Course(models.Model):
    """One concrete scheduled occurrence of a catalogue course."""

    class Name(models.TextChoices):
        GROUP_CLASSES = "Cours Collectifs", "Cours Collectifs"
        POLE_DANCE = "Pole Dance", "Pole Dance"
        CROSSTRAINING = "Crosstraining", "Crosstraining"
        BOXING = "Boxe", "Boxe"
        WEIGHTLIFTING = "Haltérophilie", "Haltérophilie"
        MMA = "MMA", "MMA"

    name = models.CharField("Nom du cours", max_length=64, choices=Name.choices, db_index=True)
    start_at = models.DateTimeField("Date/heure", db_index=True)
    duration_min = models.PositiveIntegerField("Durée, min", default=120)
    price = models.DecimalField("Prix", max_digits=8, decimal_places=2, default=0)

    coach = models.ForeignKey(
        Coach,
        verbose_name="Coach",
        on_delete=models.PROTECT,
        related_name="courses",
    )

    class Meta:
        verbose_name = "Cours"
        verbose_name_plural = "Cours"
        ordering = ["start_at"]
        constraints = [
            # une seule ligne par créneau : la création concurrente tombe sur ce verrou
            models.UniqueConstraint(fields=["name", "start_at"], name="uniq_course_name_start"),
        ]

    def __str__(self) -> str:
        return f"{self.name} — {timezone.localtime(self.start_at).strftime('%d/%m/%Y %H:%M')}"


class Booking(models.Model):
    """Inscription d'un membre à un cours. Supprimée (hard delete) à l'annulation."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name="Inscrit",
        on_delete=models.CASCADE,
        related_name="bookings",
        db_index=True,
    )

    course = models.ForeignKey(
        Course,
        verbose_name="Cours",
        on_delete=models.CASCADE,
        related_name="bookings",
        db_index=True,
    )

    created_at = models.DateTimeField("Inscrit le", auto_now_add=True)

    class Meta:
        verbose_name = "Inscription"
        verbose_name_plural = "Inscriptions"
        constraints = [
            models.UniqueConstraint(fields=["user", "course"], name="uniq_user_course"),
        ]

    def __str__(self) -> str:
        return f"{self.user} → {self.course}"
