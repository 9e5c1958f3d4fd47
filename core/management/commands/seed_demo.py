from decimal import Decimal

from django.core.management.base import BaseCommand

from memberships.models import SubscriptionType
from schedule.models import Coach
from schedule.slots import COURSE_SCHEDULE
from shop.models import Product


SUBSCRIPTION_TYPES = [
    ("ESSENTIAL", Decimal("7.99"), "Sans engagement annuel, accès réseau illimité"),
    ("ORIGINAL", Decimal("9.99"), "ESSENTIAL + cours collectifs et application coaching"),
    ("ULTRA", Decimal("10.99"), "Toutes les options"),
]

PRODUCTS = [
    ("Leggings de femme - Black", Decimal("5.99")),
    ("Gilet zippé Code - Noir", Decimal("9.99")),
    ("Pull à capuche Strike - Bleu marine", Decimal("24.99")),
    ("Coupe de compression Apex - Rouge", Decimal("9.99")),
]


class Command(BaseCommand):
    help = "Seed demo data (safe to re-run)"

    def handle(self, *args, **options):
        for sched in COURSE_SCHEDULE.values():
            Coach.objects.get_or_create(name=sched.coach)

        for name, price, description in SUBSCRIPTION_TYPES:
            SubscriptionType.objects.get_or_create(
                name=name,
                defaults={"monthly_price": price, "description": description},
            )

        for name, price in PRODUCTS:
            Product.objects.get_or_create(name=name, defaults={"price": price})

        self.stdout.write(self.style.SUCCESS("Demo data ensured"))
