from dataclasses import dataclass
from decimal import Decimal


@dataclass
class CartItem:
    product_id: int
    name: str
    price: Decimal
    qty: int

    @property
    def total_price(self) -> Decimal:
        return self.price * int(self.qty)

    def as_dict(self) -> dict:
        return {
            "id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "quantity": self.qty,
            "total": str(self.total_price),
        }


class Cart:
    """Panier stocké en session : {"<product_id>": qty}. Jamais en base."""

    SESSION_KEY = "cart_v1"

    def __init__(self, request):
        self.request = request
        self.data = request.session.get(self.SESSION_KEY, {})  # {"12":2}

    def add(self, product_id: int, qty: int = 1):
        # même produit : on additionne les quantités
        pid = str(product_id)
        self.data[pid] = max(1, int(self.data.get(pid, 0)) + int(qty))
        self._save()

    def set(self, product_id: int, qty: int):
        pid = str(product_id)
        qty = int(qty)
        if qty <= 0:
            self.data.pop(pid, None)
        else:
            self.data[pid] = qty
        self._save()

    def clear(self):
        self.data = {}
        self._save()

    def _save(self):
        self.request.session[self.SESSION_KEY] = self.data
        self.request.session.modified = True

    @property
    def count(self):
        return sum(int(q) for q in self.data.values())

    def __iter__(self):
        from .models import Product  # lazy import

        ids = [int(pid) for pid in self.data.keys()]
        products_by_id = {p.id: p for p in Product.objects.filter(id__in=ids, is_active=True)}
        yield from self.items(products_by_id)

    def items(self, products_by_id):
        for pid_str, qty in self.data.items():
            pid = int(pid_str)
            p = products_by_id.get(pid)
            if not p:
                continue
            yield CartItem(product_id=pid, name=p.name, price=p.price, qty=int(qty))

