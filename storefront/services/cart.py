# storefront/services/cart.py
"""
Carts: guests keep ``{product_id: quantity}`` in the session, signed-in
users keep CartItem rows. Both expose the same small interface so the
routes and checkout do not care which one they hold.
"""
import logging
from decimal import Decimal

from flask import session

from ..auth import current_user
from ..models import db, CartItem, Product

logger = logging.getLogger(__name__)

SESSION_KEY = 'cart'


class CartLine:
    def __init__(self, product, quantity):
        self.product = product
        self.quantity = quantity

    @property
    def unit_price(self):
        return Decimal(self.product.effective_price)

    @property
    def line_total(self):
        return self.unit_price * self.quantity

    def to_dict(self):
        return {
            'product': self.product.to_dict(),
            'quantity': self.quantity,
            'line_total': float(self.line_total),
        }


class GuestCart:
    def _items(self):
        return dict(session.get(SESSION_KEY) or {})

    def _store(self, items):
        session[SESSION_KEY] = items
        session.modified = True

    def lines(self):
        lines = []
        for product_id, quantity in self._items().items():
            product = db.session.get(Product, product_id)
            if product is not None:
                lines.append(CartLine(product, quantity))
        return lines

    def add(self, product, quantity=1):
        items = self._items()
        items[product.id] = items.get(product.id, 0) + quantity
        self._store(items)

    def set_quantity(self, product_id, quantity):
        if quantity <= 0:
            self.remove(product_id)
            return
        items = self._items()
        if product_id in items:
            items[product_id] = quantity
            self._store(items)

    def remove(self, product_id):
        items = self._items()
        items.pop(product_id, None)
        self._store(items)

    def clear(self):
        session.pop(SESSION_KEY, None)


class UserCart:
    def __init__(self, user):
        self.user = user

    def _rows(self):
        return CartItem.query.filter_by(user_id=self.user.id).order_by(CartItem.created_at).all()

    def lines(self):
        # rows whose product disappeared are skipped, not repaired
        return [CartLine(row.product, row.quantity) for row in self._rows() if row.product is not None]

    def add(self, product, quantity=1, commit=True):
        existing = CartItem.query.filter_by(user_id=self.user.id, product_id=product.id).first()
        if existing:
            existing.quantity += quantity
        else:
            db.session.add(CartItem(user_id=self.user.id, product_id=product.id, quantity=quantity))
        if commit:
            db.session.commit()

    def set_quantity(self, product_id, quantity):
        if quantity <= 0:
            self.remove(product_id)
            return
        existing = CartItem.query.filter_by(user_id=self.user.id, product_id=product_id).first()
        if existing:
            existing.quantity = quantity
            db.session.commit()

    def remove(self, product_id):
        CartItem.query.filter_by(user_id=self.user.id, product_id=product_id).delete()
        db.session.commit()

    def clear(self, commit=True):
        CartItem.query.filter_by(user_id=self.user.id).delete()
        if commit:
            db.session.commit()


def get_cart():
    user = current_user()
    return UserCart(user) if user is not None else GuestCart()


def summarize(lines):
    return {
        'items': [line.to_dict() for line in lines],
        'item_count': sum(line.quantity for line in lines),
        'total': float(sum((line.line_total for line in lines), Decimal('0'))),
    }


def merge_guest_cart(user):
    """Fold the session cart into the user's stored cart, then empty it."""
    guest = GuestCart()
    items = guest._items()
    if not items:
        return 0
    user_cart = UserCart(user)
    merged = 0
    for product_id, quantity in items.items():
        product = db.session.get(Product, product_id)
        if product is None or quantity <= 0:
            continue
        user_cart.add(product, quantity, commit=False)
        merged += 1
    db.session.commit()
    guest.clear()
    logger.info("Merged %s guest cart line(s) into cart of user %s", merged, user.id)
    return merged
