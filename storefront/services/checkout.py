# storefront/services/checkout.py
import logging
from decimal import Decimal

from ..errors import ValidationError, NotFound
from ..models import db, DeliveryZone, Order, OrderItem, CHECKOUT_METHODS

logger = logging.getLogger(__name__)


def resolve_delivery_zone(zone_id):
    if not zone_id:
        return None
    zone = db.session.get(DeliveryZone, zone_id)
    if zone is None or not zone.is_active:
        raise NotFound('Delivery zone not available.')
    return zone


def place_order(cart, user, name, phone, address, checkout_method='standard', delivery_zone_id=None):
    """Turn the cart into an order with one item per line and empty the cart."""
    if not (name or '').strip() or not (phone or '').strip() or not (address or '').strip():
        raise ValidationError('Please fill in all fields.')
    if checkout_method not in CHECKOUT_METHODS:
        raise ValidationError(f"Invalid checkout method. Choose one of: {', '.join(CHECKOUT_METHODS)}.")

    lines = cart.lines()
    if not lines:
        raise ValidationError('Your cart is empty!')

    zone = resolve_delivery_zone(delivery_zone_id)
    delivery_charge = Decimal(zone.delivery_charge) if zone else Decimal('0')
    subtotal = sum((line.line_total for line in lines), Decimal('0'))

    order = Order(
        user_id=user.id if user else None,
        guest_name=None if user else name.strip(),
        phone=phone.strip(),
        address=address.strip(),
        total_amount=subtotal + delivery_charge,
        delivery_zone_id=zone.id if zone else None,
        delivery_charge=delivery_charge,
        status='pending',
        checkout_method=checkout_method,
    )
    db.session.add(order)
    for line in lines:
        order.items.append(OrderItem(product_id=line.product.id, quantity=line.quantity, price=line.unit_price))

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Checkout failed")
        raise

    cart.clear()
    logger.info("Order %s placed (%s item lines, total %s)", order.id, len(lines), order.total_amount)
    return order
