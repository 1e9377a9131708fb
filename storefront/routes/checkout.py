# storefront/routes/checkout.py
from flask import Blueprint, jsonify

from .. import forms
from ..auth import current_user
from ..models import DeliveryZone
from ..services.cart import get_cart
from ..services.checkout import place_order

checkout_bp = Blueprint("checkout", __name__)


@checkout_bp.route('/delivery-zones')
def active_delivery_zones():
    zones = DeliveryZone.query.filter_by(is_active=True).order_by(DeliveryZone.zone_name).all()
    return jsonify([z.to_dict() for z in zones])


@checkout_bp.route('/checkout', methods=['POST'])
def checkout():
    data = forms.payload()
    order = place_order(
        get_cart(),
        current_user(),
        name=forms.text(data, 'name') or '',
        phone=forms.text(data, 'phone') or '',
        address=forms.text(data, 'address') or '',
        checkout_method=forms.text(data, 'checkout_method') or 'standard',
        delivery_zone_id=forms.text(data, 'delivery_zone_id'),
    )
    return jsonify({
        'message': "Order placed successfully! We'll contact you soon to confirm your order.",
        'order': order.to_dict(),
    }), 201
