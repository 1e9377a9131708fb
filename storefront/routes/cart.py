# storefront/routes/cart.py
from flask import Blueprint, jsonify

from .. import forms
from ..errors import ValidationError
from ..services import catalog
from ..services.cart import get_cart, summarize

cart_bp = Blueprint("cart", __name__)


def _cart_response(cart, message=None, status=200):
    data = summarize(cart.lines())
    if message:
        data['message'] = message
    return jsonify(data), status


@cart_bp.route('/cart')
def view_cart():
    return _cart_response(get_cart())


@cart_bp.route('/cart/items', methods=['POST'])
def add_to_cart():
    data = forms.payload()
    product_id = forms.text(data, 'product_id', required=True, label='Product')
    quantity = forms.integer(data, 'quantity', default=1, minimum=1)
    product = catalog.get_visible_product(product_id)
    cart = get_cart()
    cart.add(product, quantity)
    return _cart_response(cart, 'Added to cart.', 201)


@cart_bp.route('/cart/items/<product_id>', methods=['PUT'])
def update_quantity(product_id):
    data = forms.payload()
    if 'quantity' not in data:
        raise ValidationError('Quantity is required.')
    quantity = forms.integer(data, 'quantity')
    cart = get_cart()
    cart.set_quantity(product_id, quantity)
    return _cart_response(cart)


@cart_bp.route('/cart/items/<product_id>', methods=['DELETE'])
def remove_from_cart(product_id):
    cart = get_cart()
    cart.remove(product_id)
    return _cart_response(cart, 'Removed from cart')


@cart_bp.route('/cart', methods=['DELETE'])
def clear_cart():
    cart = get_cart()
    cart.clear()
    return _cart_response(cart)
