# storefront/routes/inquiries.py
from flask import Blueprint, jsonify

from .. import forms
from ..auth import current_user
from ..models import db, ProductInquiry
from ..services.catalog import get_visible_product

inquiries_bp = Blueprint("inquiries", __name__)


@inquiries_bp.route('/products/<product_id>/inquiries', methods=['POST'])
def send_inquiry(product_id):
    product = get_visible_product(product_id)
    data = forms.payload()
    user = current_user()
    inquiry = ProductInquiry(
        product_id=product.id,
        user_id=user.id if user else None,
        name=forms.text(data, 'name', required=True),
        email=forms.email(data),
        phone=forms.text(data, 'phone'),
        message=forms.text(data, 'message', required=True),
        status='pending',
    )
    db.session.add(inquiry)
    db.session.commit()
    return jsonify({'message': 'Inquiry sent! The admin will contact you soon.', 'inquiry': inquiry.to_dict()}), 201
