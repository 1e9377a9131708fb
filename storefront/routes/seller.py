# storefront/routes/seller.py
import logging

from flask import Blueprint, jsonify, request

from .. import forms
from ..auth import current_user, login_required, seller_required
from ..models import db, SellerRequest
from ..services import products as product_service

logger = logging.getLogger(__name__)

seller_bp = Blueprint("seller", __name__)


@seller_bp.route('/seller/requests', methods=['POST'])
@login_required
def submit_request():
    user = current_user()
    data = forms.payload()
    seller_request = SellerRequest(
        user_id=user.id,
        business_name=forms.text(data, 'business_name', required=True),
        business_description=forms.text(data, 'business_description', required=True),
        contact_email=forms.email(data, 'contact_email'),
        contact_phone=forms.text(data, 'contact_phone'),
        business_address=forms.text(data, 'business_address'),
        status='pending',
    )
    db.session.add(seller_request)
    db.session.commit()
    logger.info("Seller request %s submitted by %s", seller_request.id, user.id)
    return jsonify({
        'message': 'We will review your application and get back to you soon.',
        'request': seller_request.to_dict(),
    }), 201


@seller_bp.route('/seller/requests/mine')
@login_required
def my_requests():
    requests_ = (SellerRequest.query
                 .filter_by(user_id=current_user().id)
                 .order_by(SellerRequest.created_at.desc())
                 .all())
    return jsonify([r.to_dict() for r in requests_])


@seller_bp.route('/seller/products')
@seller_required
def dashboard():
    products = product_service.seller_products(current_user())
    approved = sum(1 for p in products if p.is_approved)
    return jsonify({
        'products': [p.to_dict() for p in products],
        'approved_count': approved,
        'pending_count': len(products) - approved,
    })


@seller_bp.route('/seller/products', methods=['POST'])
@seller_required
def add_product():
    product = product_service.submit_seller_product(current_user(), forms.payload())
    return jsonify({
        'message': 'Product submitted for approval. An admin will review it shortly.',
        'product': product.to_dict(),
    }), 201


@seller_bp.route('/seller/products/<product_id>', methods=['DELETE'])
@seller_required
def delete_product(product_id):
    product = product_service.get_owned_product(current_user(), product_id)
    product_service.delete_product(product)
    return jsonify({'message': 'Product deleted.'})


@seller_bp.route('/seller/products/<product_id>/images', methods=['POST'])
@seller_required
def upload_image(product_id):
    product = product_service.get_owned_product(current_user(), product_id)
    image = product_service.add_image(product, request.files.get('image'))
    return jsonify(image.to_dict()), 201
