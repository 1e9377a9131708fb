# storefront/routes/admin.py
import logging

from flask import Blueprint, jsonify, request

from .. import forms
from ..auth import admin_required
from ..errors import NotFound, ValidationError
from ..models import (db, Category, DeliveryZone, Order, Product, ProductInquiry, Review, SellerRequest,
                      ORDER_STATUSES, INQUIRY_STATUSES)
from ..services import products as product_service

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)


def _get_or_404(model, object_id, label):
    obj = db.session.get(model, object_id)
    if obj is None:
        raise NotFound(f'{label} not found.')
    return obj


def _delete(obj, message):
    db.session.delete(obj)
    db.session.commit()
    return jsonify({'message': message})


# ---------- Products ----------

@admin_bp.route('/admin/products')
@admin_required
def list_products():
    products = Product.query.order_by(Product.created_at.desc()).all()
    return jsonify([p.to_dict() for p in products])


@admin_bp.route('/admin/products', methods=['POST'])
@admin_required
def create_product():
    product = product_service.create_product(forms.payload())
    return jsonify({'message': 'Product created successfully', 'product': product.to_dict()}), 201


@admin_bp.route('/admin/products/<product_id>', methods=['PUT'])
@admin_required
def update_product(product_id):
    product = product_service.update_product(product_id, forms.payload())
    return jsonify({'message': 'Product updated successfully', 'product': product.to_dict()})


@admin_bp.route('/admin/products/<product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    product_service.delete_product(product_service.get_product(product_id))
    return jsonify({'message': 'The product has been removed successfully'})


@admin_bp.route('/admin/product-approvals')
@admin_required
def product_approvals():
    return jsonify([p.to_dict() for p in product_service.products_awaiting_review()])


@admin_bp.route('/admin/product-approvals/<product_id>', methods=['POST'])
@admin_required
def review_product(product_id):
    data = forms.payload()
    if 'approved' not in data:
        raise ValidationError('Approved is required.')
    approved = forms.flag(data['approved'])
    product = product_service.set_approval(product_id, approved, forms.text(data, 'notes'))
    return jsonify({
        'message': f"The product has been {'approved' if approved else 'rejected'} successfully",
        'product': product.to_dict(),
    })


@admin_bp.route('/admin/products/<product_id>/variants', methods=['POST'])
@admin_required
def add_variant(product_id):
    variant = product_service.add_variant(product_id, forms.payload())
    return jsonify(variant.to_dict()), 201


@admin_bp.route('/admin/variants/<variant_id>', methods=['DELETE'])
@admin_required
def delete_variant(variant_id):
    product_service.delete_variant(variant_id)
    return jsonify({'message': 'Variant deleted.'})


@admin_bp.route('/admin/products/<product_id>/images', methods=['POST'])
@admin_required
def upload_image(product_id):
    product = product_service.get_product(product_id)
    display_order = request.form.get('display_order')
    image = product_service.add_image(
        product,
        request.files.get('image'),
        forms.integer(request.form, 'display_order', minimum=0) if display_order else None,
    )
    return jsonify(image.to_dict()), 201


@admin_bp.route('/admin/images/<image_id>', methods=['DELETE'])
@admin_required
def delete_image(image_id):
    product_service.delete_product_image(image_id)
    return jsonify({'message': 'Image deleted.'})


# ---------- Categories ----------

def _category_name(data, current=None):
    name = forms.text(data, 'name', required=True, label='Category name')
    clash = Category.query.filter(Category.name == name).first()
    if clash is not None and clash is not current:
        raise ValidationError('A category with that name already exists.')
    return name


@admin_bp.route('/admin/categories')
@admin_required
def list_categories():
    return jsonify([c.to_dict() for c in Category.query.order_by(Category.name).all()])


@admin_bp.route('/admin/categories', methods=['POST'])
@admin_required
def create_category():
    category = Category(name=_category_name(forms.payload()))
    db.session.add(category)
    db.session.commit()
    return jsonify({'message': 'Category created successfully', 'category': category.to_dict()}), 201


@admin_bp.route('/admin/categories/<category_id>', methods=['PUT'])
@admin_required
def update_category(category_id):
    category = _get_or_404(Category, category_id, 'Category')
    category.name = _category_name(forms.payload(), current=category)
    db.session.commit()
    return jsonify({'message': 'Category updated successfully', 'category': category.to_dict()})


@admin_bp.route('/admin/categories/<category_id>', methods=['DELETE'])
@admin_required
def delete_category(category_id):
    category = _get_or_404(Category, category_id, 'Category')
    for product in category.products:
        product.category_id = None
    return _delete(category, 'Category deleted successfully')


# ---------- Delivery zones ----------

def _locations(raw):
    if isinstance(raw, str):
        raw = raw.split(',')
    return [str(loc).strip() for loc in (raw or []) if str(loc).strip()]


def _apply_zone(zone, data):
    zone.zone_name = forms.text(data, 'zone_name')
    zone.locations = _locations(data.get('locations'))
    zone.delivery_charge = forms.money(data, 'delivery_charge')
    if not zone.zone_name or not zone.locations or zone.delivery_charge is None:
        raise ValidationError('Please fill all required fields')
    zone.min_days = forms.integer(data, 'min_days', default=1, minimum=0)
    zone.max_days = forms.integer(data, 'max_days', default=3, minimum=0)
    if zone.min_days > zone.max_days:
        raise ValidationError('Min days cannot exceed max days.')
    if 'is_active' in data:
        zone.is_active = forms.flag(data['is_active'])
    elif zone.is_active is None:
        zone.is_active = True
    return zone


@admin_bp.route('/admin/delivery-zones')
@admin_required
def list_delivery_zones():
    zones = DeliveryZone.query.order_by(DeliveryZone.zone_name).all()
    return jsonify([z.to_dict() for z in zones])


@admin_bp.route('/admin/delivery-zones', methods=['POST'])
@admin_required
def create_delivery_zone():
    zone = _apply_zone(DeliveryZone(), forms.payload())
    db.session.add(zone)
    db.session.commit()
    return jsonify({'message': 'Delivery zone created successfully', 'zone': zone.to_dict()}), 201


@admin_bp.route('/admin/delivery-zones/<zone_id>', methods=['PUT'])
@admin_required
def update_delivery_zone(zone_id):
    zone = _get_or_404(DeliveryZone, zone_id, 'Delivery zone')
    _apply_zone(zone, forms.payload())
    db.session.commit()
    return jsonify({'message': 'Delivery zone updated successfully', 'zone': zone.to_dict()})


@admin_bp.route('/admin/delivery-zones/<zone_id>', methods=['DELETE'])
@admin_required
def delete_delivery_zone(zone_id):
    return _delete(_get_or_404(DeliveryZone, zone_id, 'Delivery zone'), 'Delivery zone deleted successfully')


# ---------- Orders ----------

@admin_bp.route('/admin/orders')
@admin_required
def list_orders():
    orders = Order.query.order_by(Order.created_at.desc()).all()
    return jsonify([o.to_dict() for o in orders])


@admin_bp.route('/admin/orders/<order_id>/status', methods=['PUT'])
@admin_required
def update_order_status(order_id):
    order = _get_or_404(Order, order_id, 'Order')
    order.status = forms.choice(forms.payload(), 'status', ORDER_STATUSES)
    db.session.commit()
    logger.info("Order %s marked as %s", order.id, order.status)
    return jsonify({'message': f'Order has been marked as {order.status}', 'order': order.to_dict()})


# ---------- Reviews ----------

@admin_bp.route('/admin/reviews')
@admin_required
def list_reviews():
    reviews = Review.query.order_by(Review.created_at.desc()).all()
    result = []
    for review in reviews:
        data = review.to_dict()
        data['product_name'] = review.product.name if review.product else None
        result.append(data)
    return jsonify(result)


@admin_bp.route('/admin/reviews/<review_id>', methods=['DELETE'])
@admin_required
def delete_review(review_id):
    return _delete(_get_or_404(Review, review_id, 'Review'), 'Review deleted successfully')


# ---------- Seller requests ----------

@admin_bp.route('/admin/seller-requests')
@admin_required
def list_seller_requests():
    requests_ = SellerRequest.query.order_by(SellerRequest.created_at.desc()).all()
    return jsonify([r.to_dict() for r in requests_])


@admin_bp.route('/admin/seller-requests/<request_id>', methods=['PUT'])
@admin_required
def update_seller_request(request_id):
    seller_request = _get_or_404(SellerRequest, request_id, 'Seller request')
    data = forms.payload()
    seller_request.status = forms.choice(data, 'status', ('approved', 'rejected'))
    seller_request.admin_notes = forms.text(data, 'admin_notes')
    db.session.commit()
    logger.info("Seller request %s %s", seller_request.id, seller_request.status)
    return jsonify({'message': f'Request has been {seller_request.status}', 'request': seller_request.to_dict()})


@admin_bp.route('/admin/seller-requests/<request_id>', methods=['DELETE'])
@admin_required
def delete_seller_request(request_id):
    return _delete(_get_or_404(SellerRequest, request_id, 'Seller request'), 'Request deleted successfully')


# ---------- Inquiries ----------

@admin_bp.route('/admin/inquiries')
@admin_required
def list_inquiries():
    inquiries = ProductInquiry.query.order_by(ProductInquiry.created_at.desc()).all()
    result = []
    for inquiry in inquiries:
        data = inquiry.to_dict()
        data['product_name'] = inquiry.product.name if inquiry.product else None
        result.append(data)
    return jsonify(result)


@admin_bp.route('/admin/inquiries/<inquiry_id>', methods=['PUT'])
@admin_required
def update_inquiry(inquiry_id):
    inquiry = _get_or_404(ProductInquiry, inquiry_id, 'Inquiry')
    inquiry.status = forms.choice(forms.payload(), 'status', INQUIRY_STATUSES)
    db.session.commit()
    return jsonify({'message': f'Inquiry marked as {inquiry.status}', 'inquiry': inquiry.to_dict()})


@admin_bp.route('/admin/inquiries/<inquiry_id>', methods=['DELETE'])
@admin_required
def delete_inquiry(inquiry_id):
    return _delete(_get_or_404(ProductInquiry, inquiry_id, 'Inquiry'), 'Inquiry deleted successfully')
