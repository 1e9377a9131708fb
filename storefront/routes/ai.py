# storefront/routes/ai.py
from flask import Blueprint, jsonify

from .. import forms
from ..errors import ValidationError
from ..models import Product
from ..services import ai
from ..services.catalog import visible_products

ai_bp = Blueprint("ai", __name__)


@ai_bp.route('/ai/search', methods=['POST'])
def ai_search():
    data = forms.payload()
    query = forms.text(data, 'query', required=True, label='Search query')
    products = visible_products().all()
    ranked = ai.search_products(query, products) if products else []
    return jsonify({'products': [p.to_dict() for p in ranked]})


@ai_bp.route('/ai/rank', methods=['POST'])
def ai_rank():
    data = forms.payload()
    product_ids = data.get('product_ids')
    query = visible_products()
    if product_ids is not None:
        if not isinstance(product_ids, list):
            raise ValidationError('Product ids must be a list.')
        query = query.filter(Product.id.in_([str(i) for i in product_ids]))
    products = query.order_by(Product.created_at.desc()).all()
    ranked = ai.rank_products(products, forms.text(data, 'context')) if products else []
    return jsonify({'products': [p.to_dict() for p in ranked]})
