# storefront/routes/catalog.py
from flask import Blueprint, jsonify, request

from .. import forms
from ..errors import NotFound
from ..services import catalog

catalog_bp = Blueprint("catalog", __name__)


def _products(products):
    return [p.to_dict() for p in products]


@catalog_bp.route('/categories')
def list_categories():
    return jsonify([c.to_dict() for c in catalog.categories()])


@catalog_bp.route('/categories/<category_id>')
def category_detail(category_id):
    category, products = catalog.category_with_products(category_id)
    return jsonify({'category': category.to_dict(), 'products': _products(products)})


@catalog_bp.route('/products')
def list_products():
    args = request.args
    products = catalog.search_products(
        category_id=args.get('category') or None,
        search=(args.get('search') or '').strip() or None,
        min_price=forms.money(args, 'min_price'),
        max_price=forms.money(args, 'max_price'),
        in_stock=forms.flag(args.get('in_stock')),
        new_arrival=forms.flag(args.get('new_arrival')),
        featured=forms.flag(args.get('featured')),
        popular=forms.flag(args.get('popular')),
        flash_sale=forms.flag(args.get('flash_sale')),
    )
    return jsonify(_products(products))


@catalog_bp.route('/products/<product_id>')
def product_detail(product_id):
    return jsonify(catalog.product_detail(product_id))


@catalog_bp.route('/products/<product_id>/variant')
def product_variant(product_id):
    product = catalog.get_visible_product(product_id)
    variant = catalog.select_variant(product.variants, request.args.get('color'), request.args.get('size'))
    if variant is None:
        raise NotFound('No variant with that color and size.')
    data = variant.to_dict()
    data['price'] = float(catalog.variant_price(product, variant))
    return jsonify(data)


@catalog_bp.route('/home')
def home():
    sections = catalog.home_sections()
    return jsonify({
        'categories': [c.to_dict() for c in sections['categories']],
        'flash_sales': _products(sections['flash_sales']),
        'popular': _products(sections['popular']),
        'new_arrivals': _products(sections['new_arrivals']),
        'featured': _products(sections['featured']),
    })


@catalog_bp.route('/deals')
def deals():
    return jsonify({
        'flash_sales': _products(catalog.running_flash_sales()),
        'discounted': _products(catalog.discounted_products()),
    })


@catalog_bp.route('/flash-sales')
def flash_sales():
    return jsonify(_products(catalog.running_flash_sales(flagged_only=True)))


@catalog_bp.route('/new-arrivals')
def new_arrivals():
    return jsonify(_products(catalog.new_arrivals()))
