# storefront/services/catalog.py
from decimal import Decimal

from sqlalchemy import func

from ..errors import NotFound
from ..models import db, Category, Product, Review, utcnow


def visible_products():
    return Product.query.filter(Product.is_approved.is_(True))


def get_visible_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None or not product.is_approved:
        raise NotFound('Product not found.')
    return product


def effective_price_expr():
    # discount_price when set and non-zero, like Product.effective_price
    return func.coalesce(func.nullif(Product.discount_price, 0), Product.price_retail)


def search_products(category_id=None, search=None, min_price=None, max_price=None,
                    in_stock=False, new_arrival=False, featured=False, popular=False,
                    flash_sale=False):
    query = visible_products()
    if category_id:
        query = query.filter(Product.category_id == category_id)
    if search:
        query = query.filter(Product.name.ilike(f'%{search}%'))
    if min_price is not None:
        query = query.filter(effective_price_expr() >= min_price)
    if max_price is not None:
        query = query.filter(effective_price_expr() <= max_price)
    if in_stock:
        query = query.filter(Product.stock > 0)
    if new_arrival:
        query = query.filter(Product.is_new_arrival.is_(True))
    if featured:
        query = query.filter(Product.is_featured.is_(True))
    if popular:
        query = query.filter(Product.is_popular.is_(True))
    if flash_sale:
        query = query.filter(Product.is_flash_sale.is_(True))
    return query.order_by(Product.created_at.desc()).all()


def categories():
    return Category.query.order_by(Category.name).all()


def category_with_products(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFound('Category not found.')
    products = (visible_products()
                .filter(Product.category_id == category_id)
                .order_by(Product.created_at.desc())
                .all())
    return category, products


def home_sections():
    products = visible_products().order_by(Product.created_at.desc()).all()
    return {
        'categories': categories(),
        'flash_sales': [p for p in products if p.is_flash_sale],
        'popular': [p for p in products if p.is_popular],
        'new_arrivals': [p for p in products if p.is_new_arrival],
        'featured': [p for p in products if p.is_featured],
    }


def running_flash_sales(flagged_only=False):
    query = visible_products().filter(
        Product.flash_sale_end.isnot(None),
        Product.flash_sale_end > utcnow(),
    )
    if flagged_only:
        query = query.filter(Product.is_flash_sale.is_(True))
    return query.order_by(Product.flash_sale_end.asc()).all()


def discounted_products():
    return (visible_products()
            .filter(Product.discount_price.isnot(None))
            .order_by(Product.created_at.desc())
            .all())


def new_arrivals():
    return (visible_products()
            .filter(Product.is_new_arrival.is_(True))
            .order_by(Product.created_at.desc())
            .all())


def product_reviews(product_id):
    return (Review.query
            .filter_by(product_id=product_id)
            .order_by(Review.created_at.desc())
            .all())


def average_rating(reviews):
    if not reviews:
        return 0
    return sum(r.rating for r in reviews) / len(reviews)


def select_variant(variants, color=None, size=None):
    """The variant matching both attributes exactly; a missing value matches a null one."""
    color = color or None
    size = size or None
    for variant in variants:
        if (variant.color or None) == color and (variant.size or None) == size:
            return variant
    return None


def variant_options(variants):
    """Distinct colors and sizes in first-seen order, with availability."""
    colors, sizes = [], []
    for variant in variants:
        if variant.color and variant.color not in colors:
            colors.append(variant.color)
        if variant.size and variant.size not in sizes:
            sizes.append(variant.size)
    return {
        'colors': [{'value': c, 'available': any(v.color == c and v.stock > 0 for v in variants)}
                   for c in colors],
        'sizes': [{'value': s, 'available': any(v.size == s and v.stock > 0 for v in variants)}
                  for s in sizes],
    }


def variant_price(product, variant):
    return Decimal(product.effective_price) + Decimal(variant.price_adjustment or 0)


def product_detail(product_id):
    product = get_visible_product(product_id)
    reviews = product_reviews(product.id)
    data = product.to_dict()
    data['category'] = product.category.to_dict() if product.category else None
    data['variants'] = [v.to_dict() for v in product.variants]
    data['variant_options'] = variant_options(product.variants)
    data['images'] = [i.to_dict() for i in product.images]
    data['reviews'] = [r.to_dict() for r in reviews]
    data['review_count'] = len(reviews)
    data['average_rating'] = average_rating(reviews)
    return data

