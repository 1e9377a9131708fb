# storefront/services/products.py
import logging
from decimal import Decimal, InvalidOperation

from .. import forms
from ..errors import NotFound, NotAllowed, ValidationError
from ..models import db, Category, Product, ProductImage, ProductVariant
from ..storage import save_image, delete_image

logger = logging.getLogger(__name__)

FLAGS = ('is_flash_sale', 'is_popular', 'is_new_arrival', 'is_featured')


def get_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFound('Product not found.')
    return product


def apply_product_form(product, data):
    """Fields of the back-office product form."""
    product.name = forms.text(data, 'name', required=True)
    product.description = forms.text(data, 'description')
    category_id = forms.text(data, 'category_id')
    if category_id and db.session.get(Category, category_id) is None:
        raise NotFound('Category not found.')
    product.category_id = category_id
    product.price_retail = forms.money(data, 'price_retail', required=True)
    product.price_wholesale = forms.money(data, 'price_wholesale')
    product.discount_price = forms.money(data, 'discount_price')
    product.stock = forms.integer(data, 'stock', minimum=0)
    product.image_url = forms.text(data, 'image_url')
    product.flash_sale_end = forms.timestamp(data, 'flash_sale_end')
    for name in FLAGS:
        if name in data:
            setattr(product, name, forms.flag(data[name]))
    return product


def create_product(data):
    product = apply_product_form(Product(is_approved=True), data)
    db.session.add(product)
    db.session.commit()
    logger.info("Product %s created", product.id)
    return product


def update_product(product_id, data):
    product = apply_product_form(get_product(product_id), data)
    db.session.commit()
    return product


def delete_product(product):
    product_id = product.id
    image_urls = [product.image_url] + [i.image_url for i in product.images]
    db.session.delete(product)
    db.session.commit()
    for url in image_urls:
        delete_image(url)
    logger.info("Product %s deleted", product_id)


def submit_seller_product(seller, data):
    """Seller listings wait for an admin before they show on the storefront."""
    product = Product(
        name=forms.text(data, 'name', required=True),
        description=forms.text(data, 'description'),
        price_retail=forms.money(data, 'price_retail', required=True),
        stock=forms.integer(data, 'stock', minimum=0),
        image_url=forms.text(data, 'image_url'),
        seller_id=seller.id,
        is_approved=False,
    )
    db.session.add(product)
    db.session.commit()
    logger.info("Seller %s submitted product %s for approval", seller.id, product.id)
    return product


def seller_products(seller):
    return Product.query.filter_by(seller_id=seller.id).order_by(Product.created_at.desc()).all()


def get_owned_product(seller, product_id):
    product = get_product(product_id)
    if product.seller_id != seller.id:
        raise NotAllowed('Not allowed.')
    return product


def products_awaiting_review():
    return (Product.query
            .filter(Product.seller_id.isnot(None))
            .order_by(Product.created_at.desc())
            .all())


def set_approval(product_id, approved, notes=None):
    product = get_product(product_id)
    product.is_approved = approved
    product.approval_notes = notes or None
    db.session.commit()
    logger.info("Product %s %s", product.id, 'approved' if approved else 'rejected')
    return product


def add_variant(product_id, data):
    product = get_product(product_id)
    variant = ProductVariant(
        product_id=product.id,
        color=forms.text(data, 'color'),
        size=forms.text(data, 'size'),
        sku=forms.text(data, 'sku'),
        stock=forms.integer(data, 'stock', default=0, minimum=0),
        price_adjustment=_signed_money(data, 'price_adjustment'),
    )
    db.session.add(variant)
    db.session.commit()
    return variant


def _signed_money(data, field):
    # adjustments may be negative, unlike prices
    raw = data.get(field)
    if raw is None or str(raw).strip() == '':
        return 0
    try:
        value = Decimal(str(raw).strip())
        if not value.is_finite():
            raise ValueError()
    except (ValueError, InvalidOperation):
        raise ValidationError(f"Invalid {field.replace('_', ' ')}. Must be a number.")
    return value


def delete_variant(variant_id):
    variant = db.session.get(ProductVariant, variant_id)
    if variant is None:
        raise NotFound('Variant not found.')
    db.session.delete(variant)
    db.session.commit()


def add_image(product, upload, display_order=None):
    if display_order is None:
        display_order = len(product.images)
    image = ProductImage(product_id=product.id, image_url=save_image(upload), display_order=display_order)
    db.session.add(image)
    db.session.commit()
    return image


def delete_product_image(image_id):
    image = db.session.get(ProductImage, image_id)
    if image is None:
        raise NotFound('Image not found.')
    url = image.image_url
    db.session.delete(image)
    db.session.commit()
    delete_image(url)
