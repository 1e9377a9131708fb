# storefront/models.py
import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

ROLES = ('customer', 'admin')
ORDER_STATUSES = ('pending', 'paid', 'shipped', 'completed')
CHECKOUT_METHODS = ('standard', 'whatsapp', 'call')
SELLER_REQUEST_STATUSES = ('pending', 'approved', 'rejected')
INQUIRY_STATUSES = ('pending', 'contacted', 'resolved')


def utcnow():
    # naive UTC, comparable with what SQLite hands back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id():
    return str(uuid.uuid4())


def _money(value):
    return float(value) if value is not None else None


def _iso(value):
    return value.isoformat() if value is not None else None


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    profile = db.relationship('Profile', backref='user', uselist=False, cascade='all, delete-orphan')
    cart_items = db.relationship('CartItem', backref='user', lazy=True, cascade='all, delete-orphan')
    orders = db.relationship('Order', backref='user', lazy=True)
    seller_requests = db.relationship('SellerRequest', backref='user', lazy=True)

    @property
    def is_admin(self):
        return self.profile is not None and self.profile.role == 'admin'

    @property
    def is_approved_seller(self):
        return any(r.status == 'approved' for r in self.seller_requests)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'is_admin': self.is_admin,
            'is_approved_seller': self.is_approved_seller,
            'profile': self.profile.to_dict() if self.profile else None,
        }


class Profile(db.Model):
    __tablename__ = 'profiles'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)
    name = db.Column(db.String(120))
    phone = db.Column(db.String(40))
    address = db.Column(db.Text)
    role = db.Column(db.String(20), nullable=False, default='customer')
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'phone': self.phone,
            'address': self.address,
            'role': self.role,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Category(db.Model):
    __tablename__ = 'categories'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    products = db.relationship('Product', backref='category', lazy=True)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'created_at': _iso(self.created_at)}


class Product(db.Model):
    __tablename__ = 'products'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    category_id = db.Column(db.String(36), db.ForeignKey('categories.id', ondelete='SET NULL'))
    price_retail = db.Column(db.Numeric(12, 2), nullable=False)
    price_wholesale = db.Column(db.Numeric(12, 2))
    discount_price = db.Column(db.Numeric(12, 2))
    flash_sale_end = db.Column(db.DateTime)
    stock = db.Column(db.Integer, nullable=False, default=0)
    image_url = db.Column(db.String(500))
    is_flash_sale = db.Column(db.Boolean, nullable=False, default=False)
    is_popular = db.Column(db.Boolean, nullable=False, default=False)
    is_new_arrival = db.Column(db.Boolean, nullable=False, default=False)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    seller_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))
    is_approved = db.Column(db.Boolean, nullable=False, default=True)
    approval_notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    seller = db.relationship('User', backref='products')
    variants = db.relationship('ProductVariant', backref='product', lazy=True, cascade='all, delete-orphan')
    images = db.relationship('ProductImage', backref='product', lazy=True, cascade='all, delete-orphan',
                             order_by='ProductImage.display_order')
    reviews = db.relationship('Review', backref='product', lazy=True, cascade='all, delete-orphan')
    inquiries = db.relationship('ProductInquiry', backref='product', lazy=True, cascade='all, delete-orphan')

    @property
    def effective_price(self):
        return self.discount_price or self.price_retail

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'category_id': self.category_id,
            'price_retail': _money(self.price_retail),
            'price_wholesale': _money(self.price_wholesale),
            'discount_price': _money(self.discount_price),
            'effective_price': _money(self.effective_price),
            'flash_sale_end': _iso(self.flash_sale_end),
            'stock': self.stock,
            'image_url': self.image_url,
            'is_flash_sale': self.is_flash_sale,
            'is_popular': self.is_popular,
            'is_new_arrival': self.is_new_arrival,
            'is_featured': self.is_featured,
            'seller_id': self.seller_id,
            'is_approved': self.is_approved,
            'approval_notes': self.approval_notes,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class ProductVariant(db.Model):
    __tablename__ = 'product_variants'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    color = db.Column(db.String(50))
    size = db.Column(db.String(50))
    sku = db.Column(db.String(100))
    stock = db.Column(db.Integer, nullable=False, default=0)
    price_adjustment = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'product_id': self.product_id,
            'color': self.color,
            'size': self.size,
            'sku': self.sku,
            'stock': self.stock,
            'price_adjustment': _money(self.price_adjustment),
        }


class ProductImage(db.Model):
    __tablename__ = 'product_images'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    image_url = db.Column(db.String(500), nullable=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'product_id': self.product_id,
            'image_url': self.image_url,
            'display_order': self.display_order,
        }


class CartItem(db.Model):
    __tablename__ = 'cart_items'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=utcnow)
    product = db.relationship('Product')


class DeliveryZone(db.Model):
    __tablename__ = 'delivery_zones'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    zone_name = db.Column(db.String(120), nullable=False)
    locations = db.Column(db.JSON, nullable=False, default=list)
    delivery_charge = db.Column(db.Numeric(12, 2), nullable=False)
    min_days = db.Column(db.Integer, nullable=False, default=1)
    max_days = db.Column(db.Integer, nullable=False, default=3)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'zone_name': self.zone_name,
            'locations': list(self.locations or []),
            'delivery_charge': _money(self.delivery_charge),
            'min_days': self.min_days,
            'max_days': self.max_days,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Order(db.Model):
    __tablename__ = 'orders'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))
    guest_name = db.Column(db.String(120))
    phone = db.Column(db.String(40), nullable=False)
    address = db.Column(db.Text, nullable=False)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False)
    delivery_zone_id = db.Column(db.String(36), db.ForeignKey('delivery_zones.id', ondelete='SET NULL'))
    delivery_charge = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default='pending')
    checkout_method = db.Column(db.String(20), nullable=False, default='standard')
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    items = db.relationship('OrderItem', backref='order', lazy=True, cascade='all, delete-orphan')
    delivery_zone = db.relationship('DeliveryZone')

    def to_dict(self, with_items=True):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'guest_name': self.guest_name,
            'phone': self.phone,
            'address': self.address,
            'total_amount': _money(self.total_amount),
            'delivery_zone_id': self.delivery_zone_id,
            'delivery_charge': _money(self.delivery_charge),
            'status': self.status,
            'checkout_method': self.checkout_method,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
        if with_items:
            data['items'] = [item.to_dict() for item in self.items]
        return data


class OrderItem(db.Model):
    __tablename__ = 'order_items'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    order_id = db.Column(db.String(36), db.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id', ondelete='SET NULL'))
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    product = db.relationship('Product')

    def to_dict(self):
        return {
            'id': self.id,
            'order_id': self.order_id,
            'product_id': self.product_id,
            'quantity': self.quantity,
            'price': _money(self.price),
            'product': self.product.to_dict() if self.product else None,
        }


class Review(db.Model):
    __tablename__ = 'reviews'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))
    product_id = db.Column(db.String(36), db.ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    order_id = db.Column(db.String(36), db.ForeignKey('orders.id', ondelete='SET NULL'))
    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text)
    reviewer_name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'product_id': self.product_id,
            'order_id': self.order_id,
            'rating': self.rating,
            'comment': self.comment,
            'reviewer_name': self.reviewer_name,
            'created_at': _iso(self.created_at),
        }


class SellerRequest(db.Model):
    __tablename__ = 'seller_requests'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    business_name = db.Column(db.String(200), nullable=False)
    business_description = db.Column(db.Text, nullable=False)
    contact_email = db.Column(db.String(120), nullable=False)
    contact_phone = db.Column(db.String(40))
    business_address = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default='pending')
    admin_notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'business_name': self.business_name,
            'business_description': self.business_description,
            'contact_email': self.contact_email,
            'contact_phone': self.contact_phone,
            'business_address': self.business_address,
            'status': self.status,
            'admin_notes': self.admin_notes,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class ProductInquiry(db.Model):
    __tablename__ = 'product_inquiries'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(db.String(36), db.ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(40))
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pending')
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'product_id': self.product_id,
            'user_id': self.user_id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'message': self.message,
            'status': self.status,
            'created_at': _iso(self.created_at),
        }
