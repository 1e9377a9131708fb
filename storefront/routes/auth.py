# storefront/routes/auth.py
import logging

from flask import Blueprint, current_app, jsonify
from werkzeug.security import generate_password_hash, check_password_hash

from .. import forms
from ..auth import current_user, log_in, log_out, login_required
from ..errors import AuthRequired, ValidationError
from ..models import db, User, Profile
from ..services.cart import merge_guest_cart

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _role_for(email):
    admins = {e.strip().lower() for e in current_app.config.get('ADMIN_EMAILS', '').split(',') if e.strip()}
    return 'admin' if email in admins else 'customer'


@auth_bp.route('/auth/register', methods=['POST'])
def register():
    data = forms.payload()
    email = forms.email(data)
    password = data.get('password') or ''
    if not password:
        raise ValidationError('All fields are required.')
    if User.query.filter_by(email=email).first():
        raise ValidationError('Email already registered.')

    user = User(email=email, password_hash=generate_password_hash(password))
    user.profile = Profile(name=forms.text(data, 'name'), role=_role_for(email))
    db.session.add(user)
    db.session.commit()
    log_in(user)
    merge_guest_cart(user)
    logger.info("Registered user %s (%s)", user.id, user.profile.role)
    return jsonify({'message': 'Registered and logged in.', 'user': user.to_dict()}), 201


@auth_bp.route('/auth/login', methods=['POST'])
def login():
    data = forms.payload()
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, password):
        raise AuthRequired('Invalid credentials.')
    log_in(user)
    merge_guest_cart(user)
    return jsonify({'message': 'Logged in successfully.', 'user': user.to_dict()})


@auth_bp.route('/auth/logout', methods=['POST'])
def logout():
    log_out()
    return jsonify({'message': 'Logged out.'})


@auth_bp.route('/auth/me')
@login_required
def me():
    return jsonify(current_user().to_dict())
