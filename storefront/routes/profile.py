# storefront/routes/profile.py
from flask import Blueprint, jsonify

from .. import forms
from ..auth import current_user, login_required
from ..models import db, Order, Profile

profile_bp = Blueprint("profile", __name__)


@profile_bp.route('/profile')
@login_required
def get_profile():
    user = current_user()
    return jsonify(user.profile.to_dict() if user.profile else None)


@profile_bp.route('/profile', methods=['PUT'])
@login_required
def update_profile():
    user = current_user()
    data = forms.payload()
    if user.profile is None:
        user.profile = Profile()
    user.profile.name = forms.text(data, 'name')
    user.profile.phone = forms.text(data, 'phone')
    user.profile.address = forms.text(data, 'address')
    db.session.commit()
    return jsonify({'message': 'Your profile has been updated successfully.', 'profile': user.profile.to_dict()})


@profile_bp.route('/profile/orders')
@login_required
def my_orders():
    orders = Order.query.filter_by(user_id=current_user().id).order_by(Order.created_at.desc()).all()
    return jsonify([o.to_dict() for o in orders])
