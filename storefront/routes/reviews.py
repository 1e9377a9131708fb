# storefront/routes/reviews.py
from flask import Blueprint, jsonify

from .. import forms
from ..auth import current_user
from ..errors import ValidationError
from ..models import db, Review
from ..services.catalog import get_visible_product

reviews_bp = Blueprint("reviews", __name__)

VERIFIED_REVIEWER = 'Verified Customer'


@reviews_bp.route('/products/<product_id>/reviews', methods=['POST'])
def submit_review(product_id):
    product = get_visible_product(product_id)
    data = forms.payload()
    if not data.get('rating'):
        raise ValidationError('Please select a rating before submitting your review.')
    rating = forms.integer(data, 'rating', minimum=1, maximum=5)

    user = current_user()
    if user is None:
        reviewer_name = forms.text(data, 'reviewer_name')
        if not reviewer_name:
            raise ValidationError('Please enter your name to submit a review.')
    else:
        reviewer_name = VERIFIED_REVIEWER

    review = Review(
        product_id=product.id,
        user_id=user.id if user else None,
        order_id=forms.text(data, 'order_id'),
        rating=rating,
        comment=forms.text(data, 'comment'),
        reviewer_name=reviewer_name,
    )
    db.session.add(review)
    db.session.commit()
    return jsonify({'message': 'Thank you for your review!', 'review': review.to_dict()}), 201
