# storefront/auth.py
from functools import wraps

from flask import g, session

from .errors import AuthRequired, NotAllowed
from .models import db, User


def current_user():
    if 'current_user' not in g:
        user_id = session.get('user_id')
        user = db.session.get(User, user_id) if user_id else None
        if user_id and user is None:
            session.pop('user_id', None)
        g.current_user = user
    return g.current_user


def log_in(user):
    session['user_id'] = user.id
    g.current_user = user


def log_out():
    session.pop('user_id', None)
    g.pop('current_user', None)


def login_required(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            raise AuthRequired('Please login first.')
        return f(*args, **kwargs)
    return wrapped


def admin_required(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        user = current_user()
        if user is None:
            raise AuthRequired('Please login first.')
        if not user.is_admin:
            raise NotAllowed('Admin access required.')
        return f(*args, **kwargs)
    return wrapped


def seller_required(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        user = current_user()
        if user is None:
            raise AuthRequired('Please login first.')
        if not user.is_approved_seller:
            raise NotAllowed('Your seller request has not been approved yet.')
        return f(*args, **kwargs)
    return wrapped
