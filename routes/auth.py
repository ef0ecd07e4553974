import logging

from flask import Blueprint, jsonify, session
from flask_wtf.csrf import generate_csrf
from werkzeug.security import generate_password_hash, check_password_hash

import storage
from auth_utils import login_required, current_user_id, json_body
from errors import NotFound
from validators import require_text, validate_email, validate_password

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api')


def _optional_name(value, field):
    if value is None or not str(value).strip():
        return None
    return require_text(value, field)


@auth_bp.route('/auth/csrf', methods=['GET'])
def csrf_token():
    return jsonify({"csrfToken": generate_csrf()})


@auth_bp.route('/auth/signup', methods=['POST'])
def signup():
    data = json_body()
    email = validate_email(data.get('email'))
    password = validate_password(data.get('password'))

    user = storage.create_user(
        email=email,
        password_hash=generate_password_hash(password),
        first_name=_optional_name(data.get('firstName'), 'firstName'),
        last_name=_optional_name(data.get('lastName'), 'lastName'),
    )
    session.clear()
    session['user_id'] = user.id
    return jsonify(user.to_dict()), 201


@auth_bp.route('/auth/login', methods=['POST'])
def login():
    data = json_body()
    email = str(data.get('email') or '').strip().lower()
    password = str(data.get('password') or '')

    user = storage.get_user_by_email(email)
    if not user or not check_password_hash(user.password_hash, password):
        logger.info("Failed login for %s", email)
        return jsonify({"message": "Invalid credentials"}), 401

    session.clear()
    session['user_id'] = user.id
    return jsonify(user.to_dict())


@auth_bp.route('/auth/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({"success": True})


@auth_bp.route('/auth/user', methods=['GET'])
@login_required
def current_user():
    user = storage.get_user(current_user_id())
    if user is None:
        session.clear()
        raise NotFound("User not found")
    return jsonify(user.to_dict())


@auth_bp.route('/upgrade-pro', methods=['POST'])
@login_required
def upgrade_pro():
    user = storage.upgrade_to_pro(current_user_id())
    return jsonify(user.to_dict())
