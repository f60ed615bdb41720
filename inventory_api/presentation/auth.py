from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from inventory_api import db, limiter, login_manager
from inventory_api.business.core.request_validation import (
    optional_str,
    raise_if_errors,
    require_json_object,
)
from inventory_api.data.core.user import User
from inventory_api.logger import get_logger

logger = get_logger("inventory_api.auth")
auth = Blueprint('auth', __name__)


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.request_loader
def load_user_from_request(req):
    """Resolve `Authorization: Bearer <token>` to an active user."""
    header = req.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None

    user = User.find_by_api_token(token.strip())
    if user is None or not user.is_active:
        logger.debug("Bearer token did not resolve to an active user")
        return None
    return user


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'message': 'Unauthenticated.'}), 401


def _user_payload(user):
    payload = user.to_dict()
    payload['store_ids'] = list(user.store_ids)
    return payload


@auth.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    data = require_json_object(request.get_json(silent=True))
    errors = {}
    username = optional_str(data, 'username', errors, max_length=80, required=True)
    password = optional_str(data, 'password', errors, max_length=255, required=True)
    if errors:
        logger.warning(f"Login attempt with missing credentials for username: {username}")
    raise_if_errors(errors)

    user = User.query.filter_by(username=username).first()

    if user is None or not user.check_password(password):
        logger.warning(f"Failed login attempt for username: {username}")
        return jsonify({'message': 'Invalid username or password'}), 401

    if not user.is_active:
        logger.warning(f"Login attempt for disabled account: {username}")
        return jsonify({'message': 'Account is disabled'}), 403

    token = user.issue_api_token()
    db.session.commit()
    logger.info(f"Successful login for user: {username}")

    return jsonify({'token': token, 'user': _user_payload(user)})


@auth.route('/logout', methods=['POST'])
@login_required
def logout():
    username = current_user.username
    current_user.revoke_api_token()
    db.session.commit()
    logger.info(f"User logged out: {username}")
    return jsonify({'message': 'Logged out'})


@auth.route('/user', methods=['GET'])
@login_required
def me():
    return jsonify({'data': _user_payload(current_user)})
