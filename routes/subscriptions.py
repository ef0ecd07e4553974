from flask import Blueprint, jsonify

import storage
from auth_utils import login_required, current_user_id, json_body

subscriptions_bp = Blueprint('subscriptions', __name__, url_prefix='/api/subscriptions')


@subscriptions_bp.route('', methods=['GET'])
@login_required
def index():
    subscriptions = storage.get_user_subscriptions(current_user_id())
    return jsonify([s.to_dict() for s in subscriptions])


@subscriptions_bp.route('', methods=['POST'])
@login_required
def add_subscription():
    data = json_body()
    subscription = storage.create_subscription(current_user_id(), data)
    return jsonify(subscription.to_dict()), 201


@subscriptions_bp.route('/<id>', methods=['PUT'])
@login_required
def edit_subscription(id):
    data = json_body()
    subscription = storage.update_subscription(current_user_id(), id, data)
    return jsonify(subscription.to_dict())


@subscriptions_bp.route('/<id>', methods=['DELETE'])
@login_required
def delete_subscription(id):
    storage.delete_subscription(current_user_id(), id)
    return jsonify({"success": True})
