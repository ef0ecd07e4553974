from flask import Blueprint, jsonify

import storage
from auth_utils import login_required, current_user_id, json_body

accounts_bp = Blueprint('accounts', __name__, url_prefix='/api/accounts')


@accounts_bp.route('', methods=['GET'])
@login_required
def index():
    accounts = storage.get_user_accounts(current_user_id())
    return jsonify([a.to_dict() for a in accounts])


@accounts_bp.route('', methods=['POST'])
@login_required
def add_account():
    data = json_body()
    account = storage.create_account(current_user_id(), data)
    return jsonify(account.to_dict()), 201


@accounts_bp.route('/<id>', methods=['PUT'])
@login_required
def edit_account(id):
    data = json_body()
    account = storage.update_account(current_user_id(), id, data)
    return jsonify(account.to_dict())


@accounts_bp.route('/<id>', methods=['DELETE'])
@login_required
def delete_account(id):
    storage.delete_account(current_user_id(), id)
    return jsonify({"success": True})
