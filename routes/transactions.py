from flask import Blueprint, jsonify, request

import storage
from auth_utils import login_required, current_user_id, json_body
from errors import ValidationError

transactions_bp = Blueprint('transactions', __name__, url_prefix='/api/transactions')

MAX_LIMIT = 500


def _limit_arg():
    raw = request.args.get('limit')
    if raw is None:
        return storage.DEFAULT_TRANSACTION_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        raise ValidationError("limit must be an integer")
    if limit < 1 or limit > MAX_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}")
    return limit


@transactions_bp.route('', methods=['GET'])
@login_required
def index():
    transactions = storage.get_user_transactions(current_user_id(), _limit_arg())
    return jsonify([t.to_dict() for t in transactions])


@transactions_bp.route('', methods=['POST'])
@login_required
def add_transaction():
    data = json_body()
    transaction = storage.create_transaction(
        current_user_id(),
        data.get('accountId'),
        data.get('type'),
        data.get('amount'),
        data.get('description'),
        data.get('category'),
        data.get('date'),
    )
    return jsonify(transaction.to_dict()), 201


@transactions_bp.route('/category/<category>', methods=['GET'])
@login_required
def by_category(category):
    transactions = storage.get_transactions_by_category(current_user_id(), category)
    return jsonify([t.to_dict() for t in transactions])


@transactions_bp.route('/account/<account_id>', methods=['GET'])
@login_required
def by_account(account_id):
    transactions = storage.get_transactions_by_account(current_user_id(), account_id)
    return jsonify([t.to_dict() for t in transactions])
