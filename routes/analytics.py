from flask import Blueprint, jsonify, request

import storage
from auth_utils import login_required, current_user_id

analytics_bp = Blueprint('analytics', __name__, url_prefix='/api/analytics')


def month_arg():
    return request.args.get('month') or storage.current_month()


def category_rows(spending):
    return [{"category": category, "amount": float(amount)} for category, amount in spending]


@analytics_bp.route('/balance', methods=['GET'])
@login_required
def total_balance():
    total = storage.get_total_balance(current_user_id())
    return jsonify({"totalBalance": float(total)})


@analytics_bp.route('/monthly-expenses', methods=['GET'])
@login_required
def monthly_expenses():
    total = storage.get_monthly_expenses(current_user_id(), month_arg())
    return jsonify({"monthlyExpenses": float(total)})


@analytics_bp.route('/category-spending', methods=['GET'])
@login_required
def category_spending():
    spending = storage.get_category_spending(current_user_id(), month_arg())
    return jsonify(category_rows(spending))
