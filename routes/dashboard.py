from flask import Blueprint, jsonify

import storage
from auth_utils import login_required, current_user_id
from routes.analytics import category_rows, month_arg

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api')


@dashboard_bp.route('/dashboard', methods=['GET'])
@login_required
def index():
    user_id = current_user_id()
    summary = storage.get_dashboard(user_id, month_arg())
    user = storage.get_user(user_id)

    return jsonify({
        "month": summary["month"],
        "totalBalance": float(summary["total_balance"]),
        "monthlyExpenses": float(summary["monthly_expenses"]),
        "categorySpending": category_rows(summary["category_spending"]),
        "recentTransactions": [t.to_dict() for t in summary["recent_transactions"]],
        "subscriptions": [s.to_dict() for s in summary["subscriptions"]],
        "isPro": storage.is_pro(user),
    })
