from flask import Blueprint, jsonify

import storage
from auth_utils import login_required, current_user_id, json_body

budget_goals_bp = Blueprint('budget_goals', __name__, url_prefix='/api/budget-goals')


@budget_goals_bp.route('', methods=['GET'])
@login_required
def index():
    goals = storage.get_user_budget_goals(current_user_id())
    return jsonify([g.to_dict() for g in goals])


@budget_goals_bp.route('', methods=['POST'])
@login_required
def add_goal():
    data = json_body()
    goal = storage.create_budget_goal(current_user_id(), data)
    return jsonify(goal.to_dict()), 201


@budget_goals_bp.route('/<id>', methods=['PUT'])
@login_required
def edit_goal(id):
    data = json_body()
    goal = storage.update_budget_goal(current_user_id(), id, data)
    return jsonify(goal.to_dict())


@budget_goals_bp.route('/<id>', methods=['DELETE'])
@login_required
def delete_goal(id):
    storage.delete_budget_goal(current_user_id(), id)
    return jsonify({"success": True})
