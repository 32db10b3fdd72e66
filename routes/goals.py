from flask import Blueprint, current_app, jsonify, request

from schemas import ContributionIn, GoalIn, GoalProgressIn, parse_payload
from services.goals import GoalTracker
from storage import get_store

goals_bp = Blueprint('goals', __name__, url_prefix='/api/goals')


@goals_bp.route('', methods=['GET'])
def index():
    return jsonify([goal.to_dict() for goal in get_store().list_goals()])


@goals_bp.route('', methods=['POST'])
def add_goal():
    data = parse_payload(GoalIn, request.get_json(silent=True), 'Invalid goal data')

    store = get_store()
    with store.transaction():
        goal = store.add_goal(data)
    current_app.logger.info('Created goal %s', goal.id)
    return jsonify(goal.to_dict()), 201


@goals_bp.route('/<int:goal_id>/progress', methods=['PATCH'])
def update_progress(goal_id):
    data = parse_payload(GoalProgressIn, request.get_json(silent=True), 'Invalid goal progress')

    store = get_store()
    with store.transaction():
        goal = GoalTracker(store).update_progress(goal_id, data.current_amount)
    return jsonify(goal.to_dict())


@goals_bp.route('/<int:goal_id>/contribute', methods=['POST'])
def contribute(goal_id):
    data = parse_payload(ContributionIn, request.get_json(silent=True), 'Invalid contribution')

    store = get_store()
    with store.transaction():
        goal = GoalTracker(store).contribute(goal_id, data.amount)
    return jsonify(goal.to_dict())


@goals_bp.route('/<int:goal_id>', methods=['DELETE'])
def delete_goal(goal_id):
    store = get_store()
    with store.transaction():
        store.delete_goal(goal_id)
    current_app.logger.info('Deleted goal %s', goal_id)
    return jsonify({'success': True})
