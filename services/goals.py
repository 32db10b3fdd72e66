import logging
from decimal import Decimal

logger = logging.getLogger(__name__)


class GoalTracker:

    def __init__(self, store):
        self.store = store

    def update_progress(self, goal_id, current_amount):
        """Replace the goal's current amount and recompute completion."""
        goal = self.store.get_goal(goal_id)
        current_amount = Decimal(current_amount)
        goal.current_amount = current_amount
        goal.is_completed = current_amount >= Decimal(goal.target_amount)
        self.store.session.flush()
        logger.info('Goal %s progress set to %s (completed=%s)',
                    goal.id, current_amount, goal.is_completed)
        return goal

    def contribute(self, goal_id, amount):
        goal = self.store.get_goal(goal_id)
        return self.update_progress(goal_id, Decimal(goal.current_amount) + Decimal(amount))
