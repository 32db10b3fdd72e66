"""
Test suite for goal routes.
Tests cover goal CRUD, progress replacement and contributions.
"""

import pytest
from decimal import Decimal

from errors import NotFound
from schemas import GoalIn
from services.goals import GoalTracker
from tests.conftest import post_json


def create_goal(client, target='1000', **extra):
    payload = {'name': 'Emergency fund', 'targetAmount': target}
    payload.update(extra)
    response = post_json(client, '/api/goals', payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


class TestGoalCrud:
    """Test goal creation, listing and deletion."""

    def test_create_goal_defaults(self, client):
        """New goals start empty and incomplete."""
        goal = create_goal(client, deadline='2025-12-31', monthlyTarget='100')

        assert goal['currentAmount'] == '0.00'
        assert goal['targetAmount'] == '1000.00'
        assert goal['isCompleted'] is False
        assert goal['priority'] == 'medium'
        assert goal['category'] == 'savings'
        assert goal['deadline'] == '2025-12-31'
        assert goal['monthlyTarget'] == '100.00'

    def test_create_goal_missing_target_rejected(self, client):
        """Target amount is required."""
        response = post_json(client, '/api/goals', {'name': 'Car'})
        assert response.status_code == 400
        assert any(e['field'] == 'targetAmount' for e in response.get_json()['errors'])

    def test_list_goals(self, client):
        """Goals are listed in creation order."""
        create_goal(client, name='First')
        create_goal(client, name='Second')
        assert [g['name'] for g in client.get('/api/goals').get_json()] == ['First', 'Second']

    def test_delete_goal(self, client):
        """Deleting a goal removes it; a second delete is a 404."""
        goal = create_goal(client)

        assert client.delete(f"/api/goals/{goal['id']}").get_json() == {'success': True}
        response = client.delete(f"/api/goals/{goal['id']}")
        assert response.status_code == 404
        assert response.get_json() == {'message': 'Goal not found'}


class TestGoalProgress:
    """Test progress updates."""

    def test_progress_reaching_target_completes(self, client):
        """Current >= target marks the goal completed."""
        goal = create_goal(client, '500')

        response = client.patch(f"/api/goals/{goal['id']}/progress", json={'currentAmount': '500'})
        assert response.status_code == 200
        body = response.get_json()
        assert body['currentAmount'] == '500.00'
        assert body['isCompleted'] is True

    def test_progress_can_regress(self, client):
        """Lowering the amount below target un-completes the goal."""
        goal = create_goal(client, '500')
        client.patch(f"/api/goals/{goal['id']}/progress", json={'currentAmount': '650'})

        body = client.patch(f"/api/goals/{goal['id']}/progress",
                            json={'currentAmount': '499.99'}).get_json()
        assert body['currentAmount'] == '499.99'
        assert body['isCompleted'] is False

    def test_progress_replaces_not_increments(self, client):
        """Progress sets the amount outright."""
        goal = create_goal(client)
        client.patch(f"/api/goals/{goal['id']}/progress", json={'currentAmount': '100'})
        body = client.patch(f"/api/goals/{goal['id']}/progress",
                            json={'currentAmount': '150'}).get_json()
        assert body['currentAmount'] == '150.00'

    def test_progress_negative_rejected(self, client):
        """Negative progress should be rejected."""
        goal = create_goal(client)
        response = client.patch(f"/api/goals/{goal['id']}/progress", json={'currentAmount': '-1'})
        assert response.status_code == 400

    def test_progress_missing_goal(self, client):
        """Unknown goal returns 404."""
        response = client.patch('/api/goals/999/progress', json={'currentAmount': '1'})
        assert response.status_code == 404

    def test_contribute_adds_to_current(self, client):
        """Contributions accumulate and can complete the goal."""
        goal = create_goal(client, '100')
        client.post(f"/api/goals/{goal['id']}/contribute", json={'amount': '60'})
        body = client.post(f"/api/goals/{goal['id']}/contribute", json={'amount': '40'}).get_json()

        assert body['currentAmount'] == '100.00'
        assert body['isCompleted'] is True


class TestGoalTracker:
    """Test the tracker directly."""

    @pytest.mark.parametrize('amount, completed', [
        ('0', False),
        ('999.99', False),
        ('1000', True),
        ('1000.01', True),
    ])
    def test_completion_follows_amount(self, store, amount, completed):
        goal = store.add_goal(GoalIn(name='Trip', target_amount='1000'))

        updated = GoalTracker(store).update_progress(goal.id, Decimal(amount))
        assert updated.is_completed is completed

    def test_missing_goal_raises(self, store):
        with pytest.raises(NotFound):
            GoalTracker(store).update_progress(12345, Decimal('1'))
