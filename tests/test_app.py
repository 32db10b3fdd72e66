"""
Test suite for application setup.
Tests cover configuration helpers and JSON error handling.
"""

import config


class TestConfigHelpers:
    """Test environment-driven configuration."""

    def test_database_url_overrides(self, monkeypatch):
        monkeypatch.setenv('DATABASE_URL', 'sqlite:///finance.db')
        assert config._database_uri() == 'sqlite:///finance.db'

    def test_mysql_url_from_parts(self, monkeypatch):
        monkeypatch.delenv('DATABASE_URL', raising=False)
        monkeypatch.setenv('MYSQL_HOST', 'db.local')
        monkeypatch.setenv('MYSQL_USER', 'ledger')
        monkeypatch.setenv('MYSQL_PASSWORD', 'p@ss')
        monkeypatch.setenv('MYSQL_DATABASE', 'money')

        uri = config._database_uri()
        assert uri.startswith('mysql+mysqlconnector://ledger:')
        assert uri.endswith('@db.local/money')
        assert 'p%40ss' in uri

    def test_env_flag(self, monkeypatch):
        monkeypatch.setenv('RECURRING_CATCH_UP', 'yes')
        assert config._env_flag('RECURRING_CATCH_UP') is True
        monkeypatch.setenv('RECURRING_CATCH_UP', '0')
        assert config._env_flag('RECURRING_CATCH_UP') is False
        monkeypatch.delenv('RECURRING_CATCH_UP')
        assert config._env_flag('RECURRING_CATCH_UP', default=True) is True


class TestErrorHandling:
    """Test JSON error responses."""

    def test_unknown_route_is_json(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert 'message' in response.get_json()

    def test_wrong_method_is_json(self, client):
        response = client.put('/api/expenses')
        assert response.status_code == 405
        assert 'message' in response.get_json()

    def test_ledger_store_registered(self, app):
        from storage import LedgerStore, get_store
        assert isinstance(get_store(), LedgerStore)

    def test_no_session_secret_generated(self, app):
        """The JSON API keeps no sessions, so no secret key is set up."""
        assert app.config['SECRET_KEY'] is None
