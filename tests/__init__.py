"""
Finance Tracker Test Suite

This package contains tests for the finance tracker API:

- test_expenses.py: Expense creation, receipts, filtering and search
- test_income.py: Income creation and listing
- test_budgets.py: Budget CRUD, spent tracking and alerts
- test_goals.py: Goal CRUD and progress updates
- test_recurring.py: Recurring templates and processing
- test_analytics.py: Analytics aggregation and endpoints
- test_reports.py: Report generation and immutability
- test_app.py: Configuration and error handling

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_budgets.py

Run with verbose output:
    pytest tests/ -v
"""
