"""
SmartExpense Test Suite

This package contains tests for the SmartExpense application:

- test_ledger.py: Balance rule and aggregation functions (no database)
- test_validators.py: Input parsing and validation
- test_storage.py: Storage layer, concurrent postings, Pro gates, owner scoping
- test_auth.py: Signup, login, logout, current user, Pro upgrade
- test_accounts.py: Account CRUD and the free-tier account limit
- test_transactions.py: Transaction posting and listing
- test_subscriptions.py: Subscription CRUD
- test_budget_goals.py: Budget goals (Pro only)
- test_analytics.py: Analytics endpoints
- test_dashboard.py: Dashboard summary
- test_security.py: Authentication, CSRF and validation at the API boundary

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_storage.py

Run with verbose output:
    pytest tests/ -v
"""
