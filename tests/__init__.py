"""
Test Suite for the Library Lending API

Test Organization:
- conftest.py: Shared fixtures (test database, client, factories, sample data)
- test_pagination.py: Page sizes, page counts, slicing
- test_loan_window.py: Date/duration predicates and their SQL clauses
- test_reports.py: Loans grouped per user and per book
- test_recommendations.py: Candidate exclusion and ranking
- test_books.py, test_users.py, test_loans.py, test_reviews.py: REST endpoints
- test_app.py: Health, error bodies, settings

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/test_reports.py -v
"""
