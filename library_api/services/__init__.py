"""
Services Package

Business logic kept out of the routers so it can be called from tests
and scripts with a plain Session.

Core:
- pagination: page size defaulting, page counts, offsets, Paging metadata
- loan_window: date/duration predicates on loans (Python and SQL forms)
- reports: loans grouped per user or per book, paginated by group
- recommendations: unread, unreviewed books ranked by average rating

Records:
- books, users, loans, reviews: create/read/update/delete with the
  domain rules (uniqueness, active-loan checks, date ordering)
"""
