"""
Library Lending API Package

Record keeper for a lending library: books, users, loans and reviews,
plus the paginated reports and recommendations derived from them.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and declarative base
- exceptions.py: Domain errors raised by the services
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions (session, paging, filters)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (paging, loan windows, reports, recommendations)
"""

__version__ = "0.1.0"
