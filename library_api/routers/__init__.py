"""
API Routers Package

Router Structure:
- books.py: /books, /books/{book_id}
- users.py: /users, /users/{user_id}
- loans.py: /loans and /users/{user_id}/books/{book_id} (lend, return, edit)
- reviews.py: /books/reviews, /books/{book_id}/reviews, /users/{user_id}/reviews
- reports.py: /reports/users, /reports/books
- recommendations.py: /users/{user_id}/recommendations

Each router is imported and registered in main.py under /api/v1.
"""

from library_api.routers.books import router as books_router
from library_api.routers.loans import router as loans_router
from library_api.routers.recommendations import router as recommendations_router
from library_api.routers.reports import router as reports_router
from library_api.routers.reviews import router as reviews_router
from library_api.routers.users import router as users_router

__all__ = [
    "books_router",
    "loans_router",
    "recommendations_router",
    "reports_router",
    "reviews_router",
    "users_router",
]
