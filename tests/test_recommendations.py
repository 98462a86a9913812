"""
Tests for the Recommendation Ranker.

Scenarios:
- borrowed and reviewed books are never recommended
- higher average rating first, equal averages by title
- books nobody reviewed come last
"""

from datetime import date

import pytest
from fastapi import status

from library_api.exceptions import NotFoundError
from library_api.services.pagination import PageRequest
from library_api.services.recommendations import (
    RecommendationQuery,
    ranked_sql,
    recommend_for_user,
)


@pytest.fixture
def catalogue(make_book):
    """Books A, B, C, D titled so alphabetical order is obvious."""
    return {title: make_book(title=title) for title in ("A", "B", "C", "D")}


@pytest.fixture
def critics(make_user):
    return [make_user(name=f"Critic {i}") for i in range(3)]


class TestCandidateExclusion:
    def test_borrowed_and_reviewed_books_are_excluded(
        self, db_session, catalogue, sample_user, critics, make_loan, make_review
    ):
        make_loan(sample_user, catalogue["A"], date(2024, 1, 1), date(2024, 1, 5))
        make_review(sample_user, catalogue["B"], 5)
        # High ratings on A and B from others must not bring them back
        make_review(critics[0], catalogue["A"], 5)
        make_review(critics[1], catalogue["B"], 5)

        result = recommend_for_user(db_session, sample_user.id, PageRequest.create())

        assert {item.book.title for item in result.items} == {"C", "D"}
        assert result.paging.total_number_of_items == 2

    def test_active_loan_also_excludes(self, db_session, sample_user, sample_book, sample_loan, make_book):
        other = make_book(title="Other")

        result = recommend_for_user(db_session, sample_user.id, PageRequest.create())

        assert [item.book.id for item in result.items] == [other.id]

    def test_other_users_loans_do_not_exclude(self, db_session, catalogue, sample_user, critics, make_loan):
        make_loan(critics[0], catalogue["A"], date(2024, 1, 1))

        result = recommend_for_user(db_session, sample_user.id, PageRequest.create())

        assert len(result.items) == 4


class TestRanking:
    def test_rated_before_unrated(self, db_session, catalogue, sample_user, critics, make_loan, make_review):
        make_loan(sample_user, catalogue["A"], date(2024, 1, 1))
        make_review(sample_user, catalogue["B"], 3)
        make_review(critics[0], catalogue["C"], 4)
        make_review(critics[1], catalogue["C"], 5)

        result = recommend_for_user(db_session, sample_user.id, PageRequest.create())

        assert [item.book.title for item in result.items] == ["C", "D"]
        assert result.items[0].average_rating == pytest.approx(4.5)
        assert result.items[0].review_count == 2
        assert result.items[1].average_rating is None
        assert result.items[1].review_count == 0

    def test_orders_by_average_descending(self, db_session, catalogue, sample_user, critics, make_review):
        make_review(critics[0], catalogue["A"], 2)
        make_review(critics[0], catalogue["B"], 5)
        make_review(critics[0], catalogue["C"], 3)
        make_review(critics[1], catalogue["C"], 4)

        result = recommend_for_user(db_session, sample_user.id, PageRequest.create())

        assert [item.book.title for item in result.items] == ["B", "C", "A", "D"]

    def test_ties_broken_by_title(self, db_session, make_book, sample_user, critics, make_review):
        # Inserted out of title order so id order differs from title order
        zebra = make_book(title="Zebra")
        apple = make_book(title="Apple")
        mango = make_book(title="Mango")
        for book in (zebra, apple, mango):
            make_review(critics[0], book, 4)

        result = recommend_for_user(db_session, sample_user.id, PageRequest.create())

        assert [item.book.title for item in result.items] == ["Apple", "Mango", "Zebra"]

    def test_zero_rating_still_ranks_before_unrated(self, db_session, catalogue, sample_user, critics, make_review):
        make_review(critics[0], catalogue["D"], 0)

        result = recommend_for_user(db_session, sample_user.id, PageRequest.create())

        assert [item.book.title for item in result.items] == ["D", "A", "B", "C"]
        assert result.items[0].average_rating == 0.0

    def test_title_ties_compare_by_code_point(self, db_session, make_book, sample_user, critics, make_review):
        apple = make_book(title="apple")
        banana = make_book(title="Banana")
        for book in (apple, banana):
            make_review(critics[0], book, 3)

        result = recommend_for_user(db_session, sample_user.id, PageRequest.create())

        assert [item.book.title for item in result.items] == ["Banana", "apple"]

    def test_postgresql_statement_orders_titles_with_c_collation(self):
        statement = str(ranked_sql("postgresql"))

        assert 'b.title COLLATE "C" ASC' in statement

    def test_sqlite_statement_uses_default_collation(self):
        statement = str(ranked_sql("sqlite"))

        assert "COLLATE" not in statement
        assert "b.title ASC" in statement

class TestPaging:
    def test_pages_follow_ranking(self, db_session, catalogue, sample_user, critics, make_review):
        make_review(critics[0], catalogue["D"], 5)

        first = recommend_for_user(db_session, sample_user.id, PageRequest.create(1, 3))
        second = recommend_for_user(db_session, sample_user.id, PageRequest.create(2, 3))

        assert [item.book.title for item in first.items] == ["D", "A", "B"]
        assert [item.book.title for item in second.items] == ["C"]
        assert second.paging.page_count == 2
        assert second.paging.total_number_of_items == 4

    def test_page_past_end(self, db_session, catalogue, sample_user):
        result = recommend_for_user(db_session, sample_user.id, PageRequest.create(9, 3))

        assert result.items == []
        assert result.paging.total_number_of_items == 4

    def test_query_object_count_matches_rows(self, db_session, catalogue, sample_user):
        query = RecommendationQuery(db_session, sample_user.id)

        assert query.count() == 4
        assert len(query.page(limit=10, offset=0)) == 4
        assert query.page(limit=0, offset=0) == []


class TestUnknownUser:
    def test_service_raises_not_found(self, db_session, catalogue):
        with pytest.raises(NotFoundError):
            recommend_for_user(db_session, 9999, PageRequest.create())

    def test_endpoint_returns_404(self, client):
        response = client.get("/api/v1/users/9999/recommendations")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "User not found"


class TestRecommendationEndpoint:
    def test_get_recommendations(self, client, catalogue, sample_user, critics, make_review):
        make_review(critics[0], catalogue["B"], 4)

        response = client.get(
            f"/api/v1/users/{sample_user.id}/recommendations",
            params={"page_size": 2},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [item["book"]["title"] for item in data["items"]] == ["B", "A"]
        assert data["items"][0]["average_rating"] == 4.0
        assert data["paging"]["page_count"] == 2
        assert data["paging"]["page_size"] == 2
