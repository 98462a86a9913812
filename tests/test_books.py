"""
Tests for Books API Endpoints

TEST NAMING CONVENTION:
- test_<action>_<scenario>
- Examples: test_create_book_success, test_get_book_not_found
"""

from datetime import date

from fastapi import status


class TestListBooks:
    """Tests for GET /api/v1/books."""

    def test_list_books_empty(self, client):
        response = client.get("/api/v1/books")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["items"] == []
        assert data["paging"]["total_number_of_items"] == 0
        assert data["paging"]["page_number"] == 1
        assert data["paging"]["page_count"] == 0
        assert data["paging"]["page_max_size"] == 50

    def test_list_books_with_data(self, client, sample_book):
        response = client.get("/api/v1/books")

        data = response.json()
        assert data["paging"]["total_number_of_items"] == 1
        assert data["items"][0]["title"] == "1984"
        assert data["items"][0]["isbn"] == "9780451524935"

    def test_list_books_pagination(self, client, make_book):
        for i in range(10):
            make_book(title=f"Book {i:02d}")

        response = client.get("/api/v1/books", params={"page_number": 2, "page_size": 4})

        data = response.json()
        assert [b["title"] for b in data["items"]] == ["Book 04", "Book 05", "Book 06", "Book 07"]
        assert data["paging"]["page_count"] == 3
        assert data["paging"]["page_size"] == 4

    def test_list_books_page_past_end(self, client, make_book):
        for _ in range(10):
            make_book()

        response = client.get("/api/v1/books", params={"page_number": 3, "page_size": 5})

        data = response.json()
        assert data["items"] == []
        assert data["paging"]["page_count"] == 2

    def test_list_books_invalid_pagination(self, client):
        assert client.get("/api/v1/books?page_number=0").status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert client.get("/api/v1/books?page_size=0").status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestGetBook:
    """Tests for GET /api/v1/books/{book_id}."""

    def test_get_book_success(self, client, sample_book):
        response = client.get(f"/api/v1/books/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_book.id
        assert data["author"] == "George Orwell"
        assert data["publish_date"] == "1949-06-08"
        assert data["loan_history"]["items"] == []

    def test_get_book_includes_loan_history(self, client, sample_book, make_user, make_loan):
        first = make_user(name="First")
        second = make_user(name="Second")
        make_loan(second, sample_book, date(2024, 2, 1), date(2024, 2, 10))
        make_loan(first, sample_book, date(2024, 1, 1), date(2024, 1, 10))
        make_loan(first, sample_book, date(2024, 3, 1))

        response = client.get(f"/api/v1/books/{sample_book.id}", params={"page_size": 2})

        history = response.json()["loan_history"]
        # Newest loan first
        assert [entry["user"]["name"] for entry in history["items"]] == ["First", "Second"]
        assert [entry["loan_date"] for entry in history["items"]] == ["2024-03-01", "2024-02-01"]
        assert history["paging"]["total_number_of_items"] == 3
        assert history["paging"]["page_count"] == 2

    def test_get_book_not_found(self, client):
        response = client.get("/api/v1/books/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Book not found"


class TestCreateBook:
    """Tests for POST /api/v1/books."""

    def test_create_book_success(self, client, book_data):
        response = client.post("/api/v1/books", json=book_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == "Brave New World"
        assert data["isbn"] == "9780060850524"  # Hyphens stripped
        assert "id" in data

    def test_create_book_duplicate_isbn(self, client, sample_book, book_data):
        book_data["isbn"] = "978-0-451-52493-5"

        response = client.post("/api/v1/books", json=book_data)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Book with that ISBN already exists"

    def test_create_book_invalid_isbn(self, client, book_data):
        book_data["isbn"] = "12345"

        response = client.post("/api/v1/books", json=book_data)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_create_book_missing_fields(self, client):
        response = client.post("/api/v1/books", json={"title": "Lonely"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_create_book_blank_title(self, client, book_data):
        book_data["title"] = "   "

        response = client.post("/api/v1/books", json=book_data)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestUpdateBook:
    """Tests for PUT and PATCH /api/v1/books/{book_id}."""

    def test_replace_book(self, client, sample_book, book_data):
        response = client.put(f"/api/v1/books/{sample_book.id}", json=book_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_book.id
        assert data["title"] == "Brave New World"
        assert data["author"] == "Aldous Huxley"

    def test_replace_book_keeping_own_isbn(self, client, sample_book, book_data):
        book_data["isbn"] = sample_book.isbn

        response = client.put(f"/api/v1/books/{sample_book.id}", json=book_data)

        assert response.status_code == status.HTTP_200_OK

    def test_patch_book_partial(self, client, sample_book):
        response = client.patch(
            f"/api/v1/books/{sample_book.id}",
            json={"title": "Nineteen Eighty-Four"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["title"] == "Nineteen Eighty-Four"
        assert data["author"] == "George Orwell"

    def test_patch_book_to_taken_isbn(self, client, sample_book, make_book):
        other = make_book(isbn="0061120081")

        response = client.patch(f"/api/v1/books/{other.id}", json={"isbn": sample_book.isbn})

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_update_book_not_found(self, client, book_data):
        response = client.put("/api/v1/books/99999", json=book_data)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteBook:
    """Tests for DELETE /api/v1/books/{book_id}."""

    def test_delete_book_success(self, client, sample_book):
        response = client.delete(f"/api/v1/books/{sample_book.id}")
        assert response.status_code == status.HTTP_204_NO_CONTENT

        response = client.get(f"/api/v1/books/{sample_book.id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_book_removes_loans_and_reviews(self, client, sample_loan, sample_review, sample_book):
        client.delete(f"/api/v1/books/{sample_book.id}")

        loans = client.get("/api/v1/loans").json()
        assert loans["paging"]["total_number_of_items"] == 0
        reviews = client.get("/api/v1/books/reviews").json()
        assert reviews["items"] == []

    def test_delete_book_not_found(self, client):
        response = client.delete("/api/v1/books/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
