"""
Tests for Users API Endpoints
"""

from datetime import date

from fastapi import status


class TestListUsers:
    def test_list_users_empty(self, client):
        response = client.get("/api/v1/users")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["items"] == []

    def test_list_users_in_id_order(self, client, make_user):
        for name in ("Zed", "Amy", "Kim"):
            make_user(name=name)

        response = client.get("/api/v1/users", params={"page_size": 2})

        data = response.json()
        assert [u["name"] for u in data["items"]] == ["Zed", "Amy"]
        assert data["paging"]["page_count"] == 2
        assert data["paging"]["total_number_of_items"] == 3


class TestGetUser:
    def test_get_user_with_loan_history(self, client, sample_user, make_book, make_loan):
        book = make_book(title="Dune")
        make_loan(sample_user, book, date(2024, 1, 1), date(2024, 1, 15))

        response = client.get(f"/api/v1/users/{sample_user.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["email"] == "jane@example.com"
        assert data["address"] == "12 Library Lane"
        history = data["loan_history"]
        assert history["items"][0]["book"]["title"] == "Dune"
        assert history["items"][0]["return_date"] == "2024-01-15"
        assert history["paging"]["total_number_of_items"] == 1

    def test_get_user_not_found(self, client):
        response = client.get("/api/v1/users/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "User not found"


class TestCreateUser:
    def test_create_user_success(self, client, user_data):
        response = client.post("/api/v1/users", json=user_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["name"] == "John Smith"
        assert data["email"] == "john@example.com"

    def test_create_user_without_address(self, client, user_data):
        del user_data["address"]

        response = client.post("/api/v1/users", json=user_data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["address"] is None

    def test_create_user_duplicate_email(self, client, sample_user, user_data):
        user_data["email"] = "Jane@Example.com"

        response = client.post("/api/v1/users", json=user_data)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "User with that email already exists"

    def test_create_user_invalid_email(self, client, user_data):
        user_data["email"] = "not-an-email"

        response = client.post("/api/v1/users", json=user_data)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestUpdateUser:
    def test_replace_user(self, client, sample_user, user_data):
        response = client.put(f"/api/v1/users/{sample_user.id}", json=user_data)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "John Smith"

    def test_patch_user_clears_address(self, client, sample_user):
        response = client.patch(f"/api/v1/users/{sample_user.id}", json={"address": None})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["address"] is None
        assert data["name"] == "Jane Doe"

    def test_patch_user_to_taken_email(self, client, sample_user, make_user):
        other = make_user()

        response = client.patch(f"/api/v1/users/{other.id}", json={"email": sample_user.email})

        assert response.status_code == status.HTTP_409_CONFLICT


class TestDeleteUser:
    def test_delete_user_cascades(self, client, sample_user, sample_loan, sample_review):
        response = client.delete(f"/api/v1/users/{sample_user.id}")
        assert response.status_code == status.HTTP_204_NO_CONTENT

        assert client.get(f"/api/v1/users/{sample_user.id}").status_code == status.HTTP_404_NOT_FOUND
        assert client.get("/api/v1/loans").json()["items"] == []

    def test_delete_user_not_found(self, client):
        assert client.delete("/api/v1/users/99999").status_code == status.HTTP_404_NOT_FOUND
