"""
Tests for Books API Endpoints

This module tests all CRUD operations for the /api/books endpoints.
Book routes are open: none of these requests carry a token.

TEST NAMING CONVENTION:
- test_<action>_<scenario>
- Examples: test_create_book_duplicate_isbn, test_get_book_not_found
"""

import pytest
from fastapi import status

from tests.conftest import book_payload

MISSING_ID = "65a1f0c2e4b0a1b2c3d4e5f6"


class TestListBooks:
    """Tests for GET /api/books"""

    def test_list_books_empty(self, client):
        response = client.get("/api/books")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_list_books_with_author(self, client, sample_book, sample_author):
        response = client.get("/api/books")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data) == 1
        assert data[0]["title"] == "1984"
        assert data[0]["author"] == {
            "id": sample_author["id"],
            "firstName": "George",
            "lastName": "Orwell",
        }

    def test_list_books_shares_author_lookup(self, client, sample_author):
        for isbn in ("1111111111", "2222222222"):
            client.post("/api/books", json=book_payload(sample_author["id"], isbn=isbn))

        data = client.get("/api/books").json()

        assert len(data) == 2
        assert {book["author"]["id"] for book in data} == {sample_author["id"]}


class TestGetBook:
    """Tests for GET /api/books/{book_id}"""

    def test_get_book(self, client, sample_book):
        response = client.get(f"/api/books/{sample_book['id']}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_book["id"]
        assert data["isbn"] == "9780451524935"
        assert data["genre"] == "Science Fiction"
        assert data["publicationYear"] == 1949
        assert data["pages"] == 328
        assert data["price"] == 12.99
        assert data["author"]["lastName"] == "Orwell"

    def test_get_book_not_found(self, client):
        response = client.get(f"/api/books/{MISSING_ID}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Book not found"}

    def test_get_book_invalid_id(self, client):
        response = client.get("/api/books/123")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid book ID"


class TestCreateBook:
    """Tests for POST /api/books"""

    def test_create_book(self, client, sample_author):
        response = client.post("/api/books", json=book_payload(sample_author["id"]))

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == "1984"
        assert data["author"]["firstName"] == "George"
        assert "createdAt" in data

    def test_create_book_without_token(self, client, sample_author):
        """Books are open; no Authorization header is needed."""
        response = client.post(
            "/api/books",
            json=book_payload(sample_author["id"], isbn="0451524934"),
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_create_book_duplicate_isbn(self, client, sample_book, sample_author):
        response = client.post(
            "/api/books",
            json=book_payload(sample_author["id"], title="Another Title"),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"message": "ISBN already exists"}

    def test_create_book_unknown_author(self, client):
        """An author id that references nothing is stored; the book reports no author."""
        response = client.post("/api/books", json=book_payload(MISSING_ID))

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["author"] is None

    def test_create_book_invalid_author_id(self, client):
        response = client.post("/api/books", json=book_payload("not-an-id"))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert any(error["field"] == "author" for error in response.json()["errors"])

    def test_create_book_future_year(self, client, sample_author):
        response = client.post(
            "/api/books",
            json=book_payload(sample_author["id"], publicationYear=3000),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert any(
            error["field"] == "publicationYear" for error in response.json()["errors"]
        )

    def test_create_book_missing_fields(self, client):
        response = client.post("/api/books", json={"title": "Untitled"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"isbn", "author", "genre", "publicationYear", "pages", "price"} <= fields


class TestBookValidation:
    """Tests for book field rules."""

    @pytest.mark.parametrize(
        "isbn,valid",
        [
            ("0451524934", True),          # 10 digits
            ("9780451524935", True),       # 13 digits
            ("123", False),                # Too short
            ("12345678901234", False),     # Too long
            ("978-0-45-152493-5", False),  # Hyphens are not accepted
            ("006112008X", False),         # Digits only
        ],
    )
    def test_isbn_validation(self, client, sample_author, isbn, valid):
        response = client.post(
            "/api/books",
            json=book_payload(sample_author["id"], isbn=isbn),
        )

        if valid:
            assert response.status_code == status.HTTP_201_CREATED
        else:
            assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.parametrize(
        "genre,valid",
        [
            ("Fiction", True),
            ("Self-Help", True),
            ("Other", True),
            ("Poetry", False),
            ("fiction", False),
        ],
    )
    def test_genre_validation(self, client, sample_author, genre, valid):
        response = client.post(
            "/api/books",
            json=book_payload(sample_author["id"], genre=genre),
        )

        expected = status.HTTP_201_CREATED if valid else status.HTTP_400_BAD_REQUEST
        assert response.status_code == expected

    @pytest.mark.parametrize(
        "field,value",
        [
            ("pages", 0),
            ("price", -1),
            ("publicationYear", 999),
            ("title", "x" * 201),
            ("description", "x" * 1001),
        ],
    )
    def test_out_of_range_values(self, client, sample_author, field, value):
        response = client.post(
            "/api/books",
            json=book_payload(sample_author["id"], **{field: value}),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestUpdateBook:
    """Tests for PUT /api/books/{book_id}"""

    def test_update_book(self, client, sample_book, sample_author):
        response = client.put(
            f"/api/books/{sample_book['id']}",
            json=book_payload(sample_author["id"], price=9.5, pages=330),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_book["id"]
        assert data["price"] == 9.5
        assert data["pages"] == 330
        assert data["author"]["id"] == sample_author["id"]

    def test_update_book_not_found(self, client, sample_author):
        response = client.put(
            f"/api/books/{MISSING_ID}",
            json=book_payload(sample_author["id"]),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_book_to_taken_isbn(self, client, sample_book, sample_author):
        other = client.post(
            "/api/books",
            json=book_payload(sample_author["id"], isbn="0451524934"),
        ).json()

        response = client.put(
            f"/api/books/{other['id']}",
            json=book_payload(sample_author["id"], isbn=sample_book["isbn"]),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"message": "ISBN already exists"}


class TestDeleteBook:
    """Tests for DELETE /api/books/{book_id}"""

    def test_delete_book(self, client, sample_book):
        response = client.delete(f"/api/books/{sample_book['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Book deleted successfully"}
        assert client.get(f"/api/books/{sample_book['id']}").status_code == 404

    def test_delete_book_not_found(self, client):
        response = client.delete(f"/api/books/{MISSING_ID}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
