"""HTTP tests for the public and admin book endpoints."""

import uuid
from datetime import datetime

import pytest

import app.utils.books as books_module
from app.core.config import settings
from app.models import Book, Review, User

API = settings.API_V1_STR


def _payload(title="Hyperion", **overrides):
    data = {
        "book": f"https://openlibrary.org/books/{uuid.uuid4().hex}.json",
        "title": title,
        "author": "Dan Simmons",
        "condition": "https://schema.org/NewCondition",
    }
    data.update(overrides)
    return data


@pytest.fixture
def create_book(client, admin_headers):
    def _create(title="Hyperion", **overrides):
        response = client.post(f"{API}/admin/books/", json=_payload(title, **overrides), headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


class TestAdminAccess:
    def test_missing_secret_is_forbidden(self, client):
        response = client.get(f"{API}/admin/books/")
        assert response.status_code == 403

    def test_wrong_secret_is_forbidden(self, client):
        response = client.post(f"{API}/admin/books/", json=_payload(), headers={"X-Admin-Secret": "nope"})
        assert response.status_code == 403


class TestAdminCreate:
    def test_slug_from_title(self, create_book):
        book = create_book("Hyperion")

        assert book["slug"] == "hyperion"
        assert book["promotion_status"] == "none"
        assert book["is_promoted"] is False
        assert book["rating"] is None

    def test_collision_gets_suffix(self, create_book):
        create_book("Hyperion")
        assert create_book("Hyperion!!")["slug"] == "hyperion-1"

    def test_empty_title_after_normalization(self, create_book):
        assert create_book("???")["slug"] == "untitled"

    def test_explicit_slug(self, create_book):
        assert create_book(slug="my-custom-slug")["slug"] == "my-custom-slug"

    def test_placeholder_slug_is_replaced(self, create_book):
        assert create_book(slug="book-42")["slug"] == "hyperion"

    def test_invalid_slug_rejected(self, client, admin_headers):
        response = client.post(f"{API}/admin/books/", json=_payload(slug="Not A Slug"), headers=admin_headers)
        assert response.status_code == 422

    def test_non_https_source_rejected(self, client, admin_headers):
        response = client.post(
            f"{API}/admin/books/", json=_payload(book="http://openlibrary.org/x.json"), headers=admin_headers
        )
        assert response.status_code == 422

    def test_duplicate_source_is_conflict(self, client, admin_headers, create_book):
        book = create_book()
        response = client.post(
            f"{API}/admin/books/", json=_payload("Other", book=book["book"]), headers=admin_headers
        )
        assert response.status_code == 409

    def test_duplicate_explicit_slug_is_conflict(self, client, admin_headers, create_book):
        create_book(slug="my-custom-slug")
        response = client.post(
            f"{API}/admin/books/", json=_payload("Other", slug="my-custom-slug"), headers=admin_headers
        )
        assert response.status_code == 409
        assert response.json()["detail"]["slug"] == "my-custom-slug"

    def test_lost_race_is_retried(self, client, admin_headers, create_book, monkeypatch):
        create_book()
        real_exists = books_module.book_slug_exists
        calls = {"n": 0}

        def racy_exists(session, candidate, excluding_id=None):
            calls["n"] += 1
            if calls["n"] == 1:
                return False
            return real_exists(session, candidate, excluding_id=excluding_id)

        monkeypatch.setattr(books_module, "book_slug_exists", racy_exists)
        response = client.post(f"{API}/admin/books/", json=_payload(), headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["slug"] == "hyperion-1"

    def test_with_categories(self, client, admin_headers, create_book):
        category = client.post(f"{API}/admin/categories/", json={"name": "Science Fiction"}, headers=admin_headers)
        assert category.status_code == 201

        book = create_book(category_ids=[category.json()["id"]])

        assert [c["name"] for c in book["categories"]] == ["Science Fiction"]

    def test_unknown_category(self, client, admin_headers):
        response = client.post(
            f"{API}/admin/books/", json=_payload(category_ids=[str(uuid.uuid4())]), headers=admin_headers
        )
        assert response.status_code == 404


class TestAdminUpdate:
    def test_custom_slug_survives_title_change(self, client, admin_headers, create_book):
        book = create_book(slug="my-custom-slug")

        response = client.put(
            f"{API}/admin/books/{book['id']}", json={"title": "The Fall of Hyperion"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["title"] == "The Fall of Hyperion"
        assert response.json()["slug"] == "my-custom-slug"

    def test_placeholder_tracks_title_change(self, client, db, admin_headers, create_book):
        book = create_book()
        # Placeholders come from imports that write the column directly
        db.query(Book).filter(Book.id == uuid.UUID(book["id"])).update({"slug": "book-42"})
        db.commit()

        response = client.put(
            f"{API}/admin/books/{book['id']}", json={"title": "The Fall of Hyperion"}, headers=admin_headers
        )

        assert response.json()["slug"] == "the-fall-of-hyperion"

    def test_null_slug_hands_slug_back_to_title(self, client, admin_headers, create_book):
        book = create_book(slug="my-custom-slug")

        response = client.put(f"{API}/admin/books/{book['id']}", json={"slug": None}, headers=admin_headers)

        assert response.json()["slug"] == "hyperion"

    def test_promotion_status(self, client, admin_headers, create_book):
        book = create_book()

        response = client.put(
            f"{API}/admin/books/{book['id']}",
            json={"promotion_status": "discount", "is_promoted": True},
            headers=admin_headers,
        )

        assert response.json()["promotion_status"] == "discount"
        assert response.json()["is_promoted"] is True

    def test_unknown_promotion_status(self, client, admin_headers, create_book):
        book = create_book()
        response = client.put(
            f"{API}/admin/books/{book['id']}", json={"promotion_status": "clearance"}, headers=admin_headers
        )
        assert response.status_code == 422

    def test_null_title_rejected(self, client, admin_headers, create_book):
        book = create_book()
        response = client.put(f"{API}/admin/books/{book['id']}", json={"title": None}, headers=admin_headers)
        assert response.status_code == 422

    def test_missing_book(self, client, admin_headers):
        response = client.put(f"{API}/admin/books/{uuid.uuid4()}", json={"title": "X"}, headers=admin_headers)
        assert response.status_code == 404


class TestAdminReadDelete:
    def test_get_and_delete(self, client, admin_headers, create_book):
        book = create_book()

        assert client.get(f"{API}/admin/books/{book['id']}", headers=admin_headers).status_code == 200
        assert client.delete(f"{API}/admin/books/{book['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"{API}/admin/books/{book['id']}", headers=admin_headers).status_code == 404

    def test_list_includes_promotion_status(self, client, admin_headers, create_book):
        create_book()
        response = client.get(f"{API}/admin/books/", headers=admin_headers)

        assert response.json()["total"] == 1
        assert response.json()["data"][0]["promotion_status"] == "none"


class TestPublicBooks:
    def test_get_by_slug_hides_promotion_status(self, client, create_book):
        create_book()
        response = client.get(f"{API}/books/hyperion")

        assert response.status_code == 200
        assert response.json()["title"] == "Hyperion"
        assert "promotion_status" not in response.json()

    def test_unknown_slug(self, client):
        assert client.get(f"{API}/books/nope").status_code == 404

    def test_filters_and_order(self, client, create_book):
        create_book("Hyperion")
        create_book("Endymion", condition="https://schema.org/UsedCondition")
        create_book("The Rise of Endymion", author="Someone Else")

        titles = [b["title"] for b in client.get(f"{API}/books/", params={"title": "endymion"}).json()["data"]]
        assert titles == ["Endymion", "The Rise of Endymion"]

        used = client.get(f"{API}/books/", params={"condition": "https://schema.org/UsedCondition"}).json()
        assert [b["title"] for b in used["data"]] == ["Endymion"]

        by_author = client.get(f"{API}/books/", params={"author": "simmons"}).json()
        assert by_author["total"] == 2

        desc = client.get(f"{API}/books/", params={"order[title]": "desc"}).json()
        assert [b["title"] for b in desc["data"]] == ["The Rise of Endymion", "Hyperion", "Endymion"]

    def test_pagination(self, client, create_book):
        for i in range(3):
            create_book(f"Book {i}")

        page = client.get(f"{API}/books/", params={"limit": 2, "page": 2}).json()

        assert page["total"] == 3
        assert page["total_pages"] == 2
        assert [b["title"] for b in page["data"]] == ["Book 2"]

    def test_rating_and_reviews(self, client, db, create_book):
        book = create_book()
        book_id = uuid.UUID(book["id"])
        for i, rating in enumerate((5, 4)):
            user = User(email=f"reader{i}@example.com", first_name="Ada", last_name=f"Reader{i}")
            db.add(Review(user=user, book_id=book_id, body="Good", rating=rating, published_at=datetime(2024, 1, i + 1)))
        db.commit()

        detail = client.get(f"{API}/books/hyperion").json()
        assert detail["rating"] == 4

        reviews = client.get(f"{API}/books/hyperion/reviews").json()
        assert reviews["total"] == 2
        assert [r["user"]["last_name"] for r in reviews["data"]] == ["Reader1", "Reader0"]

    def test_categories(self, client, admin_headers):
        client.post(f"{API}/admin/categories/", json={"name": "Fantasy"}, headers=admin_headers)
        client.post(f"{API}/admin/categories/", json={"name": "Classics"}, headers=admin_headers)

        names = [c["name"] for c in client.get(f"{API}/categories/").json()]

        assert names == ["Classics", "Fantasy"]

    def test_duplicate_category(self, client, admin_headers):
        client.post(f"{API}/admin/categories/", json={"name": "Fantasy"}, headers=admin_headers)
        response = client.post(f"{API}/admin/categories/", json={"name": "Fantasy"}, headers=admin_headers)
        assert response.status_code == 409


class TestMostReviewedEndpoint:
    def test_no_reviews(self, client, admin_headers):
        response = client.get(f"{API}/admin/reviews/most-reviewed", headers=admin_headers)
        assert response.status_code == 404

    def test_by_month(self, client, db, admin_headers, create_book):
        book = create_book()
        user = User(email="reader@example.com", first_name="Ada", last_name="Reader")
        db.add(Review(user=user, book_id=uuid.UUID(book["id"]), body="Good", rating=5, published_at=datetime(2024, 2, 14)))
        db.commit()

        response = client.get(f"{API}/admin/reviews/most-reviewed", params={"by": "month"}, headers=admin_headers)

        assert response.json() == {"granularity": "month", "period": "2024-02-01", "review_count": 1}


class TestSourceUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://exa mple.com/x",
            "https://a.b/<script>",
            "https://localhost/books/1.json",
            "ftp://openlibrary.org/books/1.json",
            "not a url",
        ],
    )
    def test_malformed_source_rejected(self, client, admin_headers, url):
        response = client.post(f"{API}/admin/books/", json=_payload(book=url), headers=admin_headers)
        assert response.status_code == 422

    def test_source_stored_as_given(self, create_book):
        url = "https://openlibrary.org/books/OL2055137M.json"
        assert create_book(book=url)["book"] == url

    def test_update_validates_source(self, client, admin_headers, create_book):
        book = create_book()
        response = client.put(
            f"{API}/admin/books/{book['id']}", json={"book": "https://exa mple.com/x"}, headers=admin_headers
        )
        assert response.status_code == 422
