# tests/v1/test_gallery.py
"""Tests for the public gallery endpoints."""

from datetime import UTC, datetime, timedelta

from fastapi import status

from humor_gallery.core.settings import settings

BASE = datetime(2024, 1, 1, tzinfo=UTC)


def test_gallery_lists_newest_first_with_first_caption(client, make_image, make_caption) -> None:
    old = make_image(BASE)
    new = make_image(BASE + timedelta(days=1))
    bare = make_image(BASE - timedelta(days=1))
    make_caption(new, "next")
    make_caption(new, "second")
    make_caption(old, "only")

    response = client.get("/api/v1/images")
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert [item["image"]["id"] for item in body["items"]] == [new.id, old.id, bare.id]
    # The gallery shows the first stored caption as-is.
    assert body["items"][0]["caption"]["content"] == "next"
    assert body["items"][1]["caption"]["content"] == "only"
    assert body["items"][2]["caption"] is None
    assert body["total_count"] == 3
    assert body["total_pages"] == 1
    assert body["has_next"] is False
    assert body["has_prev"] is False


def test_gallery_pagination(client, make_image) -> None:
    size = settings.gallery_page_size
    images = [make_image(BASE + timedelta(minutes=i)) for i in range(size + 2)]

    first = client.get("/api/v1/images?page=1").json()
    assert len(first["items"]) == size
    assert first["items"][0]["image"]["id"] == images[-1].id
    assert first["total_pages"] == 2
    assert first["has_next"] is True

    second = client.get("/api/v1/images?page=2").json()
    assert [item["image"]["id"] for item in second["items"]] == [images[1].id, images[0].id]
    assert second["has_next"] is False
    assert second["has_prev"] is True


def test_gallery_category_filter(client, make_image, make_category) -> None:
    cat_image = make_image(BASE)
    other_image = make_image(BASE + timedelta(days=1))
    category = make_category("Cats", (cat_image,))
    make_category("Dogs", (other_image,))

    body = client.get(f"/api/v1/images?category={category.id}").json()
    assert [item["image"]["id"] for item in body["items"]] == [cat_image.id]
    assert body["total_count"] == 1


def test_gallery_unknown_category(client) -> None:
    response = client.get("/api/v1/images?category=999")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_gallery_invalid_page(client) -> None:
    assert client.get("/api/v1/images?page=0").status_code == status.HTTP_400_BAD_REQUEST


def test_empty_gallery(client) -> None:
    body = client.get("/api/v1/images").json()
    assert body["items"] == []
    assert body["total_pages"] == 1


def test_list_categories(client, make_category) -> None:
    make_category("Zebras")
    make_category("Apes")

    response = client.get("/api/v1/categories")
    assert response.status_code == status.HTTP_200_OK
    assert [category["name"] for category in response.json()] == ["Apes", "Zebras"]
