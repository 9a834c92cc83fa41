"""End-to-end API tests through the ASGI app."""

from datetime import timedelta

import pytest
import pytest_asyncio

from shelfbase.infrastructure.auth import jwt_service

API = "/api/v1"


@pytest_asyncio.fixture
async def books_id(client, auth_headers, owner, books_topic) -> str:
    """Create John's "books" collection with a year and a publisher field."""
    response = await client.post(
        f"{API}/collections",
        json={"name": "books", "topic_id": books_topic.id},
        headers=auth_headers(owner.id),
    )
    assert response.status_code == 201
    collection_id = response.json()["id"]

    response = await client.put(
        f"{API}/collections/{collection_id}",
        json={
            "name": "books",
            "topic_id": books_topic.id,
            "created_fields": [
                {"name": "year", "type": "Number"},
                {"name": "publisher", "type": "Text"},
            ],
        },
        headers=auth_headers(owner.id),
    )
    assert response.status_code == 200
    return collection_id


async def field_ids(client, collection_id: str) -> dict[str, str]:
    response = await client.get(f"{API}/collections/{collection_id}")
    return {f["name"]: f["id"] for f in response.json()["fields"]}


async def create_dune(client, headers, collection_id: str) -> str:
    ids = await field_ids(client, collection_id)
    response = await client.post(
        f"{API}/items",
        json={
            "collection_id": collection_id,
            "name": "Dune",
            "tags": ["scifi"],
            "fields": {
                "number_fields": {ids["year"]: 1965},
                "text_fields": {ids["publisher"]: "Chilton"},
            },
        },
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_topics_are_public(client):
    response = await client.get(f"{API}/topics")
    assert response.status_code == 200
    assert {t["name"] for t in response.json()} == {"Books", "Coins", "Stamps", "Other"}


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_token(self, client, books_topic):
        response = await client.post(
            f"{API}/collections", json={"name": "books", "topic_id": books_topic.id}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_token(self, client, owner):
        token = jwt_service.create_access_token(owner.id, expires_delta=timedelta(seconds=-1))
        response = await client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    @pytest.mark.asyncio
    async def test_unknown_user(self, client, auth_headers):
        response = await client.get(f"{API}/users/me", headers=auth_headers("ghost"))
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_blocked_user(self, client, auth_headers, blocked_user):
        response = await client.get(f"{API}/users/me", headers=auth_headers(blocked_user.id))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_me(self, client, auth_headers, owner):
        response = await client.get(f"{API}/users/me", headers=auth_headers(owner.id))
        assert response.status_code == 200
        assert response.json()["username"] == "john"


class TestItems:
    @pytest.mark.asyncio
    async def test_create_and_view_item(self, client, auth_headers, owner, books_id):
        item_id = await create_dune(client, auth_headers(owner.id), books_id)

        response = await client.get(f"{API}/items/{item_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Dune"
        assert body["tags"] == ["scifi"]
        assert body["owner_id"] == owner.id
        assert [(f["name"], f["value"]) for f in body["fields"]] == [
            ("year", 1965.0),
            ("publisher", "Chilton"),
        ]

    @pytest.mark.asyncio
    async def test_incomplete_fields_are_rejected(self, client, auth_headers, owner, books_id):
        ids = await field_ids(client, books_id)

        response = await client.post(
            f"{API}/items",
            json={
                "collection_id": books_id,
                "name": "Dune",
                "fields": {"number_fields": {ids["year"]: 1965}},
            },
            headers=auth_headers(owner.id),
        )

        assert response.status_code == 400
        assert [(d["field"], d["code"]) for d in response.json()["details"]] == [
            (ids["publisher"], "missing_field")
        ]

    @pytest.mark.asyncio
    async def test_stranger_gets_403(self, client, auth_headers, owner, stranger, books_id):
        item_id = await create_dune(client, auth_headers(owner.id), books_id)

        response = await client.delete(f"{API}/items/{item_id}", headers=auth_headers(stranger.id))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_then_view_and_search(
        self, client, synchronizer, auth_headers, owner, books_id
    ):
        item_id = await create_dune(client, auth_headers(owner.id), books_id)
        await synchronizer.drain()
        assert [r["id"] for r in (await client.get(f"{API}/search?q=dune")).json()] == [item_id]

        response = await client.delete(f"{API}/items/{item_id}", headers=auth_headers(owner.id))
        assert response.status_code == 204
        await synchronizer.drain()

        assert (await client.get(f"{API}/items/{item_id}")).status_code == 404
        assert (await client.get(f"{API}/search?q=dune")).json() == []

    @pytest.mark.asyncio
    async def test_update_item(self, client, auth_headers, owner, books_id):
        item_id = await create_dune(client, auth_headers(owner.id), books_id)
        ids = await field_ids(client, books_id)

        response = await client.put(
            f"{API}/items/{item_id}",
            json={
                "name": "Dune Messiah",
                "tags": ["sequel", "scifi"],
                "fields": {
                    "number_fields": {ids["year"]: 1969},
                    "text_fields": {ids["publisher"]: "Putnam"},
                },
            },
            headers=auth_headers(owner.id),
        )

        assert response.status_code == 200
        assert response.json()["tags"] == ["scifi", "sequel"]
        listed = (await client.get(f"{API}/collections/{books_id}/items")).json()
        assert [i["name"] for i in listed] == ["Dune Messiah"]


class TestCollections:
    @pytest.mark.asyncio
    async def test_name_length_is_422(self, client, auth_headers, owner, books_topic):
        response = await client.post(
            f"{API}/collections",
            json={"name": "", "topic_id": books_topic.id},
            headers=auth_headers(owner.id),
        )

        assert response.status_code == 422
        body = response.json()
        assert body["field"] == "name"
        assert body["satisfies_min_length"] is False
        assert body["satisfies_max_length"] is True

    @pytest.mark.asyncio
    async def test_unknown_field_is_404(self, client, auth_headers, owner, books_id, books_topic):
        response = await client.put(
            f"{API}/collections/{books_id}",
            json={
                "name": "books",
                "topic_id": books_topic.id,
                "updated_fields": [{"id": "ghost", "name": "ghost", "type": "Text"}],
            },
            headers=auth_headers(owner.id),
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_user_collections(self, client, owner, books_id):
        response = await client.get(f"{API}/users/{owner.id}/collections")
        assert [c["id"] for c in response.json()] == [books_id]

    @pytest.mark.asyncio
    async def test_delete_collection(self, client, auth_headers, owner, books_id):
        response = await client.delete(
            f"{API}/collections/{books_id}", headers=auth_headers(owner.id)
        )
        assert response.status_code == 204
        assert (await client.get(f"{API}/collections/{books_id}")).status_code == 404


class TestCommentsSearchAndTags:
    @pytest.mark.asyncio
    async def test_comment_makes_item_findable(
        self, client, synchronizer, auth_headers, owner, stranger, books_id
    ):
        item_id = await create_dune(client, auth_headers(owner.id), books_id)

        response = await client.post(
            f"{API}/comments",
            json={"item_id": item_id, "text": "Sandworms everywhere"},
            headers=auth_headers(stranger.id),
        )
        assert response.status_code == 201
        comment_id = response.json()["id"]
        await synchronizer.drain()

        results = (await client.get(f"{API}/search?q=sandworm")).json()
        assert [r["id"] for r in results] == [item_id]

        response = await client.put(
            f"{API}/comments/{comment_id}",
            json={"text": "Hijacked"},
            headers=auth_headers(owner.id),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_blank_search_is_400(self, client):
        assert (await client.get(f"{API}/search?q=")).status_code == 400

    @pytest.mark.asyncio
    async def test_tag_autocomplete(self, client, auth_headers, owner, books_id):
        await create_dune(client, auth_headers(owner.id), books_id)

        assert (await client.get(f"{API}/tags?prefix=sc")).json() == ["scifi"]
        assert (await client.get(f"{API}/tags")).json() == ["scifi"]


class TestUsers:
    @pytest.mark.asyncio
    async def test_admin_blocks_user(self, client, auth_headers, admin, stranger):
        response = await client.put(
            f"{API}/users/{stranger.id}/blocked",
            json={"blocked": True},
            headers=auth_headers(admin.id),
        )
        assert response.status_code == 200
        assert response.json()["blocked"] is True

        response = await client.get(f"{API}/users/me", headers=auth_headers(stranger.id))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_non_admin_cannot_grant_admin(self, client, auth_headers, owner, stranger):
        response = await client.put(
            f"{API}/users/{stranger.id}/admin",
            json={"is_admin": True},
            headers=auth_headers(owner.id),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_user_deletes_themselves(
        self, client, auth_headers, synchronizer, owner, books_id
    ):
        await create_dune(client, auth_headers(owner.id), books_id)

        response = await client.delete(f"{API}/users/{owner.id}", headers=auth_headers(owner.id))
        await synchronizer.drain()

        assert response.status_code == 204
        assert (await client.get(f"{API}/collections/{books_id}")).status_code == 404
        assert (await client.get(f"{API}/search", params={"q": "dune"})).json() == []
        response = await client.get(f"{API}/users/me", headers=auth_headers(owner.id))
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_stranger_cannot_delete_a_user(self, client, auth_headers, owner, stranger):
        response = await client.delete(
            f"{API}/users/{owner.id}", headers=auth_headers(stranger.id)
        )
        assert response.status_code == 403
