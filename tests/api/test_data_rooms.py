"""Data room API: CRUD, per-owner name uniqueness, isolation between users."""

from httpx import AsyncClient

from tests.helpers import create_folder, create_room, upload_pdf


async def test_create_and_get(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.post(
        "/api/v1/data-rooms",
        json={"name": "  Series A  ", "description": "Fundraise"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    room = response.json()["data"]
    assert room["name"] == "Series A"
    assert room["description"] == "Fundraise"

    detail = await client.get(f"/api/v1/data-rooms/{room['id']}", headers=auth_headers)
    assert detail.status_code == 200
    data = detail.json()["data"]
    assert data["rootFolders"] == []
    assert data["totalFolders"] == 0


async def test_duplicate_name_per_owner_is_conflict(
    client: AsyncClient, auth_headers: dict[str, str], other_headers: dict[str, str]
) -> None:
    await create_room(client, auth_headers, "Board")
    again = await client.post("/api/v1/data-rooms", json={"name": "Board"}, headers=auth_headers)
    assert again.status_code == 409
    assert again.json()["error"] == "CONFLICT"
    # Another owner may use the same name.
    theirs = await client.post("/api/v1/data-rooms", json={"name": "Board"}, headers=other_headers)
    assert theirs.status_code == 201


async def test_blank_name_rejected(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.post("/api/v1/data-rooms", json={"name": "   "}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_list_is_paginated_and_scoped_to_owner(
    client: AsyncClient, auth_headers: dict[str, str], other_headers: dict[str, str]
) -> None:
    for i in range(3):
        await create_room(client, auth_headers, f"Room {i}")
    await create_room(client, other_headers, "Not yours")

    page1 = await client.get("/api/v1/data-rooms?page=1&limit=2", headers=auth_headers)
    body = page1.json()
    assert page1.status_code == 200
    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    page2 = await client.get("/api/v1/data-rooms?page=2&limit=2", headers=auth_headers)
    names = {r["name"] for r in body["data"]} | {r["name"] for r in page2.json()["data"]}
    assert names == {"Room 0", "Room 1", "Room 2"}


async def test_list_counts_folders_and_files(
    client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    room = await create_room(client, auth_headers)
    folder = await create_folder(client, auth_headers, room["id"], "Legal")
    await create_folder(client, auth_headers, room["id"], "Contracts", folder["id"])
    assert (await upload_pdf(client, auth_headers, folder["id"])).status_code == 201

    listed = (await client.get("/api/v1/data-rooms", headers=auth_headers)).json()["data"]
    assert listed[0]["folderCount"] == 2
    assert listed[0]["fileCount"] == 1


async def test_update_name_and_clear_description(
    client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    room = (
        await client.post(
            "/api/v1/data-rooms",
            json={"name": "Old", "description": "temp"},
            headers=auth_headers,
        )
    ).json()["data"]
    response = await client.patch(
        f"/api/v1/data-rooms/{room['id']}",
        json={"name": "New", "description": ""},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "New"
    assert response.json()["data"]["description"] is None


async def test_rename_to_taken_name_is_conflict(
    client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    await create_room(client, auth_headers, "A")
    b = await create_room(client, auth_headers, "B")
    response = await client.patch(
        f"/api/v1/data-rooms/{b['id']}", json={"name": "A"}, headers=auth_headers
    )
    assert response.status_code == 409


async def test_other_user_sees_not_found(
    client: AsyncClient, auth_headers: dict[str, str], other_headers: dict[str, str]
) -> None:
    room = await create_room(client, auth_headers)
    url = f"/api/v1/data-rooms/{room['id']}"
    assert (await client.get(url, headers=other_headers)).status_code == 404
    assert (await client.patch(url, json={"name": "x"}, headers=other_headers)).status_code == 404
    assert (await client.delete(url, headers=other_headers)).status_code == 404
    assert (await client.get(url, headers=auth_headers)).status_code == 200


async def test_delete_cascades(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    room = await create_room(client, auth_headers)
    folder = await create_folder(client, auth_headers, room["id"], "Legal")
    child = await create_folder(client, auth_headers, room["id"], "Sub", folder["id"])
    file = (await upload_pdf(client, auth_headers, child["id"])).json()["data"]

    response = await client.delete(f"/api/v1/data-rooms/{room['id']}", headers=auth_headers)
    assert response.status_code == 200

    assert (await client.get(f"/api/v1/data-rooms/{room['id']}", headers=auth_headers)).status_code == 404
    assert (await client.get(f"/api/v1/folders/{child['id']}", headers=auth_headers)).status_code == 404
    assert (await client.get(f"/api/v1/files/{file['id']}", headers=auth_headers)).status_code == 404


async def test_tree(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    room = await create_room(client, auth_headers)
    legal = await create_folder(client, auth_headers, room["id"], "Legal")
    await create_folder(client, auth_headers, room["id"], "Contracts", legal["id"])
    await create_folder(client, auth_headers, room["id"], "Finance")

    response = await client.get(f"/api/v1/data-rooms/{room['id']}/tree", headers=auth_headers)
    assert response.status_code == 200
    tree = response.json()["data"]
    assert [n["name"] for n in tree] == ["Finance", "Legal"]
    assert [c["name"] for c in tree[1]["children"]] == ["Contracts"]
