"""Folder API: hierarchy operations, sibling uniqueness, breadcrumb, isolation."""

import pytest
from httpx import AsyncClient

from dataroom.infrastructure.persistence.repositories import FolderRepository

from tests.helpers import create_folder, create_room, upload_pdf


@pytest.fixture
async def room(client: AsyncClient, auth_headers: dict[str, str]) -> dict:
    return await create_room(client, auth_headers)


async def test_create_root_and_nested(
    client: AsyncClient, auth_headers: dict[str, str], room: dict
) -> None:
    legal = await create_folder(client, auth_headers, room["id"], "Legal")
    assert legal["parentId"] is None
    assert legal["dataRoomId"] == room["id"]
    child = await create_folder(client, auth_headers, room["id"], "NDAs", legal["id"])
    assert child["parentId"] == legal["id"]

    fetched = await client.get(f"/api/v1/folders/{legal['id']}", headers=auth_headers)
    assert fetched.json()["data"]["childCount"] == 1


async def test_sibling_names_unique_per_parent(
    client: AsyncClient, auth_headers: dict[str, str], room: dict
) -> None:
    legal = await create_folder(client, auth_headers, room["id"], "Legal")
    dup = await client.post(
        "/api/v1/folders", json={"name": "Legal", "dataRoomId": room["id"]}, headers=auth_headers
    )
    assert dup.status_code == 409

    # Same name under a different parent, and different case at root, are fine.
    await create_folder(client, auth_headers, room["id"], "Legal", legal["id"])
    await create_folder(client, auth_headers, room["id"], "legal")


async def test_store_rejects_duplicate_when_precheck_is_bypassed(
    client: AsyncClient,
    auth_headers: dict[str, str],
    room: dict,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Two concurrent creates both pass the pre-check; the unique index decides."""

    async def _never_exists(self, *args, **kwargs) -> bool:
        return False

    monkeypatch.setattr(FolderRepository, "exists_sibling", _never_exists)
    parent = await create_folder(client, auth_headers, room["id"], "Parent")

    for parent_id in (None, parent["id"]):
        body = {"name": "Race", "dataRoomId": room["id"], "parentId": parent_id}
        first = await client.post("/api/v1/folders", json=body, headers=auth_headers)
        second = await client.post("/api/v1/folders", json=body, headers=auth_headers)
        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"] == "CONFLICT"


async def test_parent_from_another_room_is_not_found(
    client: AsyncClient, auth_headers: dict[str, str], room: dict
) -> None:
    other_room = await create_room(client, auth_headers, "Other")
    foreign = await create_folder(client, auth_headers, other_room["id"], "Elsewhere")
    response = await client.post(
        "/api/v1/folders",
        json={"name": "Child", "dataRoomId": room["id"], "parentId": foreign["id"]},
        headers=auth_headers,
    )
    assert response.status_code == 404


async def test_other_user_cannot_touch_folder(
    client: AsyncClient, auth_headers: dict[str, str], other_headers: dict[str, str], room: dict
) -> None:
    legal = await create_folder(client, auth_headers, room["id"], "Legal")
    url = f"/api/v1/folders/{legal['id']}"
    assert (await client.get(url, headers=other_headers)).status_code == 404
    assert (await client.patch(url, json={"name": "Mine"}, headers=other_headers)).status_code == 404
    assert (await client.delete(url, headers=other_headers)).status_code == 404
    assert (await client.get(f"{url}/contents", headers=other_headers)).status_code == 404
    create_in_foreign_room = await client.post(
        "/api/v1/folders", json={"name": "X", "dataRoomId": room["id"]}, headers=other_headers
    )
    assert create_in_foreign_room.status_code == 404


async def test_rename(client: AsyncClient, auth_headers: dict[str, str], room: dict) -> None:
    a = await create_folder(client, auth_headers, room["id"], "A")
    await create_folder(client, auth_headers, room["id"], "B")
    url = f"/api/v1/folders/{a['id']}"

    same = await client.patch(url, json={"name": "A"}, headers=auth_headers)
    assert same.status_code == 200
    taken = await client.patch(url, json={"name": "B"}, headers=auth_headers)
    assert taken.status_code == 409
    renamed = await client.patch(url, json={"name": "Archive"}, headers=auth_headers)
    assert renamed.json()["data"]["name"] == "Archive"


async def test_move(client: AsyncClient, auth_headers: dict[str, str], room: dict) -> None:
    a = await create_folder(client, auth_headers, room["id"], "A")
    b = await create_folder(client, auth_headers, room["id"], "B", a["id"])
    c = await create_folder(client, auth_headers, room["id"], "C", b["id"])
    target = await create_folder(client, auth_headers, room["id"], "Target")

    into_descendant = await client.post(
        f"/api/v1/folders/{a['id']}/move", json={"parentId": c["id"]}, headers=auth_headers
    )
    assert into_descendant.status_code == 400

    into_self = await client.post(
        f"/api/v1/folders/{a['id']}/move", json={"parentId": a["id"]}, headers=auth_headers
    )
    assert into_self.status_code == 400

    moved = await client.post(
        f"/api/v1/folders/{b['id']}/move", json={"parentId": target["id"]}, headers=auth_headers
    )
    assert moved.status_code == 200
    assert moved.json()["data"]["parentId"] == target["id"]

    crumb = await client.get(f"/api/v1/folders/{c['id']}/breadcrumb", headers=auth_headers)
    assert [p["name"] for p in crumb.json()["data"]["path"]] == ["Target", "B", "C"]

    to_root = await client.post(
        f"/api/v1/folders/{b['id']}/move", json={"parentId": None}, headers=auth_headers
    )
    assert to_root.json()["data"]["parentId"] is None


async def test_crossing_moves_cannot_form_a_cycle(
    client: AsyncClient, auth_headers: dict[str, str], room: dict
) -> None:
    a = await create_folder(client, auth_headers, room["id"], "A")
    b = await create_folder(client, auth_headers, room["id"], "B")

    first = await client.post(
        f"/api/v1/folders/{a['id']}/move", json={"parentId": b["id"]}, headers=auth_headers
    )
    assert first.status_code == 200
    second = await client.post(
        f"/api/v1/folders/{b['id']}/move", json={"parentId": a["id"]}, headers=auth_headers
    )
    assert second.status_code == 400
    assert second.json()["error"] == "VALIDATION_ERROR"

    crumb = await client.get(f"/api/v1/folders/{a['id']}/breadcrumb", headers=auth_headers)
    assert [p["name"] for p in crumb.json()["data"]["path"]] == ["B", "A"]


async def test_breadcrumb(client: AsyncClient, auth_headers: dict[str, str], room: dict) -> None:
    a = await create_folder(client, auth_headers, room["id"], "Legal")
    b = await create_folder(client, auth_headers, room["id"], "Contracts", a["id"])
    c = await create_folder(client, auth_headers, room["id"], "2024", b["id"])

    response = await client.get(f"/api/v1/folders/{c['id']}/breadcrumb", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["dataRoom"] == {"id": room["id"], "name": room["name"]}
    assert [p["id"] for p in data["path"]] == [a["id"], b["id"], c["id"]]


async def test_contents_sorted_and_optional_files(
    client: AsyncClient, auth_headers: dict[str, str], room: dict
) -> None:
    parent = await create_folder(client, auth_headers, room["id"], "Parent")
    for name in ("beta", "Alpha", "gamma"):
        await create_folder(client, auth_headers, room["id"], name, parent["id"])
    await upload_pdf(client, auth_headers, parent["id"], "small.pdf", b"%PDF-1")
    await upload_pdf(client, auth_headers, parent["id"], "big.pdf", b"%PDF-1" + b"0" * 500)

    url = f"/api/v1/folders/{parent['id']}/contents"
    default = (await client.get(url, headers=auth_headers)).json()["data"]
    assert [c["name"] for c in default["children"]] == ["Alpha", "beta", "gamma"]
    assert [f["name"] for f in default["files"]] == ["big.pdf", "small.pdf"]
    assert default["folder"]["childCount"] == 3
    assert default["folder"]["fileCount"] == 2

    by_size = (
        await client.get(f"{url}?sort=size&order=desc", headers=auth_headers)
    ).json()["data"]
    assert [f["name"] for f in by_size["files"]] == ["big.pdf", "small.pdf"]
    assert [c["name"] for c in by_size["children"]] == ["gamma", "beta", "Alpha"]

    no_files = (await client.get(f"{url}?includeFiles=false", headers=auth_headers)).json()["data"]
    assert no_files["files"] == []

    bad_sort = await client.get(f"{url}?sort=color", headers=auth_headers)
    assert bad_sort.status_code == 422


async def test_delete_removes_subtree(
    client: AsyncClient, auth_headers: dict[str, str], room: dict
) -> None:
    a = await create_folder(client, auth_headers, room["id"], "A")
    b = await create_folder(client, auth_headers, room["id"], "B", a["id"])
    file = (await upload_pdf(client, auth_headers, b["id"])).json()["data"]
    keep = await create_folder(client, auth_headers, room["id"], "Keep")

    response = await client.delete(f"/api/v1/folders/{a['id']}", headers=auth_headers)
    assert response.status_code == 200

    assert (await client.get(f"/api/v1/folders/{b['id']}", headers=auth_headers)).status_code == 404
    assert (await client.get(f"/api/v1/files/{file['id']}", headers=auth_headers)).status_code == 404
    assert (await client.get(f"/api/v1/folders/{keep['id']}", headers=auth_headers)).status_code == 200


async def test_duplicate_copies_subtree(
    client: AsyncClient, auth_headers: dict[str, str], room: dict
) -> None:
    a = await create_folder(client, auth_headers, room["id"], "Legal")
    b = await create_folder(client, auth_headers, room["id"], "NDAs", a["id"])
    await upload_pdf(client, auth_headers, b["id"], "nda.pdf")

    response = await client.post(f"/api/v1/folders/{a['id']}/duplicate", headers=auth_headers)
    assert response.status_code == 201
    copy = response.json()["data"]
    assert copy["name"] == "Legal (Copy)"
    assert copy["parentId"] is None
    assert copy["childCount"] == 1

    tree = (await client.get(f"/api/v1/data-rooms/{room['id']}/tree", headers=auth_headers)).json()["data"]
    names = {n["name"]: [c["name"] for c in n["children"]] for n in tree}
    assert names == {"Legal": ["NDAs"], "Legal (Copy)": ["NDAs"]}

    again = await client.post(f"/api/v1/folders/{a['id']}/duplicate", headers=auth_headers)
    assert again.status_code == 409
