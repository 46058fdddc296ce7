"""Shared HTTP helpers for API tests."""

import io

from httpx import AsyncClient

PDF_BYTES = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF\n"
TEST_PASSWORD = "correct-horse-battery"


async def register_user(client: AsyncClient, email: str, name: str = "Test User") -> dict[str, str]:
    """Register a password user and return Authorization headers for it."""
    resp = await client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": TEST_PASSWORD, "name": name},
    )
    assert resp.status_code == 201, resp.text
    token = resp.json()["data"]["accessToken"]
    return {"Authorization": f"Bearer {token}"}


async def create_room(client: AsyncClient, headers: dict[str, str], name: str = "Deal Room") -> dict:
    resp = await client.post("/api/v1/data-rooms", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def create_folder(
    client: AsyncClient,
    headers: dict[str, str],
    room_id: str,
    name: str,
    parent_id: str | None = None,
) -> dict:
    body: dict = {"name": name, "dataRoomId": room_id}
    if parent_id is not None:
        body["parentId"] = parent_id
    resp = await client.post("/api/v1/folders", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def upload_pdf(
    client: AsyncClient,
    headers: dict[str, str],
    folder_id: str,
    filename: str = "report.pdf",
    content: bytes = PDF_BYTES,
    content_type: str = "application/pdf",
):
    """POST a multipart upload; returns the raw response."""
    return await client.post(
        "/api/v1/files/upload",
        files={"file": (filename, io.BytesIO(content), content_type)},
        data={"folderId": folder_id},
        headers=headers,
    )
