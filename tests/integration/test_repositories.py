"""Repository behaviour against a real (SQLite) database."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.application.dtos.data_room import DataRoomCreate
from dataroom.application.dtos.file import FileCreate, FileSearchFilters
from dataroom.application.dtos.folder import FolderCreate
from dataroom.application.dtos.user import VerifiedIdentity
from dataroom.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    SignInMethodConflictException,
    ValidationException,
)
from dataroom.infrastructure.persistence import database
from dataroom.infrastructure.persistence.repositories import (
    DataRoomRepository,
    FileRepository,
    FolderRepository,
    UserRepository,
)


@pytest.fixture
async def owner_id(db_session: AsyncSession) -> str:
    user = await UserRepository(db_session).get_or_create_from_identity(
        VerifiedIdentity(subject="g-1", email="Owner@Example.com", name="Owner"), "google"
    )
    return user.id


@pytest.fixture
async def room_id(db_session: AsyncSession, owner_id: str) -> str:
    room = await DataRoomRepository(db_session).create_data_room(
        DataRoomCreate(owner_id=owner_id, name="Room")
    )
    return room.id


def _file(name: str, folder_id: str, room_id: str, owner_id: str, ref: str, size: int = 10) -> FileCreate:
    return FileCreate(
        id=f"file-{name}-{folder_id}",
        name=name,
        mime_type="application/pdf",
        file_size=size,
        checksum="0" * 64,
        storage_ref=ref,
        folder_id=folder_id,
        data_room_id=room_id,
        owner_id=owner_id,
    )


async def test_identity_sign_in_is_idempotent_and_email_normalized(db_session: AsyncSession) -> None:
    repo = UserRepository(db_session)
    identity = VerifiedIdentity(subject="g-9", email="Mixed@Case.com", name="M")
    first = await repo.get_or_create_from_identity(identity, "google")
    second = await repo.get_or_create_from_identity(identity, "google")
    assert first.id == second.id
    assert first.email == "mixed@case.com"
    assert (await repo.get_by_email("MIXED@case.com")).id == first.id


async def test_identity_never_claims_password_account(db_session: AsyncSession) -> None:
    repo = UserRepository(db_session)
    registered = await repo.create_password_user("pat@example.com", "pw-123456")
    with pytest.raises(SignInMethodConflictException):
        await repo.get_or_create_from_identity(
            VerifiedIdentity(subject="g-pat", email="Pat@Example.com"), "google"
        )
    assert (await repo.get_by_email("pat@example.com")).id == registered.id


async def test_root_and_nested_sibling_uniqueness(
    db_session: AsyncSession, room_id: str, owner_id: str
) -> None:
    repo = FolderRepository(db_session)
    parent = await repo.create_folder(FolderCreate("Parent", room_id, None, owner_id))
    assert await repo.exists_sibling(room_id, None, "Parent")
    assert not await repo.exists_sibling(room_id, None, "parent")
    assert not await repo.exists_sibling(room_id, None, "Parent", exclude_id=parent.id)

    await repo.create_folder(FolderCreate("Child", room_id, parent.id, owner_id))
    with pytest.raises(ConflictException):
        await repo.create_folder(FolderCreate("Child", room_id, parent.id, owner_id))


async def test_root_duplicate_rejected_by_index(
    db_session: AsyncSession, room_id: str, owner_id: str
) -> None:
    repo = FolderRepository(db_session)
    await repo.create_folder(FolderCreate("Same", room_id, None, owner_id))
    with pytest.raises(ConflictException):
        await repo.create_folder(FolderCreate("Same", room_id, None, owner_id))


async def test_data_room_name_unique_per_owner(
    db_session: AsyncSession, owner_id: str, room_id: str
) -> None:
    repo = DataRoomRepository(db_session)
    assert await repo.exists_with_name(owner_id, "Room")
    assert not await repo.exists_with_name(owner_id, "Room", exclude_id=room_id)
    with pytest.raises(ConflictException):
        await repo.create_data_room(DataRoomCreate(owner_id=owner_id, name="Room"))


async def test_storage_reference_counting(
    db_session: AsyncSession, room_id: str, owner_id: str
) -> None:
    folders = FolderRepository(db_session)
    files = FileRepository(db_session)
    a = await folders.create_folder(FolderCreate("A", room_id, None, owner_id))
    b = await folders.create_folder(FolderCreate("B", room_id, None, owner_id))
    await files.create_file(_file("x.pdf", a.id, room_id, owner_id, "ref-shared"))
    await files.create_file(_file("x.pdf", b.id, room_id, owner_id, "ref-shared"))
    await files.create_file(_file("y.pdf", a.id, room_id, owner_id, "ref-own"))

    assert await files.storage_refs_for_folders([a.id]) == {"ref-shared", "ref-own"}
    await folders.delete_by_id(a.id)
    assert await files.unreferenced_storage_refs({"ref-shared", "ref-own"}) == {"ref-own"}
    assert await files.storage_refs_for_room(room_id) == {"ref-shared"}


async def test_delete_cascades_to_subfolders_and_files(
    db_session: AsyncSession, room_id: str, owner_id: str
) -> None:
    folders = FolderRepository(db_session)
    files = FileRepository(db_session)
    top = await folders.create_folder(FolderCreate("Top", room_id, None, owner_id))
    mid = await folders.create_folder(FolderCreate("Mid", room_id, top.id, owner_id))
    leaf = await files.create_file(_file("z.pdf", mid.id, room_id, owner_id, "ref-z"))

    assert await folders.delete_by_id(top.id) is True
    assert await folders.get_by_id(mid.id) is None
    assert await files.get_by_id(leaf.id) is None
    assert await folders.delete_by_id(top.id) is False


async def test_counts_and_children(db_session: AsyncSession, room_id: str, owner_id: str) -> None:
    folders = FolderRepository(db_session)
    files = FileRepository(db_session)
    top = await folders.create_folder(FolderCreate("Top", room_id, None, owner_id))
    await folders.create_folder(FolderCreate("b", room_id, top.id, owner_id))
    await folders.create_folder(FolderCreate("A", room_id, top.id, owner_id))
    await files.create_file(_file("f.pdf", top.id, room_id, owner_id, "ref-f"))

    counted = await folders.get_with_counts(top.id)
    assert (counted.child_count, counted.file_count) == (2, 1)
    assert [c.name for c in await folders.list_children(room_id, top.id)] == ["A", "b"]
    assert await folders.count_by_room(room_id) == 3


async def test_search_escapes_wildcards_and_scopes_by_room_owner(
    db_session: AsyncSession, room_id: str, owner_id: str
) -> None:
    folders = FolderRepository(db_session)
    files = FileRepository(db_session)
    top = await folders.create_folder(FolderCreate("Top", room_id, None, owner_id))
    await files.create_file(_file("100%_final.pdf", top.id, room_id, owner_id, "r1"))
    await files.create_file(_file("1000 final.pdf", top.id, room_id, owner_id, "r2"))

    hits = await files.search(owner_id, FileSearchFilters(query="0%_"))
    assert [f.name for f in hits] == ["100%_final.pdf"]
    assert await files.count_search(owner_id, FileSearchFilters(query="final")) == 2
    assert await files.count_search("someone-else", FileSearchFilters(query="final")) == 0


async def test_parent_deleted_before_insert_is_not_found(
    db_session: AsyncSession, room_id: str, owner_id: str
) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await FolderRepository(db_session).create_folder(
            FolderCreate("Orphan", room_id, "gone-parent", owner_id)
        )
    assert exc_info.value.details["resource_id"] == "gone-parent"


async def test_file_into_missing_folder_is_not_found(
    db_session: AsyncSession, room_id: str, owner_id: str
) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await FileRepository(db_session).create_file(
            _file("x.pdf", "gone-folder", room_id, owner_id, "ref-x")
        )
    assert exc_info.value.details == {"resource_type": "folder", "resource_id": "gone-folder"}


async def test_self_parent_is_validation_error(
    db_session: AsyncSession, room_id: str, owner_id: str
) -> None:
    repo = FolderRepository(db_session)
    folder = await repo.create_folder(FolderCreate("Loop", room_id, None, owner_id))
    with pytest.raises(ValidationException):
        await repo.move(folder.id, folder.id)


async def test_room_lock_rereads_moves_committed_elsewhere(db_engine) -> None:
    factory = database.AsyncSessionLocal
    assert factory is not None
    async with factory() as setup:
        user = await UserRepository(setup).create_password_user("mover@example.com", "pw-123456")
        room = await DataRoomRepository(setup).create_data_room(
            DataRoomCreate(owner_id=user.id, name="Room")
        )
        folders = FolderRepository(setup)
        a = await folders.create_folder(FolderCreate("A", room.id, None, user.id))
        b = await folders.create_folder(FolderCreate("B", room.id, None, user.id))
        await setup.commit()

    async with factory() as reader, factory() as writer:
        repo = FolderRepository(reader)
        assert (await repo.get_by_id(a.id)).parent_id is None

        await FolderRepository(writer).move(a.id, b.id)
        await writer.commit()

        await repo.lock_room_hierarchy(room.id)
        assert (await repo.get_by_id(a.id)).parent_id == b.id
