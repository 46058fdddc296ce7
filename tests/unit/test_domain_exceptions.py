"""Domain exceptions carry stable codes and render the failure envelope."""

from dataroom.application.exceptions import StorageNotFoundError, StorageUploadError
from dataroom.domain.exceptions import (
    ConflictException,
    HierarchyCycleException,
    ResourceNotFoundException,
    ValidationException,
)


def test_not_found_envelope() -> None:
    body = ResourceNotFoundException("data_room", "r1").to_dict()
    assert body == {
        "success": False,
        "error": "RESOURCE_NOT_FOUND",
        "message": "Data room not found",
        "details": {"resource_type": "data_room", "resource_id": "r1"},
    }


def test_conflict_names_the_colliding_name() -> None:
    exc = ConflictException("folder", "Legal", "this location")
    assert exc.error_code == "CONFLICT"
    assert exc.details == {"resource_type": "folder", "name": "Legal"}
    assert "already exists" in exc.message


def test_validation_without_field_has_no_details() -> None:
    assert "details" not in ValidationException("bad").to_dict()


def test_hierarchy_cycle_reason() -> None:
    exc = HierarchyCycleException("f1", "cycle")
    assert exc.details == {"folder_id": "f1", "reason": "cycle"}


def test_storage_errors_do_not_leak_reason_in_message() -> None:
    exc = StorageUploadError("rooms/r/files/f/x.pdf", "/var/secret/path denied")
    assert "/var/secret" not in exc.message
    assert StorageNotFoundError("ref").error_code == "STORAGE_NOT_FOUND"
