"""Domain layer: enums, exceptions and value objects (no framework dependencies)."""

from dataroom.domain.enums import AuthProvider, EntityKind, SortField, SortOrder
from dataroom.domain.exceptions import (
    AuthenticationException,
    ConflictException,
    DataRoomException,
    HierarchyCycleException,
    IdentityProviderException,
    ResourceNotFoundException,
    SignInMethodConflictException,
    SqlNotConfiguredException,
    TokenExpiredException,
    TokenMalformedException,
    TokenSignerUnknownException,
    ValidationException,
)
from dataroom.domain.value_objects import EntityName

__all__ = [
    "AuthProvider",
    "AuthenticationException",
    "ConflictException",
    "DataRoomException",
    "EntityKind",
    "EntityName",
    "HierarchyCycleException",
    "IdentityProviderException",
    "ResourceNotFoundException",
    "SignInMethodConflictException",
    "SortField",
    "SortOrder",
    "SqlNotConfiguredException",
    "TokenExpiredException",
    "TokenMalformedException",
    "TokenSignerUnknownException",
    "ValidationException",
]
