"""Authentication use cases."""

from dataroom.application.use_cases.auth.auth_service import AuthService

__all__ = ["AuthService"]
