"""Security: JWT access tokens and password hashing."""
