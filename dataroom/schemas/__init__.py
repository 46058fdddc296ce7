"""API request/response schemas (pydantic, camelCase on the wire)."""
