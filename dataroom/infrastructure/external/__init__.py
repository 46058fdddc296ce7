"""Adapters for external collaborators (object storage, identity provider)."""
