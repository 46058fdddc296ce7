"""Infrastructure: persistence, object storage, identity provider, security."""
