"""Core infrastructure: health registry, HTTP client, exceptions."""
