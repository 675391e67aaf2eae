"""Authentication module."""

from app.auth.auth import token_required, validate_token

__all__ = ["token_required", "validate_token"]
