import secrets

from fastapi import Header, HTTPException, status

from catalog_admin.core.config import get_settings


def verify_api_key(provided_key: str | None, expected_key: str | None) -> bool:
    """Return True when the provided key matches the configured one."""
    if not provided_key or not expected_key:
        return False
    return secrets.compare_digest(provided_key, expected_key)


def require_api_key(apikey: str | None = Header(default=None)) -> None:
    """Reject requests that do not carry the configured ``apikey`` header."""
    if not verify_api_key(apikey, get_settings().public_api_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key.")
