from __future__ import annotations

from fastapi import Header, HTTPException


_BEARER_PREFIX = "bearer "


def require_bearer_token(authorization: str | None = Header(None)) -> str:
    """Only checks that a bearer credential is present; verification happens upstream."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header.")
    if not authorization.lower().startswith(_BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="Invalid authorization header.")
    token = authorization[len(_BEARER_PREFIX):].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token.")
    return token
