"""FastAPI dependencies that put the access gate in front of routes."""

from fastapi import Depends, Header

from clubsupply.access.coordinator import AccessLevel, Coordinator
from clubsupply.access.gate import authorize


async def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_user(token: str | None = Depends(bearer_token)) -> Coordinator:
    return authorize(token, AccessLevel.USER)


async def require_bosslevel(token: str | None = Depends(bearer_token)) -> Coordinator:
    return authorize(token, AccessLevel.BOSSLEVEL)
