"""Voter identity resolution — who is casting a vote."""

from typing import Optional

from fastapi import Request

VOTER_TOKEN_HEADER = "x-voter-token"


def resolve_identity(token: Optional[str], origin_address: str = "", user_agent: str = "") -> str:
    """Return the identity string used as the vote ledger key.

    A non-blank token wins (trimmed). Otherwise fall back to
    ``"<address>|<user agent>"``, which degrades to ``"|"`` when the
    request carries neither.
    """
    if token is not None and token.strip():
        return token.strip()
    return f"{origin_address or ''}|{user_agent or ''}"


def identity_from_request(request: Request) -> str:
    """Resolve the identity of an incoming HTTP request.

    The client address comes from ``request.client``, which uvicorn's
    ``ProxyHeadersMiddleware`` rewrites to the leftmost X-Forwarded-For entry.
    """
    tokens = request.headers.getlist(VOTER_TOKEN_HEADER)
    token = tokens[0] if tokens else None
    address = request.client.host if request.client else ""
    user_agent = request.headers.get("user-agent", "")
    return resolve_identity(token, address, user_agent)
