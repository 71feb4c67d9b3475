from __future__ import annotations

from fastapi import HTTPException, Request, status

DEFAULT_SESSION_HEADER = "X-Session-Id"
DEFAULT_COOKIE_NAME = "session_id"


def extract_session_id_from_request(
    request: Request,
    header_name: str = DEFAULT_SESSION_HEADER,
    cookie_name: str = DEFAULT_COOKIE_NAME,
) -> str:
    """
    Extract the login session identifier from either:

      1. A request header (default 'X-Session-Id', preferred)
      2. A cookie (default 'session_id')

    Raises HTTPException(401) if none is found.
    """
    header_value = (request.headers.get(header_name) or "").strip()
    if header_value:
        return header_value

    cookie_value = request.cookies.get(cookie_name)
    if cookie_value:
        return cookie_value

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No session",
    )
