"""
JSON envelope helpers: every answer carries ``success`` and ``message``.
"""
from typing import Optional

from fastapi.responses import JSONResponse

from rider_expense.config import get_settings

TOKEN_COOKIE = "token"


def success(message: str, status_code: int = 200, **payload) -> JSONResponse:
    return JSONResponse({"success": True, "message": message, **payload}, status_code=status_code)


def failure(message: str, status_code: int = 400, error: Optional[str] = None, **payload) -> JSONResponse:
    """Error envelope; ``error`` detail is only exposed in debug mode."""
    body = {"success": False, "message": message, **payload}
    if error and get_settings().DEBUG:
        body["error"] = error
    return JSONResponse(body, status_code=status_code)


def _cookie_options() -> dict:
    settings = get_settings()
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "strict",
    }


def set_token_cookie(response: JSONResponse, token: str) -> JSONResponse:
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        max_age=get_settings().TOKEN_TTL_DAYS * 24 * 60 * 60,
        **_cookie_options(),
    )
    return response


def clear_token_cookie(response: JSONResponse) -> JSONResponse:
    response.delete_cookie(TOKEN_COOKIE, **_cookie_options())
    return response
