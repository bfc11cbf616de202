# app/auth/auth.py
import hmac

from fastapi import Request
from fastapi.responses import JSONResponse

from ..config import settings
from ..utils.logging import logger


class Unauthorised(Exception):
    """Caller did not present the shared API key."""


def api_key_ok(presented: str, expected: str) -> bool:
    if not presented or not expected:
        return False
    # Timing-safe compare
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def require_api_key(request: Request) -> None:
    """
    Route dependency: the caller must send the shared key in `x-api-key`.
    """
    presented = request.headers.get("x-api-key", "")
    if not api_key_ok(presented, settings.ASGUARD_API_KEY.get_secret_value()):
        logger.warning("Rejected request to %s: missing or invalid API key", request.url.path)
        raise Unauthorised()


async def unauthorised_handler(request: Request, exc: Unauthorised) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": "unauthorised"})
