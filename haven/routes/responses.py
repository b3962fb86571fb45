"""JSON error bodies shared by the route modules."""
from typing import Any, Awaitable

from fastapi import Request
from fastapi.responses import JSONResponse

from haven.errors import HavenError
from haven.utils.logging import get_logger

logger = get_logger(__name__)


def error_response(error: HavenError, envelope: bool = False, **extra: Any) -> JSONResponse:
    """``{error}`` or, for routes that answer with a success flag, ``{success: false, error}``."""
    body: dict[str, Any] = {"success": False, "error": error.message} if envelope else {"error": error.message}
    body.update(extra)
    return JSONResponse(status_code=error.status_code, content=body)


async def guarded(event: str, call: Awaitable[Any], envelope: bool = False) -> Any:
    """Await a route's work, turning any failure into an error body."""
    try:
        return await call
    except HavenError as e:
        if e.status_code >= 500:
            logger.warning(event, error=e.message)
        return error_response(e, envelope)
    except Exception as e:
        logger.exception(event, error=str(e))
        return error_response(HavenError(str(e) or "Internal Server Error"), envelope)


async def haven_error_handler(request: Request, exc: HavenError) -> JSONResponse:
    """App-wide fallback for errors raised outside ``guarded`` (e.g. in dependencies)."""
    logger.warning("request_failed", path=request.url.path, status=exc.status_code, error=exc.message)
    return error_response(exc)
