"""Caller identity resolution.

Session handling lives in the upstream gateway, which forwards the
authenticated user ID in a trusted header. This module only reads that
header and rejects requests that arrive without one.
"""

from fastapi import Request

from app.core.config import get_settings
from app.core.exceptions import UnauthorizedError
from app.core.logging import caller_id_ctx, get_logger

logger = get_logger(__name__)


async def require_caller(request: Request) -> str:
    """FastAPI dependency returning the authenticated caller's ID.

    Args:
        request: Incoming HTTP request.

    Returns:
        Caller identifier from the configured header.

    Raises:
        UnauthorizedError: If the header is missing or blank.
    """
    header = get_settings().auth_user_header
    caller_id = (request.headers.get(header) or "").strip()
    if not caller_id:
        logger.info("auth.caller_missing", header=header, path=str(request.url.path))
        raise UnauthorizedError(details={"header": header})

    caller_id_ctx.set(caller_id)
    return caller_id
