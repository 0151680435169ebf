from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from fastapi import Request, status
from fastapi.responses import JSONResponse
from jose import jwt, JWTError
from core.config import settings
from utils.logger import get_logger

logger = get_logger(__name__)


def get_user_id(request: Request):
    """Key for the default limits: the signed-in user when there is one, else the client IP."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
            user_id = payload.get("id")
            if user_id:
                return str(user_id)
        except JWTError:
            pass

    return get_remote_address(request)

limiter = Limiter(
    key_func=get_user_id,
    default_limits=["200/hour"],
    enabled=settings.ENV != "testing"
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(
        "Rate limit exceeded",
        extra={
            "path": request.url.path,
            "client_ip": get_remote_address(request),
            "limit": str(exc.detail)
        }
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Too many attempts, please try again later."}
    )
