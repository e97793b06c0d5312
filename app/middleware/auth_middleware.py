import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from jose import jwt, JWTError
from jose.exceptions import ExpiredSignatureError
from app.config import config

logger = logging.getLogger(__name__)

# Public (unauthenticated) routes
PUBLIC_PATHS = [
    "/docs",
    "/openapi.json",
    "/metrics",
    "/api/docs",
    "/api/openapi.json",
    "/api/metrics",
    "/favicon.ico",
]

# CORS defaults, kept in line with the CORSMiddleware settings in main.py
CORS_CONFIG = {
    "allow_origins": ["*"],
    "allow_methods": ["*"],
    "allow_headers": ["*"],
    "allow_credentials": True
}


def add_cors_headers(response):
    """Attach CORS headers to error responses."""
    origins = CORS_CONFIG.get("allow_origins", ["*"])
    headers = CORS_CONFIG.get("allow_headers", ["*"])
    methods = CORS_CONFIG.get("allow_methods", ["*"])

    response.headers["Access-Control-Allow-Origin"] = origins[0] if origins != ["*"] else "*"
    response.headers["Access-Control-Allow-Methods"] = ", ".join(methods)
    response.headers["Access-Control-Allow-Headers"] = ", ".join(headers)
    if CORS_CONFIG.get("allow_credentials"):
        response.headers["Access-Control-Allow-Credentials"] = "true"

    return response


def _unauthorized(status_code: int, message: str):
    response = JSONResponse(
        status_code=status_code,
        content={"status_code": status_code, "message": message, "data": None},
    )
    return add_cors_headers(response)


def get_actor(request: Request) -> str:
    """Audit name recorded in created_by / modified_by for the authenticated caller."""
    user = getattr(request.state, "user", None) or {}
    return user.get("user_name") or user.get("email") or "System"


async def auth_middleware(request: Request, call_next):
    """
    Validates the bearer JWT and attaches the caller to request.state.user.
    The token is trusted as-is; role checks are left to the caller's gateway.
    """
    req_path = request.url.path
    req_method = request.method

    # Allow preflight OPTIONS requests to pass through
    if req_method == "OPTIONS":
        return await call_next(request)

    if any(req_path == path or req_path.startswith(path + "/") for path in PUBLIC_PATHS):
        return await call_next(request)

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        logger.warning(f"Unauthorized access attempt: Missing/Invalid Authorization header for {req_path}")
        return _unauthorized(401, "Authorization header missing or invalid")

    token = auth_header.split(" ")[1]

    try:
        payload = jwt.decode(
            token,
            config.SECRET_KEY,
            algorithms=[config.ALGORITHM],
            options={"verify_exp": True}
        )

        email = payload.get("sub")
        if not email:
            raise JWTError("Invalid token: missing subject")

        request.state.user = {
            "email": email,
            "user_id": payload.get("userId"),
            "user_role": payload.get("user_role"),
            "user_name": payload.get("name"),
        }
        logger.debug(f"Authenticated {email} for {req_method} {req_path}")

    except ExpiredSignatureError:
        logger.warning(f"Token expired for request: {req_path}")
        return _unauthorized(401, "Token has expired")
    except JWTError as e:
        logger.error(f"JWT verification failed: {str(e)}")
        return _unauthorized(403, "Invalid token")

    return await call_next(request)
