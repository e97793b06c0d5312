from typing import Any, Iterable, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(status_code: int, message: str, data: Any = None, errors: Optional[Iterable[str]] = None):
    """Standard response envelope shared by every endpoint."""
    content = {
        "status_code": status_code,
        "message": message,
        "data": jsonable_encoder(data),
    }
    if errors is not None:
        content["errors"] = list(errors)
    return JSONResponse(status_code=status_code, content=content)
