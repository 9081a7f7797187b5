"""JSON envelope helpers shared by the route handlers."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse
from pydantic import ValidationError


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def success(data: Any, **extra: Any) -> Dict[str, Any]:
    return {"success": True, "data": data, **extra, "timestamp": utc_timestamp()}


def error_response(
    status_code: int,
    error: str,
    *,
    message: Optional[str] = None,
    details: Any = None,
    data: Any = None,
) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        body["message"] = message
    if details is not None:
        body["details"] = details
    if data is not None:
        body["data"] = data
    body["timestamp"] = utc_timestamp()
    return JSONResponse(status_code=status_code, content=body)


def validation_error(exc: ValidationError, error: str = "Invalid request parameters") -> JSONResponse:
    return error_response(
        400,
        error,
        details=exc.errors(include_url=False, include_context=False, include_input=False),
    )
