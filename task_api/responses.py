"""Success envelopes and transport response builders."""

import json
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from .config import get_settings
from .errors import SUCCESSFUL_OPERATION
from .models import ErrorResponse, SuccessResponse

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

AMZ_TRACE_ID = re.compile(r"^(Root=\d-)+(.*)$")


def response_datetime(now: datetime | None = None, time_zone: str | None = None) -> str:
    """Current time in the configured zone as ``YYYY-MM-DDTHH:MM:SS.mmm``."""
    now = now or datetime.now(timezone.utc)
    local = now.astimezone(ZoneInfo(time_zone or get_settings().time_zone))
    return local.strftime("%Y-%m-%dT%H:%M:%S.") + f"{local.microsecond // 1000:03d}"


def extract_trace_id(header: str | None) -> str:
    """``Root=1-abc`` -> ``abc``; empty string when the header is missing or malformed."""
    if not header:
        return ""
    match = AMZ_TRACE_ID.match(header)
    if not match or not match.group(2):
        return ""
    return match.group(2)


def success(identifier: str = "", data: Any = None, message: str | None = None) -> SuccessResponse:
    """Envelope for a successful operation."""
    return SuccessResponse(
        code=SUCCESSFUL_OPERATION["code"],
        message=message or SUCCESSFUL_OPERATION["message"],
        identifier=identifier or "",
        datetime=response_datetime(),
        data=data,
    )


def _default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(body: Any) -> str:
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json")
    return json.dumps(body, default=_default)


def lambda_response(status_code: int, body: Any) -> dict:
    """API Gateway proxy response."""
    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": to_json(body),
    }


def error_body(code: str, message: str, status_code: int) -> ErrorResponse:
    return ErrorResponse(code=code, message=message, statusCode=status_code)
