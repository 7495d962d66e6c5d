"""Response envelope models."""

from typing import Any

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Envelope wrapped around every successful operation."""

    code: str
    message: str
    identifier: str = ""
    datetime: str
    data: Any = None


class ErrorResponse(BaseModel):
    """Body returned for a failed operation."""

    code: str
    message: str
    statusCode: int
