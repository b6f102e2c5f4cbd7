"""
Response envelope shared by every endpoint: {success, message?, data?, errors?}
"""
from typing import Any, Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    errors: Optional[list[str]] = None


def envelope(
    success: bool = True,
    message: str | None = None,
    data: Any = None,
    errors: list[str] | None = None,
) -> dict[str, Any]:
    """Build the envelope dict, leaving out keys that have nothing to say."""
    body: dict[str, Any] = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    return body
