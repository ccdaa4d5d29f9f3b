from typing import Any, Optional

from fastapi.encoders import jsonable_encoder


def success(
    data: Any = None,
    message: Optional[str] = None,
    *,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    total: Optional[int] = None,
) -> dict:
    """Success envelope; pagination is echoed when a limit is given."""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if limit is not None:
        body["pagination"] = {"limit": limit, "offset": offset or 0, "total": total or 0}
    return body
