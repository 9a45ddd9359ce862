from typing import Any


def success_response(data: Any = None, message: str | None = None) -> dict:
    return {"status": "success", "data": data, "message": message}


def list_response(data: list, total: int, limit: int, offset: int, has_more: bool, **meta: Any) -> dict:
    return {
        "data": data,
        "meta": {"total": total, "limit": limit, "offset": offset, "has_more": has_more, **meta},
    }


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict:
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"error": error}
