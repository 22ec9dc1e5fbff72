from typing import Any

from facility_api.observability import get_trace_id


def success_response(data: Any, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"success": True, "data": data, "meta": meta or {}}


def error_response(code: str, message: str) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    trace_id = get_trace_id()
    if trace_id:
        error["trace_id"] = trace_id
    return {"success": False, "error": error}
