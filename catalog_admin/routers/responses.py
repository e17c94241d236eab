from typing import Any, Dict, Optional


def success(data: Any = None, *, message: Optional[str] = None, pagination: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return body


def failure(error: str) -> Dict[str, Any]:
    return {"success": False, "error": error}
