from typing import Any


def error_response(message: str, data: Any = None) -> dict:
    return {"status": "error", "data": data, "message": message}
