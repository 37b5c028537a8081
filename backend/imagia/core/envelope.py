"""Response envelope shared by every endpoint."""
from typing import Any


def ok(message: str, data: Any = None) -> dict:
    return {"status": "OK", "message": message, "data": data}


def error(message: str, data: Any = None) -> dict:
    return {"status": "ERROR", "message": message, "data": data}
