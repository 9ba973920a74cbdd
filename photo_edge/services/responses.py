from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

JSON_MEDIA_TYPE = "application/json; charset=utf-8"


def json_response(data: Any, status: int = 200) -> JSONResponse:
	return JSONResponse(content=data, status_code=status, media_type=JSON_MEDIA_TYPE)


def error_response(message: str, status: int) -> JSONResponse:
	return json_response({"error": message}, status)
