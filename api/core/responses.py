from __future__ import annotations

from fastapi.responses import JSONResponse


class UTF8JSONResponse(JSONResponse):
    # Clients of the API expect the charset spelled out on every JSON body.
    media_type = "application/json; charset=utf-8"


def error_response(
    status_code: int,
    message: str,
    *,
    headers: dict[str, str] | None = None,
) -> UTF8JSONResponse:
    return UTF8JSONResponse(status_code=status_code, content={"error": message}, headers=headers)
