"""
Response Formatter

Wraps collected payloads in JSON responses carrying public caching and
cross-origin headers.
"""
from fastapi.responses import JSONResponse


def build_json_response(payload: list | dict, max_age: int) -> JSONResponse:
    """
    Serialize a payload with caching headers

    Args:
        payload: Status list or schedule dictionary
        max_age: Public cache lifetime in seconds

    Returns:
        200 JSON response
    """
    return JSONResponse(
        status_code=200,
        content=payload,
        headers={
            "Cache-Control": f"public, max-age={max_age}",
            "Access-Control-Allow-Origin": "*",
        },
    )


def format_statuses(payload: list[dict], max_age: int) -> JSONResponse:
    """Status-mode response; liveness changes fast, so max_age is short."""
    return build_json_response(payload, max_age)


def format_schedule(payload: dict, max_age: int) -> JSONResponse:
    """Schedule-mode response."""
    return build_json_response(payload, max_age)
