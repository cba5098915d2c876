"""
Notekeeper Backend: Envelope Responses
=======================================

What:  Builders for the fail and error JSON envelopes.
Who:   The exception handlers in main.py and RequestLoggingMiddleware, which
       answers for exceptions that escape every handler.
"""

from fastapi.responses import JSONResponse

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


def fail_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "fail", "message": message})


def error_response(message: str = UNEXPECTED_ERROR_MESSAGE) -> JSONResponse:
    return JSONResponse(status_code=500, content={"status": "error", "message": message})
