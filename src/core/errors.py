# src/core/errors.py
from fastapi import status
from fastapi.responses import JSONResponse


def generation_unavailable_response(error: Exception) -> JSONResponse:
    """503 body for orchestration endpoints when the generation service is not configured."""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": False, "fallbackUsed": False, "error": str(error)},
    )


def orchestration_failed_response(error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": error},
    )
