"""Global exception handlers.

- WalletError -> its own status code and structured body
- RequestValidationError -> 400 with field details
- Exception -> 500, internal details never leak
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from phonomorph.errors import WalletError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(WalletError)
    async def wallet_error_handler(request: Request, exc: WalletError):
        if exc.http_status >= 500:
            logger.error(f"{exc.kind} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.kind} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": {
                    "kind": "InvalidRequest",
                    "message": "Request body failed validation",
                    "fields": [
                        {
                            "field": ".".join(str(part) for part in err.get("loc", [])),
                            "message": err.get("msg", ""),
                        }
                        for err in exc.errors()
                    ],
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "kind": "InternalError",
                    "message": "An unexpected error occurred",
                }
            },
        )
