# -*- coding: utf-8 -*-
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from address_pool.domain.shared.errors import AllocationError

logger = logging.getLogger(__name__)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AllocationError)
    async def handle_alloc_error(request: Request, exc: AllocationError):  # type: ignore[unused-ignore]
        if exc.status_code >= 500:
            logger.error("request.failed", extra={"error": exc.error_code, "details": exc.details})
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error_code, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):  # type: ignore[unused-ignore]
        fields = [".".join(str(part) for part in item.get("loc", ())) for item in exc.errors()]
        return JSONResponse(
            status_code=400,
            content={"error": "BAD_REQUEST", "message": "Invalid request parameters.", "fields": fields},
        )


__all__ = ["install_error_handlers"]
