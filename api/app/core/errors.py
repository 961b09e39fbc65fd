import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


def _store_message(exc: SQLAlchemyError) -> str:
    # Prefer the driver's own message over SQLAlchemy's wrapper text
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    message = _store_message(exc)
    logger.warning("Store rejected write on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=409, content={"detail": message})


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    message = _store_message(exc)
    logger.error("Store operation failed on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=503, content={"detail": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
