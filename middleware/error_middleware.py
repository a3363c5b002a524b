from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger
from utils.errors import DeliveryError, ErrorKind, StorageError, ValidationError

_STATUS_KINDS = {
    401: ErrorKind.UNAUTHENTICATED,
    403: ErrorKind.ACCESS_DENIED,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
}

def _error_response(error: DeliveryError) -> JSONResponse:
    return JSONResponse(error.to_dict(), status_code=error.status_code)

async def delivery_error_handler(request: Request, exc: DeliveryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.kind.value} - {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path}: {exc.kind.value} - {exc.message}")
    return _error_response(exc)

async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return _error_response(ValidationError(message))

async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = _STATUS_KINDS.get(exc.status_code, ErrorKind.VALIDATION_ERROR)
    return JSONResponse({"error": exc.detail, "kind": kind.value}, status_code=exc.status_code)

async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Ошибка базы данных при обработке {request.method} {request.url.path}: {exc}", exc_info=True)
    return _error_response(StorageError())

async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Error in handler {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        {"error": "Something went wrong. Please try again later.", "kind": "InternalError"},
        status_code=500
    )

def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DeliveryError, delivery_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
