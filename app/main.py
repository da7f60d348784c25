import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.router import router as v1_router
from app.core.config import settings
from app.core.errors import AppError, Internal
from app.core.telemetry import setup_logging, setup_telemetry
from app.schemas.common import ErrorResponse

log = logging.getLogger(__name__)

setup_logging()

app = FastAPI(title="Apartment Hub API", version="0.1.0")


def _error(status_code: int, code: str, message: str, details: list | None = None) -> JSONResponse:
    body = ErrorResponse(code=code, message=message, details=details or [])
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error(exc.status_code, exc.code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()]
    return _error(422, "validation_error", "Request validation failed", details)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log.exception("database error on %s %s", request.method, request.url.path)
    return _error(Internal.status_code, Internal.code, "Internal server error")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error(Internal.status_code, Internal.code, "Internal server error")


setup_telemetry(app)
app.include_router(v1_router)
app.mount("/media", StaticFiles(directory=settings.media_dir, check_dir=False), name="media")
