import logging
import logging.config
import os
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import get_settings
from .db import init_db
from .errors import ApiError
from .routes import boards, cards, checklists, todolists
from .schemas import ErrorEnvelope, Health, Version

if os.path.exists("logging.conf"):
    logging.config.fileConfig("logging.conf", disable_existing_loggers=False)
else:
    logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database initialized")
    yield


app = FastAPI(title="Planboard API", version=VERSION, lifespan=lifespan)


def error_response(status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    envelope = ErrorEnvelope(code=code, message=message, details=details, requestId=str(uuid.uuid4()))
    return JSONResponse(status_code=status_code, content=envelope.model_dump())


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    message = "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in errors)
    return error_response(400, "validation_error", message, {"errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "internal_error", "Internal Server Error")


# === Health & metadata ===


@app.get("/v1/health", response_model=Health)
def health() -> Health:
    return Health()


@app.get("/v1/version", response_model=Version)
def version() -> Version:
    return Version(version=VERSION)


api_router = APIRouter(prefix="/v1")
api_router.include_router(boards.router)
api_router.include_router(cards.router)
api_router.include_router(checklists.router)
api_router.include_router(todolists.router)
app.include_router(api_router)


def run() -> None:
    uvicorn.run(
        "planboard.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    run()
