from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nowplaying.config import setup_logging
from nowplaying.dependencies import get_refresher
from nowplaying.routers import SERVICE_NAME, SERVICE_VERSION, main_router


setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting %s...", SERVICE_NAME)

    try:
        get_refresher().start()
        logger.info("%s started successfully", SERVICE_NAME)
    except Exception as e:
        logger.error("Failed to start %s: %s", SERVICE_NAME, e, exc_info=True)
        raise

    yield

    logger.info("Shutting down %s...", SERVICE_NAME)

    try:
        get_refresher().shutdown()
    except Exception as e:
        logger.error("Error during scheduler shutdown: %s", e, exc_info=True)

    logger.info("%s stopped", SERVICE_NAME)


app = FastAPI(
    title=SERVICE_NAME,
    version=SERVICE_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(main_router)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with details"""
    logger.error("Validation error for %s %s", request.method, request.url.path)
    logger.error("Validation details: %s", exc.errors())

    # Create a properly serializable error response
    errors = []
    for error in exc.errors():
        error_dict = {
            "type": error.get("type"),
            "loc": error.get("loc"),
            "msg": error.get("msg"),
            "input": str(error.get("input", ""))[:100]
        }
        errors.append(error_dict)

    return JSONResponse(
        status_code=422,
        content={
            "detail": errors
        },
        headers={"Access-Control-Allow-Origin": "*"},
    )
