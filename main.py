# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Meal Signup Service
===================
Offers meal slots for missionary companionships without storing a slot per
date: availability is expanded from each team's weekly schedule and
reconciled against the sparse set of commitments on every read.

Port: 8005
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from mealsignup.controllers import (
    calendar_controller,
    commitment_controller,
    directory_controller,
    stats_controller,
    system_controller,
)
from mealsignup.controllers.errors import error_body, status_for
from mealsignup.core.config import settings
from mealsignup.core.database import create_schema, engine
from mealsignup.core.dependencies import get_directory_service
from mealsignup.core.errors import MealSignupError
from mealsignup.core.logging import get_logger
from mealsignup.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──
@asynccontextmanager
async def lifespan(application: FastAPI):
    if settings.AUTO_CREATE_SCHEMA:
        await create_schema(engine)
        logger.info("Database schema ensured")
    if settings.SEED_DEFAULT_TEAMS:
        seeded = await get_directory_service().seed_defaults()
        if not seeded:
            logger.info("Team directory already populated, skipping seed")
    logger.info("%s v%s started", settings.SERVICE_NAME, settings.SERVICE_VERSION)
    yield
    await engine.dispose()
    logger.info("Shutting down, connection pool disposed")


# ── FastAPI App ──
app = FastAPI(
    title="Meal Signup Service",
    description="Virtual meal slots and commitments for missionary companionships.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


# ── Exception Handlers ──
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if isinstance(exc.detail, dict):
        body = dict(exc.detail)
    else:
        body = {"error": "http_error", "detail": str(exc.detail)}
    body["request_id"] = _request_id(request)
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "detail": jsonable_encoder(exc.errors()),
            "request_id": _request_id(request),
        },
    )


@app.exception_handler(MealSignupError)
async def meal_signup_error_handler(request: Request, exc: MealSignupError):
    body = error_body(exc)
    body["request_id"] = _request_id(request)
    return JSONResponse(status_code=status_for(exc), content=body)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        "Commitment store failure: %s", type(exc).__name__,
        extra={"request_id": _request_id(request)},
    )
    return JSONResponse(
        status_code=503,
        content={
            "error": "store_unavailable",
            "detail": "The data store is temporarily unavailable",
            "request_id": _request_id(request),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception", extra={"request_id": _request_id(request)})
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "detail": str(exc),
            "request_id": _request_id(request),
        },
    )


# ── Routers ──
app.include_router(system_controller.router)
app.include_router(calendar_controller.router)
app.include_router(commitment_controller.router)
app.include_router(directory_controller.router)
app.include_router(stats_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.SERVICE_PORT)
