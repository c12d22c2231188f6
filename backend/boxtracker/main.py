import time
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from boxtracker.api.deps import DATABASE, STORAGE_BACKEND, open_repo
from boxtracker.api.health import router as health_router
from boxtracker.api.routes_activities import router as activities_router
from boxtracker.api.routes_boxes import router as boxes_router
from boxtracker.api.routes_export import router as export_router
from boxtracker.api.routes_owners import router as owners_router
from boxtracker.api.routes_qrcodes import router as qrcodes_router
from boxtracker.config import settings
from boxtracker.db import init_db
from boxtracker.services.startup_service import schedule_startup_scan
from boxtracker.utils.log_setup import configure_logging, get_logger

configure_logging()
log = get_logger("http")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    if STORAGE_BACKEND == DATABASE:
        init_db()
    log.info("Storage backend: %s", STORAGE_BACKEND)

    scheduler = BackgroundScheduler()
    if settings.STARTUP_SCAN_ENABLED:
        schedule_startup_scan(scheduler, open_repo, settings.STARTUP_SCAN_DELAY_SECONDS)
    scheduler.start()

    try:
        yield
    finally:
        scheduler.shutdown(wait=False)


app = FastAPI(title="Box Tracker - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        elapsed_ms = (time.perf_counter() - start) * 1000
        log.info(
            "%s %s %s in %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
    return response


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid request data",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error(request: Request, exc: SQLAlchemyError):
    log.error(
        "storage failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health", tags=["health"])
def liveness():
    return {"status": "ok"}


app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(boxes_router)

app.include_router(activities_router)

app.include_router(owners_router)

app.include_router(qrcodes_router)

app.include_router(export_router)
