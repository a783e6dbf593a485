import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from liftlog.core.config import settings
from liftlog.core.db import init_models
from liftlog.core.errors import LiftLogError
from liftlog.core.logging import setup_logging
from liftlog.routers.days import router as days_router
from liftlog.routers.progress import router as progress_router
from liftlog.routers.routines import router as routines_router
from liftlog.routers.sets import router as sets_router

setup_logging()
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.CREATE_TABLES_ON_STARTUP:
        log.info("Creating tables on %s", settings.DATABASE_URL)
        await init_models()
    yield


app = FastAPI(
    title="LiftLog API",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "routines", "description": "Weekly routines and the active routine"},
        {"name": "days", "description": "Template days and dated workouts"},
        {"name": "sets", "description": "Sets of a scheduled exercise"},
        {"name": "progress", "description": "Calendar and summary statistics"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info(
        "rid=%s %s %s -> %s in %.1fms",
        req_id, request.method, request.url.path, response.status_code, duration_ms,
    )
    return response


@app.exception_handler(LiftLogError)
async def handle_liftlog_error(request: Request, exc: LiftLogError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(routines_router)
app.include_router(days_router)
app.include_router(sets_router)
app.include_router(progress_router)


@app.get("/health")
def health():
    return {"ok": True}
