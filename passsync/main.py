import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .database import init_db
from .errors import PassSyncError
from .middleware.audit import audit_middleware
from .routers import admin, notifications, pass_settings, slots, ws
from .services.realtime import broadcaster, registry
from .services.reminder_checker import ReminderScheduler

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_db()
    logger.info("Database tables ready")

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = ReminderScheduler(
            broadcaster,
            interval_seconds=settings.scheduler_interval_seconds,
            initial_delay_seconds=settings.scheduler_initial_delay_seconds,
        )
        scheduler.start()

    yield

    if scheduler is not None:
        await scheduler.stop()
    logger.info("Application shutting down...")


app = FastAPI(title="Pass Sync API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(audit_middleware)


@app.exception_handler(PassSyncError)
async def passsync_error_handler(request: Request, exc: PassSyncError):
    logger.info(f"{request.method} {request.url.path} → {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


app.include_router(slots.router)
app.include_router(pass_settings.router)
app.include_router(notifications.router)
app.include_router(admin.router)
app.include_router(ws.router)


@app.get("/health")
def health():
    return {"status": "ok", "connections": len(registry)}
