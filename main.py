import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from amc_portal import __version__
from amc_portal.config import SecurityConfig, Settings, get_settings
from amc_portal.database import Database
from amc_portal.handlers import register_exception_handlers
from amc_portal.routers import activities, auth, notifications, realtime, remarks, tasks, users
from amc_portal.services import RealtimeChannel
from amc_portal.services.scheduler import TaskScheduler
from amc_portal.utils.datetime import isoformat_utc, utc_now

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the API. Tests pass their own settings and an already-open database."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title=settings.app_name, version=__version__)
    app.state.settings = settings
    app.state.database = database or Database(
        settings.database_url, echo=settings.database_echo, sslmode=settings.database_sslmode
    )
    app.state.database.open()
    app.state.realtime = RealtimeChannel()
    app.state.scheduler = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.frontend_urls,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    security_headers = SecurityConfig.response_headers(settings.is_production)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in security_headers.items():
            response.headers.setdefault(name, value)
        return response

    register_exception_handlers(app)

    # Route registration
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
    app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
    app.include_router(activities.router, prefix="/api/activities", tags=["Activities"])
    app.include_router(remarks.router, prefix="/api/remarks", tags=["Remarks"])
    app.include_router(realtime.router, tags=["Realtime"])

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"Starting {settings.app_name} ({settings.app_env})")
        if settings.auto_create_tables:
            app.state.database.create_all()
        if settings.scheduler_enabled:
            app.state.scheduler = TaskScheduler(app.state.database, app.state.realtime, settings)
            app.state.scheduler.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"Shutting down {settings.app_name}")
        if app.state.scheduler is not None:
            app.state.scheduler.stop()
        app.state.database.close()

    @app.get("/health")
    def health():
        return {
            "success": True,
            "message": f"{settings.app_name} is running",
            "timestamp": isoformat_utc(utc_now()),
            "version": __version__,
        }

    return app


app = create_app()
