import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.api import operations
from app.core.config import Settings, settings
from app.core.logger import setup_logging, logger
from app.services.booking_service import BookingResolvers
from app.services.booking_store import BookingStore
from app.services.db_service import Database

setup_logging()

LIVENESS_MESSAGE = "Server is running successfully!"


def create_app(app_settings: Settings = settings, database: Optional[Database] = None) -> FastAPI:
    """
    Builds the API. The database connects inside the lifespan, so a missing
    MONGO_URI or an unreachable store aborts startup before anything is served.
    Pass `database` to substitute another store (tests do).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("🚀 Starting Travel Booking backend")
        db = database or Database(app_settings)
        await db.connect()
        app.state.database = db
        app.state.resolvers = BookingResolvers(BookingStore(db.bookings))
        logger.info(f"🚀 Contract endpoint ready at {app_settings.API_V1_STR}/operations")
        yield
        # Shutdown
        await db.close()
        logger.info("🛑 Shutting down backend")

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {exc}")
        return operations.error_response(500, str(exc), type(exc).__name__, detail=repr(exc))

    app.include_router(operations.router, prefix=app_settings.API_V1_STR, tags=["Bookings"])

    @app.get("/", response_class=PlainTextResponse)
    async def liveness():
        return LIVENESS_MESSAGE

    return app


app = create_app()


def run():
    if not settings.MONGO_URI:
        logger.critical("❌ ERROR: MONGO_URI is missing! Refusing to start.")
        sys.exit(1)

    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
