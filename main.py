# main.py

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from contextlib import asynccontextmanager
from functools import partial
from typing import Optional
import logging
import uvicorn

# Import route modules
from routes.signaling_routes import router as signaling_router
from routes.room_management import router as room_router
from config.settings import Settings, settings as default_settings, validate_settings
from room_manager import RoomManager, generate_peer_id

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Upgrade, Connection",
}

# Configure logging
logging.basicConfig(
    level=getattr(logging, default_settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, room_manager: Optional[RoomManager] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle app startup and shutdown"""
        # Startup
        logger.info(f"Starting up {settings.banner}")
        try:
            validate_settings(settings)
            logger.info("Configuration validation passed")
        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

        yield

        # Shutdown
        live_rooms = len(app.state.room_manager.rooms)
        logger.info(f"Shutting down {settings.app_name} with {live_rooms} live room(s)")

    app = FastAPI(
        title=settings.app_name,
        description="WebRTC signaling and relay rooms",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )
    app.state.settings = settings
    app.state.room_manager = room_manager or RoomManager(
        peer_id_factory=partial(generate_peer_id, settings.peer_id_prefix)
    )

    # Origin-aware headers for ordinary cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Upgrade", "Connection"],
    )

    # Registered last so it is outermost: every OPTIONS, preflight or not,
    # gets an empty 200, and every response carries the CORS headers
    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(content=b"", status_code=200)
        else:
            response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    # Include routers
    app.include_router(signaling_router, tags=["Signaling"])
    app.include_router(room_router, prefix="/api", tags=["Room Management"])

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return settings.banner

    @app.get("/health", response_class=PlainTextResponse)
    async def health_check():
        return "OK"

    @app.exception_handler(404)
    async def not_found_handler(request, exc):
        detail = getattr(exc, "detail", None) or "Not Found"
        return PlainTextResponse(detail, status_code=404)

    @app.exception_handler(500)
    async def internal_server_error_handler(request, exc):
        logger.error(f"Internal server error: {exc}")
        return PlainTextResponse("Internal Server Error", status_code=500)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=False,
        log_level=default_settings.log_level.lower(),
        access_log=True,
    )
