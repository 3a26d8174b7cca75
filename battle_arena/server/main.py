"""FastAPI application entry point.

같은 코드베이스로 세 개의 마이크로서비스(auth, profile, leaderboard)를 실행합니다.
어떤 서비스를 띄울지는 SERVICE_NAME 환경 변수로 결정합니다.

    SERVICE_NAME=auth uvicorn battle_arena.server.main:app --port 8081
"""
import logging
from contextlib import asynccontextmanager
from typing import Callable, Dict, List

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from battle_arena.db.mongo import PROFILES_COLLECTION, USERS_COLLECTION, close_client, get_collection
from battle_arena.repositories.profile_repo import ProfileRepository
from battle_arena.repositories.user_repo import UserRepository
from battle_arena.server.errors import register_exception_handlers
from battle_arena.server.routers import auth, health, leaderboard, profile, user_profile
from battle_arena.server.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

SERVICE_ROUTERS: Dict[str, List[APIRouter]] = {
    "auth": [auth.router, user_profile.router],
    "profile": [profile.router],
    "leaderboard": [leaderboard.router],
}

SERVICE_TITLES = {
    "auth": "Battle Arena Auth Service",
    "profile": "Battle Arena Profile Service",
    "leaderboard": "Battle Arena Leaderboard Service",
}


def _ensure_indexes(service_name: str) -> None:
    if service_name == "auth":
        UserRepository(get_collection(USERS_COLLECTION)).ensure_indexes()
    elif service_name == "profile":
        ProfileRepository(get_collection(PROFILES_COLLECTION)).ensure_indexes()


def _build_lifespan(service_name: str) -> Callable:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """앱 시작/종료 시 실행되는 코드"""
        logger.info("Starting %s service...", service_name)
        try:
            _ensure_indexes(service_name)
        except PyMongoError as exc:
            logger.error("Failed to create MongoDB indexes: %s", exc)
            raise

        yield

        logger.info("Shutting down %s service...", service_name)
        close_client()

    return lifespan


def create_app(service_name: str = settings.SERVICE_NAME) -> FastAPI:
    """Build the FastAPI app exposing the routers of one service.

    Raises:
        ValueError: 알 수 없는 서비스 이름
    """
    if service_name not in SERVICE_ROUTERS:
        raise ValueError(
            f"Unknown service '{service_name}'. Expected one of: {', '.join(SERVICE_ROUTERS)}"
        )

    app = FastAPI(
        title=SERVICE_TITLES[service_name],
        description=f"REST API for the Battle Arena {service_name} service",
        version="1.0.0",
        docs_url="/docs" if settings.ENABLE_DOCS else None,
        redoc_url="/redoc" if settings.ENABLE_DOCS else None,
        lifespan=_build_lifespan(service_name),
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        max_age=settings.CORS_MAX_AGE,
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    for router in SERVICE_ROUTERS[service_name]:
        app.include_router(router)

    @app.get("/")
    async def root():
        """Root endpoint.

        Returns:
            Welcome message with API info
        """
        return {
            "message": SERVICE_TITLES[service_name],
            "service": service_name,
            "version": "1.0.0",
            "docs": "/docs" if settings.ENABLE_DOCS else None,
        }

    return app


app = create_app(settings.SERVICE_NAME)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "battle_arena.server.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=True
    )
