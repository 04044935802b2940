"""
Todo API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_middleware
from api.todos import router as todos_router
from auth.dependencies import AuthGuard
from auth.jwt import TokenService
from auth.password import PasswordHasher
from auth.routes import router as auth_router
from auth.service import AuthWorkflow
from config.settings import Settings, config
from database.session import Database
from utils.errors import register_exception_handlers

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.token_service.uses_fallback_secret:
            logger.warning(
                "JWT_SECRET not set; signing tokens with the built-in fallback secret. "
                "Anyone who knows it can forge sessions; set JWT_SECRET in production."
            )
        await app.state.database.create_all()
        logger.info("Application ready to accept requests (%s mode).", settings.environment)
        yield
        await app.state.database.dispose()

    app = FastAPI(
        title="Todo API",
        version="1.0.0",
        description="Per-user todo lists behind username/password + JWT auth.",
        lifespan=lifespan,
    )

    tokens = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expiry_seconds=settings.jwt_expiry_seconds,
    )
    app.state.settings = settings
    app.state.token_service = tokens
    app.state.database = Database(settings.database_url)
    app.state.auth_guard = AuthGuard(tokens)
    app.state.auth_workflow = AuthWorkflow(
        PasswordHasher(rounds=settings.bcrypt_rounds),
        tokens,
        expose_internal_errors=settings.is_development,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app, expose_internal_errors=settings.is_development)
    register_exception_handlers(app, expose_internal_errors=settings.is_development)

    # Routes
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(todos_router, prefix="/api/todos")

    @app.get("/", include_in_schema=False)
    async def root():
        return {"res": "Hello World"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
