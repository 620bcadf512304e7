"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures logging, and wires infrastructure adapters in the lifespan.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import ExitStack, asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.identity import FirebaseCredentialProvider, InMemoryCredentialProvider
from src.adapters.repository import (
    InMemoryAccountRepository,
    PostgresAccountRepository,
    run_migrations,
)
from src.adapters.smtp import ConsoleNotifier, SmtpNotifier
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account Lifecycle API v1 - Register, verify email and log in",
    },
]


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_notifier(settings: Settings) -> ConsoleNotifier | SmtpNotifier:
    """Select the notifier adapter from settings."""
    if settings.notifier_backend == "smtp":
        return SmtpNotifier(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            from_address=settings.mail_from_address,
            from_name=settings.mail_from_name,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
            ttl_hours=settings.verification_token_ttl_hours,
        )
    return ConsoleNotifier()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the record store (connection pool + migrations for postgres)
    - Creates the credential provider (httpx client for firebase)
    - Creates the notifier
    - Closes pool and HTTP client on shutdown
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info("Starting application...")

    with ExitStack() as resources:
        app.state.pool = None
        if settings.record_backend == "postgres":
            logger.info("Connecting to database...")
            pool = ConnectionPool(
                conninfo=settings.database_url,
                min_size=settings.pool_min_size,
                max_size=settings.pool_max_size,
            )
            resources.callback(pool.close)

            logger.info("Running database migrations...")
            run_migrations(pool)

            app.state.pool = pool
            app.state.repository = PostgresAccountRepository(
                pool, timeout=settings.pool_timeout_seconds
            )
        else:
            logger.warning("Using in-memory record store; accounts are lost on restart")
            app.state.repository = InMemoryAccountRepository()

        if settings.credential_backend == "firebase":
            client = httpx.Client(timeout=settings.provider_timeout_seconds)
            resources.callback(client.close)
            app.state.credential_provider = FirebaseCredentialProvider(
                client,
                api_key=settings.firebase_api_key,
                base_url=settings.identity_toolkit_url,
            )
        else:
            logger.warning("Using in-memory credential provider")
            app.state.credential_provider = InMemoryCredentialProvider(
                bcrypt_cost=settings.bcrypt_cost
            )

        app.state.notifier = build_notifier(settings)

        logger.info("Application startup complete")

        yield

        logger.info("Shutting down application...")

    logger.info("Resources released")


app = FastAPI(
    title="verifirst",
    description="Account Lifecycle API - Dual-write registration with email verification gating login",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
