"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from sustainaview.auth import auth_backend, fastapi_users
from sustainaview.config import settings
from sustainaview.db import init_db
from sustainaview.routers import analysis, greenovations, health, search, wishlist
from sustainaview.schemas.users import UserCreate, UserRead, UserUpdate
from sustainaview.services.container import build_services
from sustainaview.utils.errors import SustainaViewError
from sustainaview.utils.logging_config import (
    EndpointLoggingRoute,
    RequestLoggingMiddleware,
    setup_endpoint_logging,
    setup_logging,
)

logger = logging.getLogger(__name__)

# Set up logging
setup_logging()

# Set up endpoint logging
setup_endpoint_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application")

    # Initialize database first
    client = await init_db()

    app.state.services = build_services()
    yield

    logger.info("Shutting down application")
    await app.state.services.aclose()
    client.close()


# Determine route class based on settings
route_class = EndpointLoggingRoute if settings.logging.enable_endpoint_logging else APIRoute

app = FastAPI(
    title="SustainaView",
    version="0.1.0",
    route_class=route_class,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware conditionally
if settings.logging.enable_endpoint_logging:
    app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(SustainaViewError)
async def sustainaview_error_handler(request: Request, exc: SustainaViewError) -> JSONResponse:
    exc.log(logging.WARNING if exc.status_code < 500 else logging.ERROR)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include routers
app.include_router(health.router)
app.include_router(search.router)
app.include_router(analysis.router)
app.include_router(wishlist.router)
app.include_router(greenovations.router)

# Include FastAPI Users routers
## /login /logout
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/api/auth/jwt", tags=["auth"])
## /register
app.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix="/api/auth",
    tags=["auth"],
)
app.include_router(
    fastapi_users.get_users_router(UserRead, UserUpdate),
    prefix="/api/users",
    tags=["users"],
)
