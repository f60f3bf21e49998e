import logging
from contextlib import asynccontextmanager

import httpx
from dotenv import load_dotenv

load_dotenv()  # Load .env before any other imports that read env vars

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routefinder.config import (
    HTTP_MAX_CONNECTIONS,
    HTTP_MAX_KEEPALIVE,
    HTTP_TIMEOUT_SECONDS,
    has_ors_api_key,
)
from routefinder.sessions import RouteSessionManager

logger = logging.getLogger("routefinder")
logging.basicConfig(level=logging.INFO)

# Global state populated during startup
app_state: dict = {"sessions": RouteSessionManager()}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared HTTP client on startup and close it on shutdown."""
    if not has_ors_api_key():
        logger.warning(
            "ORS_API_KEY is missing or placeholder in backend/.env; "
            "every directions lookup will be reported as unavailable. "
            "Copy backend/.env.example to backend/.env and add your "
            "OpenRouteService key."
        )

    # Shared httpx client for connection pooling across all API calls
    http_client = httpx.AsyncClient(
        timeout=HTTP_TIMEOUT_SECONDS,
        limits=httpx.Limits(
            max_connections=HTTP_MAX_CONNECTIONS,
            max_keepalive_connections=HTTP_MAX_KEEPALIVE,
        ),
    )
    app_state["http_client"] = http_client
    logger.info("Shared HTTP client created (connection pooling enabled)")

    yield

    logger.info("Shutting down...")
    app_state.pop("http_client", None)
    await http_client.aclose()
    logger.info("Shared HTTP client closed")


app = FastAPI(title="RouteFinder API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from routefinder.routes import router  # noqa: E402

app.include_router(router, prefix="/api")
