"""
Main application entry point - FastAPI app instance and configuration.
This is where the ASGI application is created and configured.
Run with: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI  # The FastAPI framework
from fastapi.middleware.cors import CORSMiddleware  # Cross-Origin Resource Sharing

from app.core.config import settings  # Application settings
from app.core.logging import configure_logging
from app.routers import google_auth  # Google Drive OAuth + session
from app.routers import callback  # Workflow result receiver
from app.routers import webhook_proxy  # Relay to the n8n workflow
from app.routers import projects  # Project picker, generation form, history API
from app.routers import pages  # Dashboard and history HTML

configure_logging()
logger = logging.getLogger("tekton.main")

# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
# - docs_url: Swagger UI at /docs
# - redoc_url: ReDoc at /redoc
app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
# The pages are served from this app, so CORS only matters for the
# workflow and local tooling calling the JSON endpoints.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# google_auth.router: /api/auth/google-drive (+ /callback, /status), /api/auth/logout
# callback.router: /api/callback
# webhook_proxy.router: /api/webhook-proxy
# projects.router: /api/projects, /api/projects/generate, /api/history
# pages.router: /, /dashboard, /history
app.include_router(google_auth.router)
app.include_router(callback.router)
app.include_router(webhook_proxy.router)
app.include_router(projects.router)
app.include_router(pages.router)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Does NOT check database connectivity.

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}
