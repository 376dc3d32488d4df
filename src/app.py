"""UPS Shipping Connector FastAPI application.

Serves the marketplace shipping API. Each workflow runs synchronously inside
the shipping domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 3000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the configuration overlay (e.g. "test", "production").
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, RedirectResponse
from shipping.domain import shipping
from shipping.utils.logging import configure_logging

configure_logging()
shipping.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="UPS Shipping Connector",
    description="Quotes, shipments and tracking for marketplace channels, backed by UPS",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from shipping.api.middleware import request_tracking_middleware  # noqa: E402

app.middleware("http")(request_tracking_middleware)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from shipping.api import register_error_handlers, shipments_router  # noqa: E402

register_error_handlers(app)
app.include_router(shipments_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/status", response_class=PlainTextResponse)
async def status():
    return "OK"


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/status")
