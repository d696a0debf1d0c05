"""Storefront FastAPI application.

Cart, checkout and order lifecycle endpoints over a MongoDB document store.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import DomainContextMiddleware

from catalogue.domain import catalogue
from identity.domain import identity
from ordering.domain import ordering
from shared.api import register_exception_handlers, request_context_middleware
from shared.config import get_settings
from shared.logging import configure_logging

configure_logging()

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Identity and catalogue come first: ordering handlers load users and products.
identity.init()
catalogue.init()
ordering.init()

ROUTE_DOMAIN_MAP = {
    "/products": catalogue,
    "/cart": ordering,
    "/orders": ordering,
}


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="E-commerce platform: catalogue, cart and order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(DomainContextMiddleware, route_domain_map=ROUTE_DOMAIN_MAP)
app.middleware("http")(request_context_middleware)

register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import product_router  # noqa: E402
from ordering.api import cart_router, order_router  # noqa: E402

app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
def health():
    return JSONResponse(content={"status": "ok", "environment": get_settings().env})
