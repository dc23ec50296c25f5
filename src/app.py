"""Storefront FastAPI application.

Serves the cart, checkout, order and address book endpoints of the ordering
domain. Commands are processed synchronously within each request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from ordering.domain import ordering
from ordering.utils.logging import add_context, clear_context
from shared.errors import register_error_handlers

ordering.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Cart, checkout and order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ordering domain context and bind request log context."""
    add_context(
        request_path=request.url.path,
        request_method=request.method,
        owner_id=request.headers.get("x-customer-id"),
    )
    try:
        with ordering.domain_context():
            response = await call_next(request)
        return response
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ordering.api.routes import (  # noqa: E402
    address_router,
    admin_order_router,
    cart_router,
    checkout_router,
    order_router,
)

app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(admin_order_router)
app.include_router(address_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ordering": {"name": ordering.name},
            },
        }
    )
