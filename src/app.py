"""PetalBox ordering FastAPI application.

Processes commands synchronously via HTTP. Every request runs inside the
ordering domain context with a request id bound to the log context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from ordering/domain.toml.
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ordering.catalogue import set_catalogue
from ordering.catalogue.fake_adapter import InMemoryCatalogue
from ordering.domain import custom_setting, ordering
from ordering.utils.logging import add_context, clear_context

ordering.init()

if catalogue_file := custom_setting("catalogue_file"):
    set_catalogue(InMemoryCatalogue.from_file(catalogue_file))

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="PetalBox Ordering API",
    description="Wholesale flower ordering — carts, checkout, orders and addresses",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ordering domain context and bind request details to the logs."""
    clear_context()
    add_context(
        request_id=request.headers.get("X-Request-Id") or str(uuid4()),
        path=request.url.path,
        user_id=request.headers.get("X-User-Id"),
    )
    with ordering.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers and error envelope
# ---------------------------------------------------------------------------
from ordering.api.errors import register_error_handlers  # noqa: E402
from ordering.api.routes import address_router, admin_router, cart_router, order_router  # noqa: E402

app.include_router(order_router)
app.include_router(admin_router)
app.include_router(cart_router)
app.include_router(address_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domains": {"ordering": {"name": ordering.name}}})
