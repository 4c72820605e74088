"""Ampul storefront FastAPI application.

Serves catalogue reads, bag detail resolution, checkout and order management
over HTTP, processing commands synchronously. Sign-in is handled by an
upstream OAuth proxy, which forwards the signed-in user as ``X-User-*``
headers; the middleware below publishes them as the request's session.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# PROTEAN_ENV selects the domain.toml overlay (memory providers in tests,
# PostgreSQL in production).
from storefront.domain import storefront
from storefront.identity.auth import Session, bind_request_session, unbind_request_session
from storefront.utils.logging import bind_request_context, clear_context

storefront.init()

app = FastAPI(
    title="Ampul Storefront API",
    description="Fragrance storefront — catalogue, shopping bag, checkout and order management",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def session_from_headers(headers) -> Session | None:
    email = (headers.get("x-user-email") or "").strip()
    if not email:
        return None
    return Session(
        email=email,
        id=headers.get("x-user-id") or None,
        role=headers.get("x-user-role") or None,
        name=headers.get("x-user-name") or None,
    )


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and the caller's session for each request."""
    session = session_from_headers(request.headers)
    token = bind_request_session(session)
    bind_request_context(
        request.headers.get("x-request-id") or uuid4().hex[:12],
        user_email=session.email if session is not None else None,
        path=request.url.path,
    )
    try:
        with storefront.domain_context():
            response = await call_next(request)
        return response
    finally:
        unbind_request_session(token)
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api.routes import (  # noqa: E402
    admin_router,
    bag_router,
    catalogue_router,
    checkout_router,
    order_router,
)

app.include_router(catalogue_router)
app.include_router(bag_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(admin_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": storefront.name}})
