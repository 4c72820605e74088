"""FastAPI routes for the storefront — catalogue, bag, checkout and orders."""

from dataclasses import asdict

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from storefront.api.schemas import (
    BagDetailsRequest,
    BagDetailsResponse,
    BagItemDetailsResponse,
    CheckoutAddressSchema,
    CheckoutRequest,
    OrderCreatedResponse,
    SampleOptionResponse,
    UpdateStatusRequest,
    UpdateTrackingRequest,
)
from storefront.bag.details import get_available_products_for_sample, get_bag_view
from storefront.catalogue import reads
from storefront.order import admin, customer
from storefront.order.checkout import create_order, get_user_address
from storefront.order.results import ActionResult, FailureKind

_STATUS_CODES = {
    FailureKind.UNAUTHORIZED: 401,
    FailureKind.FORBIDDEN: 403,
    FailureKind.VALIDATION: 400,
    FailureKind.NOT_FOUND: 404,
    FailureKind.CONFLICT: 409,
    FailureKind.UNAVAILABLE: 409,
    FailureKind.INFRASTRUCTURE: 500,
}


def _respond(result: ActionResult, status_code: int = 200) -> JSONResponse:
    if result.success:
        return JSONResponse(status_code=status_code, content=result.to_dict())
    return JSONResponse(status_code=_STATUS_CODES.get(result.kind, 400), content=result.to_dict())


# ---------------------------------------------------------------------------
# Catalogue Router
# ---------------------------------------------------------------------------
catalogue_router = APIRouter(prefix="/catalogue", tags=["catalogue"])


@catalogue_router.get("/products")
async def list_products(
    locale: str = "us",
    collection: str | None = None,
    tag: str | None = None,
) -> list[dict]:
    return [asdict(card) for card in reads.list_products(locale, collection_slug=collection, tag=tag)]


@catalogue_router.get("/products/{slug}")
async def get_product(slug: str, locale: str = "us"):
    detail = reads.get_product_detail(slug, locale)
    if detail is None:
        return JSONResponse(status_code=404, content={"error": "Product not found"})
    return asdict(detail)


@catalogue_router.get("/search")
async def search(q: str = Query(default=""), locale: str = "us", limit: int = Query(default=10, ge=1, le=50)) -> dict:
    return {
        "products": [asdict(hit) for hit in reads.search_products(q, locale, limit=limit)],
        "collections": [asdict(hit) for hit in reads.search_collections(q, locale, limit=limit)],
    }


@catalogue_router.get("/filters")
async def filters(locale: str = "us") -> dict:
    return asdict(reads.get_filter_options(locale))


# ---------------------------------------------------------------------------
# Bag Router
# ---------------------------------------------------------------------------
bag_router = APIRouter(prefix="/bag", tags=["bag"])


@bag_router.post("/details", response_model=BagDetailsResponse)
async def bag_details(body: BagDetailsRequest) -> BagDetailsResponse:
    view = get_bag_view([line.model_dump() for line in body.items], body.locale)
    return BagDetailsResponse(
        items=[BagItemDetailsResponse(**asdict(item), line_total=item.line_total) for item in view.items],
        samples=[SampleOptionResponse(**asdict(sample)) for sample in view.samples],
        subtotal=view.subtotal,
    )


@bag_router.get("/samples", response_model=list[SampleOptionResponse])
async def bag_samples(locale: str = "us") -> list[SampleOptionResponse]:
    return [SampleOptionResponse(**asdict(sample)) for sample in get_available_products_for_sample(locale)]


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=OrderCreatedResponse)
async def checkout(body: CheckoutRequest):
    result = create_order(
        [line.model_dump() for line in body.items],
        body.selected_sample,
        body.address.model_dump(by_alias=True),
        body.locale,
    )
    if not result.success:
        return _respond(result)
    return OrderCreatedResponse(**result.data)


@checkout_router.get("/address")
async def checkout_address():
    return {"address": get_user_address()}


# ---------------------------------------------------------------------------
# Customer Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("")
async def my_orders():
    return _respond(customer.list_my_orders())


@order_router.get("/{order_id}")
async def my_order(order_id: str):
    return _respond(customer.get_my_order(order_id))


@order_router.post("/{order_id}/cancel-request")
async def request_cancel(order_id: str):
    return _respond(customer.request_cancel_order(order_id))


# ---------------------------------------------------------------------------
# Admin Order Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@admin_router.get("")
async def recent_orders(limit: int = Query(default=admin.RECENT_ORDERS_LIMIT, ge=1, le=100)):
    return _respond(admin.read_recent_orders(limit))


@admin_router.get("/{order_id}")
async def read_order(order_id: str):
    return _respond(admin.read_order(order_id))


@admin_router.put("/{order_id}/status")
async def update_status(order_id: str, body: UpdateStatusRequest):
    return _respond(admin.update_order_status(order_id, body.status))


@admin_router.put("/{order_id}/tracking")
async def update_tracking(order_id: str, body: UpdateTrackingRequest):
    return _respond(admin.update_tracking_code(order_id, body.tracking_code))


@admin_router.put("/{order_id}/address")
async def update_address(order_id: str, body: CheckoutAddressSchema):
    return _respond(admin.update_order_address(order_id, body.model_dump(by_alias=True)))


@admin_router.post("/{order_id}/accept-cancel")
async def accept_cancel(order_id: str):
    return _respond(admin.accept_cancel_request(order_id))


@admin_router.post("/{order_id}/accept-refund")
async def accept_refund(order_id: str):
    return _respond(admin.accept_refund_request(order_id))
