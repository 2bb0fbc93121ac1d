"""
FastAPI Application Entry Point

Brewhouse Storefront - order lifecycle API
Supports both Mock services (development) and Real APIs (production).

Endpoints:
    - GET  /api/menu: Browse the menu
    - /api/cart: Cart operations
    - POST /api/checkout: Turn the cart into an order
    - GET  /api/orders: Active and past orders
    - /api/admin/*: Staff dashboard (menu, order status, payments, cloud sync)
    - GET  /health: System health check

All handlers are ``async def`` and run on one event loop together with the
cloud sync timer, so storefront mutations are applied one at a time.

Version: 1.0.0
"""

import asyncio
import logging
from typing import Any, List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends, Query, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from brewhouse.core.config import get_settings, setup_logging
from brewhouse.ordering.cloud import run_sync_loop
from brewhouse.ordering.ledger import EmptyCartError
from brewhouse.ordering.projections import order_view
from brewhouse.schemas import (
    CartAddRequest,
    CartAdjustRequest,
    CartResponse,
    Category,
    CheckoutRequest,
    CloudConfig,
    CloudConfigUpdate,
    DashboardResponse,
    DescribeRequest,
    DescribeResponse,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
    Order,
    OrderHistoryResponse,
    OrderSource,
    OrderStatus,
    OrderView,
    PaymentStatus,
    PaymentUpdateRequest,
    StatusUpdateRequest,
)
from brewhouse.services.descriptions import BaseDescriptionService, get_description_service
from brewhouse.services.storage import get_blob_store
from brewhouse.storefront import Storefront

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"☕ Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    store = get_blob_store()
    storefront = Storefront.from_settings(store, settings)
    app.state.storefront = storefront
    logger.info(f"✅ Blob Store: {store.provider_name}")

    description_service = get_description_service()
    logger.info(f"✅ Description Service: {description_service.provider_name}")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    sync_task = asyncio.create_task(
        run_sync_loop(storefront.cloud, settings.cloud_sync_interval_seconds)
    )

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    sync_task.cancel()
    try:
        await sync_task
    except asyncio.CancelledError:
        pass
    dispose = getattr(store, "dispose", None)
    if dispose is not None:
        dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Coffee-shop storefront: menu, cart, checkout and order tracking, "
        "with a staff dashboard for fulfillment."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_storefront(request: Request) -> Storefront:
    """The storefront created at startup."""
    return request.app.state.storefront


def require_admin(storefront: Storefront = Depends(get_storefront)) -> Storefront:
    """Reject admin calls until the staff access key has been entered."""
    if not storefront.gate.is_granted:
        raise HTTPException(status_code=403, detail="Staff access required")
    return storefront


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def cart_response(storefront: Storefront) -> CartResponse:
    cart = storefront.cart
    return CartResponse(
        items=list(cart.snapshot()),
        item_count=cart.item_count(),
        total=cart.total(),
    )


def find_order(storefront: Storefront, order_id: str) -> Order:
    order = storefront.ledger.get(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return order


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"☕ Welcome to {settings.shop_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "menu": "/api/menu",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    storefront: Storefront = Depends(get_storefront),
    description_service: BaseDescriptionService = Depends(get_description_service),
) -> HealthResponse:
    """Verify all system components are operational."""
    storage_status = "healthy" if storefront.store.health_check() else "unhealthy"
    description_status = "healthy" if await description_service.health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [storage_status, description_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        storage=storage_status,
        description_service=description_status,
        cloud_sync="enabled" if storefront.cloud.enabled else "disabled",
    )


# =============================================================================
# MENU ENDPOINTS
# =============================================================================

@app.get("/api/menu", response_model=List[MenuItem], tags=["Menu"])
async def list_menu(
    category: Optional[Category] = Query(None),
    storefront: Storefront = Depends(get_storefront),
) -> List[MenuItem]:
    """List the menu, optionally filtered by category."""
    return list(storefront.catalog.items(category))


# =============================================================================
# CART ENDPOINTS
# =============================================================================

@app.get("/api/cart", response_model=CartResponse, tags=["Cart"])
async def get_cart(storefront: Storefront = Depends(get_storefront)) -> CartResponse:
    return cart_response(storefront)


@app.post("/api/cart/items", response_model=CartResponse, tags=["Cart"])
async def add_to_cart(
    payload: CartAddRequest,
    storefront: Storefront = Depends(get_storefront),
) -> CartResponse:
    """Add one unit of a menu item to the cart."""
    item = storefront.catalog.get(payload.item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Menu item {payload.item_id} not found")
    storefront.cart.add(item)
    return cart_response(storefront)


@app.patch("/api/cart/items/{item_id}", response_model=CartResponse, tags=["Cart"])
async def adjust_cart_item(
    item_id: str,
    payload: CartAdjustRequest,
    storefront: Storefront = Depends(get_storefront),
) -> CartResponse:
    """Change a line's quantity by a delta (never below 1)."""
    storefront.cart.adjust_quantity(item_id, payload.delta)
    return cart_response(storefront)


@app.delete("/api/cart/items/{item_id}", response_model=CartResponse, tags=["Cart"])
async def remove_from_cart(
    item_id: str,
    storefront: Storefront = Depends(get_storefront),
) -> CartResponse:
    storefront.cart.remove(item_id)
    return cart_response(storefront)


@app.delete("/api/cart", response_model=CartResponse, tags=["Cart"])
async def clear_cart(storefront: Storefront = Depends(get_storefront)) -> CartResponse:
    storefront.cart.clear()
    return cart_response(storefront)


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@app.post(
    "/api/checkout",
    response_model=OrderView,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Place Order",
)
async def checkout(
    payload: CheckoutRequest,
    storefront: Storefront = Depends(get_storefront),
) -> OrderView:
    """Turn the cart into a pending order and empty the cart."""
    try:
        order = storefront.checkout(payload.payment_method)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Order {order.id} dispatched at {order.date}")
    return order_view(order)


@app.get("/api/orders", response_model=OrderHistoryResponse, tags=["Orders"])
async def list_orders(storefront: Storefront = Depends(get_storefront)) -> OrderHistoryResponse:
    """Active orders and past orders, each most-recent-first."""
    partition = storefront.ledger.partition()
    return OrderHistoryResponse(
        active=[order_view(o) for o in partition.active],
        history=[order_view(o) for o in partition.historical],
    )


@app.get("/api/orders/{order_id}", response_model=OrderView, tags=["Orders"])
async def get_order(
    order_id: str,
    storefront: Storefront = Depends(get_storefront),
) -> OrderView:
    return order_view(find_order(storefront, order_id))


# =============================================================================
# STAFF ACCESS
# =============================================================================

@app.post("/api/admin/login", tags=["Admin"])
async def admin_login(
    payload: LoginRequest,
    storefront: Storefront = Depends(get_storefront),
) -> dict[str, Any]:
    if not storefront.gate.authenticate(payload.secret):
        raise HTTPException(status_code=401, detail="Invalid Access Key")
    return {"success": True, "message": "Staff Access Granted"}


@app.post("/api/admin/logout", tags=["Admin"])
async def admin_logout(storefront: Storefront = Depends(get_storefront)) -> dict[str, Any]:
    storefront.gate.revoke()
    return {"success": True, "message": "Staff Session Ended"}


# =============================================================================
# ADMIN: MENU
# =============================================================================

@app.post("/api/admin/menu", response_model=MenuItem, status_code=201, tags=["Admin"])
async def create_menu_item(
    payload: MenuItemCreate,
    storefront: Storefront = Depends(require_admin),
) -> MenuItem:
    return storefront.catalog.add(
        name=payload.name,
        description=payload.description,
        price=payload.price,
        category=payload.category,
        image=payload.image,
    )


@app.put("/api/admin/menu/{item_id}", response_model=MenuItem, tags=["Admin"])
async def update_menu_item(
    item_id: str,
    payload: MenuItemUpdate,
    storefront: Storefront = Depends(require_admin),
) -> MenuItem:
    updated = storefront.catalog.update(item_id, **payload.model_dump(exclude_none=True))
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Menu item {item_id} not found")
    return updated


@app.delete("/api/admin/menu/{item_id}", tags=["Admin"])
async def delete_menu_item(
    item_id: str,
    storefront: Storefront = Depends(require_admin),
) -> dict[str, Any]:
    if not storefront.catalog.delete(item_id):
        raise HTTPException(status_code=404, detail=f"Menu item {item_id} not found")
    return {"success": True, "message": "Item retired"}


@app.post("/api/admin/menu/describe", response_model=DescribeResponse, tags=["Admin"])
async def describe_menu_item(
    payload: DescribeRequest,
    storefront: Storefront = Depends(require_admin),
    description_service: BaseDescriptionService = Depends(get_description_service),
) -> DescribeResponse:
    """Draft a menu description with the text-generation service."""
    text = await description_service.describe(payload.name, payload.category.value)
    return DescribeResponse(description=text)


# =============================================================================
# ADMIN: ORDERS
# =============================================================================

@app.patch(
    "/api/admin/orders/{order_id}/status",
    response_model=OrderView,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    tags=["Admin"],
)
async def update_order_status(
    order_id: str,
    payload: StatusUpdateRequest,
    storefront: Storefront = Depends(require_admin),
) -> OrderView:
    """Set an order's status. Stages may be skipped; finished orders are locked."""
    current = find_order(storefront, order_id)
    if not storefront.ledger.update_status(order_id, payload.status):
        raise HTTPException(
            status_code=409,
            detail=f"Order {order_id} is {current.status.value} and can no longer change",
        )
    return order_view(find_order(storefront, order_id))


@app.patch("/api/admin/orders/{order_id}/payment", response_model=OrderView, tags=["Admin"])
async def update_payment_status(
    order_id: str,
    payload: PaymentUpdateRequest,
    storefront: Storefront = Depends(require_admin),
) -> OrderView:
    if not storefront.ledger.update_payment_status(order_id, payload.payment_status):
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return order_view(find_order(storefront, order_id))


@app.get("/api/admin/dashboard", response_model=DashboardResponse, tags=["Admin"])
async def dashboard_data(storefront: Storefront = Depends(require_admin)) -> DashboardResponse:
    """Aggregated order statistics."""
    orders = storefront.ledger.orders()
    revenue = sum(
        o.total for o in orders
        if o.payment_status == PaymentStatus.PAID and o.status != OrderStatus.CANCELLED
    )
    return DashboardResponse(
        total_orders=len(orders),
        active_orders=storefront.ledger.active_count(),
        completed_orders=sum(1 for o in orders if o.status == OrderStatus.COMPLETED),
        cancelled_orders=sum(1 for o in orders if o.status == OrderStatus.CANCELLED),
        unpaid_orders=sum(1 for o in orders if o.payment_status == PaymentStatus.UNPAID),
        revenue=round(revenue, 2),
        cloud_orders=sum(1 for o in orders if o.source == OrderSource.CLOUD),
        menu_items=len(storefront.catalog),
    )


# =============================================================================
# ADMIN: CLOUD SYNC
# =============================================================================

@app.get("/api/admin/cloud", response_model=CloudConfig, tags=["Admin"])
async def get_cloud_config(storefront: Storefront = Depends(require_admin)) -> CloudConfig:
    return storefront.cloud.config


@app.put("/api/admin/cloud", response_model=CloudConfig, tags=["Admin"])
async def update_cloud_config(
    payload: CloudConfigUpdate,
    storefront: Storefront = Depends(require_admin),
) -> CloudConfig:
    return storefront.cloud.configure(CloudConfig(**payload.model_dump()))


@app.post("/api/admin/cloud/sync", tags=["Admin"])
async def force_cloud_order(storefront: Storefront = Depends(require_admin)) -> dict[str, Any]:
    """Inject one simulated remote order right now."""
    if not storefront.cloud.enabled:
        raise HTTPException(status_code=409, detail="Cloud sync is disabled")
    order = storefront.cloud.inject_simulated_order()
    return {
        "success": order is not None,
        "order": order_view(order).model_dump(mode="json", by_alias=True) if order else None,
    }


@app.post("/api/admin/cloud/import", tags=["Admin"])
async def import_cloud_orders(
    orders: List[Order],
    storefront: Storefront = Depends(require_admin),
) -> dict[str, Any]:
    """Merge order records received from the cloud into the history."""
    added = storefront.cloud.import_orders(orders)
    return {"success": True, "added": added, "skipped": len(orders) - added}


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )
