"""
Pydantic Schemas for Domain Records and Request/Response Validation

Domain records (MenuItem, CartItem, Order, CloudConfig) are the flat,
versionless shapes persisted in the menu, order_history and cloud_config
blobs. They serialize with camelCase keys (createdAt, paymentMethod, ...)
and accept either camelCase or snake_case on input.

Version: 1.0.0
"""

from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================

class Category(str, Enum):
    HOT_COFFEE = "Hot Coffee"
    ICE_COFFEE = "Ice Coffee"
    TEA = "Tea"
    SPECIALTY = "Specialty"
    BAKERY = "Bakery"


class OrderStatus(str, Enum):
    """Order fulfillment status."""
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    ONLINE = "online"


class PaymentStatus(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class OrderSource(str, Enum):
    """Provenance of an order."""
    LOCAL = "local"
    CLOUD = "cloud"


def default_payment_status(method: PaymentMethod) -> PaymentStatus:
    """Online orders are paid at checkout, cash orders at the counter."""
    return PaymentStatus.PAID if method == PaymentMethod.ONLINE else PaymentStatus.UNPAID


# =============================================================================
# DOMAIN RECORDS
# =============================================================================

class Record(BaseModel):
    """Base for persisted records: camelCase on the wire, immutable in memory."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_blob(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MenuItem(Record):
    """A catalog entry."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    price: float = Field(..., ge=0)
    category: Category
    image: str = ""


class CartItem(MenuItem):
    """A menu item value with a quantity."""
    quantity: int = Field(default=1, ge=1)

    @classmethod
    def from_menu_item(cls, item: MenuItem, quantity: int = 1) -> "CartItem":
        return cls(**item.model_dump(exclude={"quantity"}), quantity=quantity)

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)


class Order(Record):
    """
    A checked-out order.

    ``items`` and ``total`` are frozen at creation. Only ``status`` and
    ``payment_status`` ever change, and they change by replacing the record.
    """
    id: str
    created_at: int = Field(..., description="Unix timestamp in milliseconds")
    date: str
    items: tuple[CartItem, ...] = Field(..., min_length=1)
    total: float = Field(..., ge=0)
    status: OrderStatus = OrderStatus.PENDING
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    source: Optional[OrderSource] = None

    @field_validator("status", mode="before")
    @classmethod
    def default_missing_status(cls, v):
        # Older records may carry an explicit null status.
        return OrderStatus.PENDING if v is None else v


class CloudConfig(Record):
    enabled: bool = False
    api_key: str = ""
    project_url: str = ""
    last_sync: Optional[int] = None


MenuList = TypeAdapter(List[MenuItem])
OrderList = TypeAdapter(List[Order])


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class MenuItemCreate(BaseModel):
    """Request schema for adding a catalog item."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Flat White"])
    description: str = Field(..., min_length=1, max_length=300)
    price: float = Field(..., ge=0, examples=[4.25])
    category: Category = Field(default=Category.HOT_COFFEE)
    image: Optional[str] = Field(None, max_length=500)


class MenuItemUpdate(BaseModel):
    """Partial update of a catalog item. Omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=300)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[Category] = None
    image: Optional[str] = Field(None, max_length=500)


class DescribeRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: Category = Field(default=Category.HOT_COFFEE)


class CartAddRequest(BaseModel):
    item_id: str = Field(..., min_length=1)


class CartAdjustRequest(BaseModel):
    delta: int = Field(..., examples=[1, -1])


class CheckoutRequest(BaseModel):
    payment_method: PaymentMethod = Field(default=PaymentMethod.ONLINE)


class StatusUpdateRequest(BaseModel):
    status: OrderStatus


class PaymentUpdateRequest(BaseModel):
    payment_status: PaymentStatus


class LoginRequest(BaseModel):
    secret: str


class CloudConfigUpdate(BaseModel):
    enabled: bool = False
    api_key: str = Field(default="", max_length=200)
    project_url: str = Field(default="", max_length=500)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class CartResponse(BaseModel):
    items: List[CartItem]
    item_count: int
    total: float


class OrderView(BaseModel):
    """An order plus the derived values the tracking screens show."""
    order: Order
    short_number: str
    stage_index: Optional[int]
    stage_label: str
    relative_time: str
    is_terminal: bool


class OrderHistoryResponse(BaseModel):
    active: List[OrderView]
    history: List[OrderView]


class DescribeResponse(BaseModel):
    description: str


class DashboardResponse(BaseModel):
    total_orders: int
    active_orders: int
    completed_orders: int
    cancelled_orders: int
    unpaid_orders: int
    revenue: float
    cloud_orders: int
    menu_items: int


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    storage: str
    description_service: str
    cloud_sync: str
