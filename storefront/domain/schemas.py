# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime

from storefront.domain.enums import OrderStatus, PaymentMethod, PaymentStatus


# ---------------------------------------------------------------- products

class ProductCreate(BaseModel):
    """Schema for listing a new product (seller)."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    image_url: str | None = None
    category: str | None = Field(None, max_length=100)


class StockUpdate(BaseModel):
    stock_quantity: int = Field(..., ge=0, description="Absolute stock count")


class ProductOut(BaseModel):
    id: int
    seller_id: int
    name: str
    description: str | None = None
    price: Decimal
    image_url: str | None = None
    category: str | None = None
    stock_quantity: int
    is_in_stock: bool

    model_config = ConfigDict(from_attributes=True)


# --------------------------------------------------------------- addresses

class AddressCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=5, max_length=15)
    line1: str = Field(..., min_length=1, max_length=255)
    line2: str | None = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=3, max_length=10)
    landmark: str | None = Field(None, max_length=100)
    is_default: bool = False


class AddressOut(BaseModel):
    id: int
    user_id: int
    full_name: str
    phone: str
    line1: str
    line2: str | None = None
    city: str
    state: str
    postal_code: str
    landmark: str | None = None
    is_default: bool

    model_config = ConfigDict(from_attributes=True)


# -------------------------------------------------------------------- cart

class ItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1, description="Quantity must be at least 1")


class QuantityIn(BaseModel):
    quantity: int = Field(..., ge=1, description="Quantity must be at least 1")


class CartLineOut(BaseModel):
    """A stored cart line, returned by add/update."""

    id: int
    user_id: int
    product_id: int
    quantity: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    image_url: str | None = None
    category: str | None = None
    stock_quantity: int
    is_in_stock: bool


class CartItemOut(BaseModel):
    id: int
    quantity: int
    product: CartProductOut
    item_total: Decimal
    stock_warning: str | None = None


class CartOut(BaseModel):
    items: List[CartItemOut]
    item_count: int
    subtotal: str
    total: str


class CartIssue(BaseModel):
    product_name: str
    issue: str


class CartValidationOut(BaseModel):
    valid: bool
    issues: List[CartIssue]


# ------------------------------------------------------------------ orders

class OrderCreate(BaseModel):
    """Schema for checkout."""

    address_id: int = Field(..., gt=0)
    payment_method: PaymentMethod
    notes: str | None = Field(None, max_length=500)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemOut(BaseModel):
    id: int
    product_id: int | None = None
    quantity: int
    price_at_purchase: Decimal
    subtotal: Decimal
    product_name: str
    product_image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    order_number: str
    user_id: int
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    total_amount: Decimal
    shipping_name: str
    shipping_phone: str
    shipping_line1: str
    shipping_line2: str | None = None
    shipping_city: str
    shipping_state: str
    shipping_postal_code: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut]

    model_config = ConfigDict(from_attributes=True)
