"""Pydantic request/response schemas for the clubsupply API.

These are the external contracts, kept separate from the protean commands
they are translated into.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

ItemStatusValue = Literal["enabled", "disabled"]
OrderStatusValue = Literal["Available", "Ordered from Local Vendor", "Ordered from Amazon", "Not Available"]


class StatusResponse(BaseModel):
    status: str = "ok"
    message: str | None = None


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------
class EmailRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254)


class RegisterRequest(BaseModel):
    coordinator_name: str = Field(min_length=1, max_length=100)
    club_name: str = Field(min_length=1, max_length=150)
    mobile: str = Field(min_length=1, max_length=20)
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=6, max_length=128)
    code: str = Field(min_length=6, max_length=6)


class ResetPasswordRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    new_password: str = Field(min_length=6, max_length=128)
    code: str = Field(min_length=6, max_length=6)


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=6, max_length=128)


class CoordinatorProfile(BaseModel):
    id: str
    coordinator_name: str
    club_name: str
    mobile: str
    email: str
    access: str


class LoginResponse(BaseModel):
    token: str
    expires_at: datetime
    coordinator: CoordinatorProfile


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------
class CreateInventoryItemRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: int = Field(ge=0)
    status: ItemStatusValue | None = None


class UpdateInventoryItemRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    quantity: int | None = Field(default=None, ge=0)
    status: ItemStatusValue | None = None


class InventoryAnnotation(BaseModel):
    inventory_item_id: str
    order_status: OrderStatusValue | None = None
    remark: str | None = None


class AnnotateInventoryRequest(BaseModel):
    annotations: list[InventoryAnnotation] = Field(min_length=1)


class InventoryItemResponse(BaseModel):
    id: str
    name: str
    quantity: int
    status: str
    order_status: str
    remark: str | None = None


class EnabledInventoryItemResponse(BaseModel):
    id: str
    name: str
    status: str


class RemoveInventoryItemResponse(BaseModel):
    status: str = "ok"
    removed_cart_items: int
    emptied_carts: int


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class RequestedItem(BaseModel):
    inventory_item_id: str
    quantity: int = Field(ge=1)


class AddCartItemsRequest(BaseModel):
    items: list[RequestedItem] = Field(min_length=1)


class AddCustomItemRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: int = Field(ge=1)
    link: str | None = Field(default=None, max_length=2048)


class CartChangeResponse(BaseModel):
    cart_id: str
    cart_item_ids: list[str]


class RemoveCartItemResponse(BaseModel):
    cart_id: str
    cart_deleted: bool


class RequesterCartItem(BaseModel):
    id: str
    name: str
    ordered_quantity: int
    status: str
    remarks: str | None = None


class AdministratorCartItem(RequesterCartItem):
    cart_id: str
    inventory_item_id: str | None = None
    allotted_quantity: int
    link: str | None = None


class RequesterDirectoryEntry(BaseModel):
    cart_id: str
    requester_id: str
    club_name: str
    coordinator_name: str
    contact: str


class DeleteCartResponse(BaseModel):
    status: str = "ok"
    removed_cart_items: int


# ---------------------------------------------------------------------------
# Fulfillment
# ---------------------------------------------------------------------------
class FulfillmentChange(BaseModel):
    allotted_delta: int | None = Field(default=None, ge=0)
    status: str | None = None
    remarks: str | None = None

    @model_validator(mode="after")
    def must_change_something(self):
        if self.allotted_delta is None and self.status is None and self.remarks is None:
            raise ValueError("Give at least one of allotted_delta, status or remarks")
        return self


class FulfillmentUpdate(FulfillmentChange):
    cart_item_id: str


class BatchFulfillmentRequest(BaseModel):
    updates: list[FulfillmentUpdate] = Field(min_length=1)


class BatchFulfillmentResponse(BaseModel):
    status: str = "ok"
    updated: list[str]


class ReconcileFulfillmentResponse(BaseModel):
    updated: list[str]
    skipped: list[str]


class InventorySummaryRow(BaseModel):
    id: str
    name: str
    available_quantity: int
    total_requested: int
    total_allotted: int
    order_status: str
    remark: str | None = None


class CustomItemRow(BaseModel):
    id: str
    cart_id: str
    name: str
    ordered_quantity: int
    allotted_quantity: int
    status: str
    remarks: str | None = None
    link: str | None = None
