"""FastAPI routes for clubsupply: accounts, inventory and carts.

Routes that go through ``process_with_retry`` are plain functions: FastAPI
runs them in its threadpool, so the retry backoff never blocks the event loop.
"""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from clubsupply.access.coordinator import Coordinator
from clubsupply.access.credentials import hash_password
from clubsupply.access.login import login
from clubsupply.access.registration import (
    RegisterCoordinator,
    RequestPasswordReset,
    RequestVerificationCode,
    ResetPassword,
)
from clubsupply.api.dependencies import require_bosslevel, require_user
from clubsupply.api.schemas import (
    AddCartItemsRequest,
    AddCustomItemRequest,
    AdministratorCartItem,
    AnnotateInventoryRequest,
    BatchFulfillmentRequest,
    BatchFulfillmentResponse,
    CartChangeResponse,
    CoordinatorProfile,
    CreateInventoryItemRequest,
    CustomItemRow,
    DeleteCartResponse,
    EmailRequest,
    EnabledInventoryItemResponse,
    FulfillmentChange,
    InventoryItemResponse,
    InventorySummaryRow,
    LoginRequest,
    LoginResponse,
    ReconcileFulfillmentResponse,
    RegisterRequest,
    RemoveCartItemResponse,
    RemoveInventoryItemResponse,
    RequesterCartItem,
    RequesterDirectoryEntry,
    ResetPasswordRequest,
    StatusResponse,
    UpdateInventoryItemRequest,
)
from clubsupply.cart.fulfillment import (
    ReconcileCatalogFulfillment,
    UpdateCartItemFulfillment,
    UpdateCartItemsFulfillment,
)
from clubsupply.cart.items import AddCatalogItemsToCart, AddCustomItemToCart, RemoveCartItem
from clubsupply.cart.management import DeleteCart
from clubsupply.catalog.annotation import AnnotateInventoryItems
from clubsupply.catalog.management import AddInventoryItem, RemoveInventoryItem, UpdateInventoryItem
from clubsupply.reports.listings import (
    administrator_cart_view,
    get_inventory_item,
    list_enabled_inventory,
    list_inventory,
    requester_cart_view,
    requester_directory,
)
from clubsupply.reports.summary import custom_item_report, inventory_summary
from clubsupply.shared.concurrency import process_with_retry

# ---------------------------------------------------------------------------
# Account Router
# ---------------------------------------------------------------------------
account_router = APIRouter(prefix="/users", tags=["users"])


@account_router.post("/request-code", response_model=StatusResponse)
async def request_code(body: EmailRequest) -> StatusResponse:
    current_domain.process(RequestVerificationCode(email=body.email), asynchronous=False)
    return StatusResponse(message="Verification email sent")


@account_router.post("/register", status_code=201, response_model=CoordinatorProfile)
async def register(body: RegisterRequest) -> CoordinatorProfile:
    command = RegisterCoordinator(
        coordinator_name=body.coordinator_name,
        club_name=body.club_name,
        mobile=body.mobile,
        email=body.email,
        password_hash=hash_password(body.password),
        code=body.code,
    )
    profile = current_domain.process(command, asynchronous=False)
    return CoordinatorProfile(**profile)


@account_router.post("/request-password-reset", response_model=StatusResponse)
async def request_password_reset(body: EmailRequest) -> StatusResponse:
    current_domain.process(RequestPasswordReset(email=body.email), asynchronous=False)
    return StatusResponse(message="Password reset code sent")


@account_router.put("/reset-password", response_model=StatusResponse)
async def reset_password(body: ResetPasswordRequest) -> StatusResponse:
    command = ResetPassword(
        email=body.email,
        password_hash=hash_password(body.new_password),
        code=body.code,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(message="Password reset successful")


@account_router.post("/login", response_model=LoginResponse)
async def login_coordinator(body: LoginRequest) -> LoginResponse:
    result = login(body.email, body.password)
    return LoginResponse(
        token=result["token"],
        expires_at=result["expires_at"],
        coordinator=CoordinatorProfile(**result["coordinator"]),
    )


# ---------------------------------------------------------------------------
# Inventory Router
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


@inventory_router.post("", status_code=201, response_model=InventoryItemResponse)
async def create_inventory_item(
    body: CreateInventoryItemRequest,
    admin: Coordinator = Depends(require_bosslevel),
) -> InventoryItemResponse:
    command = AddInventoryItem(name=body.name, quantity=body.quantity, status=body.status)
    item_id = current_domain.process(command, asynchronous=False)
    return InventoryItemResponse(**get_inventory_item(item_id))


@inventory_router.get("", response_model=list[InventoryItemResponse])
async def get_inventory(admin: Coordinator = Depends(require_bosslevel)) -> list[InventoryItemResponse]:
    return [InventoryItemResponse(**row) for row in list_inventory()]


@inventory_router.get("/enabled", response_model=list[EnabledInventoryItemResponse])
async def get_enabled_inventory(
    requester: Coordinator = Depends(require_user),
) -> list[EnabledInventoryItemResponse]:
    return [EnabledInventoryItemResponse(**row) for row in list_enabled_inventory()]


@inventory_router.get("/summary", response_model=list[InventorySummaryRow])
async def get_inventory_summary(admin: Coordinator = Depends(require_bosslevel)) -> list[InventorySummaryRow]:
    return [InventorySummaryRow(**row) for row in inventory_summary()]


@inventory_router.put("/annotations", response_model=StatusResponse)
def annotate_inventory(
    body: AnnotateInventoryRequest,
    admin: Coordinator = Depends(require_bosslevel),
) -> StatusResponse:
    annotations = [a.model_dump(exclude_none=True) for a in body.annotations]
    process_with_retry(AnnotateInventoryItems(annotations=json.dumps(annotations)))
    return StatusResponse(message=f"{len(annotations)} inventory items annotated")


@inventory_router.put("/{inventory_item_id}", response_model=InventoryItemResponse)
def update_inventory_item(
    inventory_item_id: str,
    body: UpdateInventoryItemRequest,
    admin: Coordinator = Depends(require_bosslevel),
) -> InventoryItemResponse:
    command = UpdateInventoryItem(
        inventory_item_id=inventory_item_id,
        name=body.name,
        quantity=body.quantity,
        status=body.status,
    )
    process_with_retry(command)
    return InventoryItemResponse(**get_inventory_item(inventory_item_id))


@inventory_router.delete("/{inventory_item_id}", response_model=RemoveInventoryItemResponse)
def delete_inventory_item(
    inventory_item_id: str,
    admin: Coordinator = Depends(require_bosslevel),
) -> RemoveInventoryItemResponse:
    result = process_with_retry(RemoveInventoryItem(inventory_item_id=inventory_item_id))
    return RemoveInventoryItemResponse(**result)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.post("/items", response_model=CartChangeResponse)
def add_cart_items(
    body: AddCartItemsRequest,
    requester: Coordinator = Depends(require_user),
) -> CartChangeResponse:
    command = AddCatalogItemsToCart(
        requester_id=str(requester.id),
        items=json.dumps([item.model_dump() for item in body.items]),
    )
    return CartChangeResponse(**process_with_retry(command))


@cart_router.post("/custom-items", response_model=CartChangeResponse)
def add_custom_cart_item(
    body: AddCustomItemRequest,
    requester: Coordinator = Depends(require_user),
) -> CartChangeResponse:
    command = AddCustomItemToCart(
        requester_id=str(requester.id),
        name=body.name,
        quantity=body.quantity,
        link=body.link,
    )
    return CartChangeResponse(**process_with_retry(command))


@cart_router.get("/items", response_model=list[RequesterCartItem])
async def get_own_cart_items(requester: Coordinator = Depends(require_user)) -> list[RequesterCartItem]:
    return [RequesterCartItem(**row) for row in requester_cart_view(str(requester.id))]


@cart_router.get("/requesters", response_model=list[RequesterDirectoryEntry])
async def get_requester_directory(
    admin: Coordinator = Depends(require_bosslevel),
) -> list[RequesterDirectoryEntry]:
    return [RequesterDirectoryEntry(**row) for row in requester_directory()]


@cart_router.get("/requesters/{requester_id}/items", response_model=list[AdministratorCartItem])
async def get_requester_cart_items(
    requester_id: str,
    admin: Coordinator = Depends(require_bosslevel),
) -> list[AdministratorCartItem]:
    return [AdministratorCartItem(**row) for row in administrator_cart_view(requester_id)]


@cart_router.delete("/{cart_id}/items/{name}", response_model=RemoveCartItemResponse)
def remove_cart_item(
    cart_id: str,
    name: str,
    admin: Coordinator = Depends(require_bosslevel),
) -> RemoveCartItemResponse:
    result = process_with_retry(RemoveCartItem(cart_id=cart_id, name=name))
    return RemoveCartItemResponse(**result)


@cart_router.delete("/{cart_id}", response_model=DeleteCartResponse)
def delete_cart(cart_id: str, admin: Coordinator = Depends(require_bosslevel)) -> DeleteCartResponse:
    removed = process_with_retry(DeleteCart(cart_id=cart_id))
    return DeleteCartResponse(removed_cart_items=removed)


# ---------------------------------------------------------------------------
# Fulfillment (administrator)
# ---------------------------------------------------------------------------
@cart_router.put("/line-items/{cart_item_id}", response_model=StatusResponse)
def update_cart_item_fulfillment(
    cart_item_id: str,
    body: FulfillmentChange,
    admin: Coordinator = Depends(require_bosslevel),
) -> StatusResponse:
    command = UpdateCartItemFulfillment(
        cart_item_id=cart_item_id,
        allotted_delta=body.allotted_delta,
        status=body.status,
        remarks=body.remarks,
    )
    process_with_retry(command)
    return StatusResponse()


@cart_router.put("/line-items", response_model=BatchFulfillmentResponse)
def update_cart_items_fulfillment(
    body: BatchFulfillmentRequest,
    admin: Coordinator = Depends(require_bosslevel),
) -> BatchFulfillmentResponse:
    updates = [update.model_dump(exclude_none=True) for update in body.updates]
    updated = process_with_retry(UpdateCartItemsFulfillment(updates=json.dumps(updates)))
    return BatchFulfillmentResponse(updated=updated)


@cart_router.put("/line-items/catalog/reconcile", response_model=ReconcileFulfillmentResponse)
def reconcile_catalog_fulfillment(
    body: BatchFulfillmentRequest,
    admin: Coordinator = Depends(require_bosslevel),
) -> ReconcileFulfillmentResponse:
    updates = [update.model_dump(exclude_none=True) for update in body.updates]
    result = process_with_retry(ReconcileCatalogFulfillment(updates=json.dumps(updates)))
    return ReconcileFulfillmentResponse(**result)


@cart_router.get("/line-items/custom", response_model=list[CustomItemRow])
async def get_custom_items(admin: Coordinator = Depends(require_bosslevel)) -> list[CustomItemRow]:
    return [CustomItemRow(**row) for row in custom_item_report()]
