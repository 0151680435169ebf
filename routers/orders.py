from fastapi import APIRouter, BackgroundTasks
from starlette import status
from schemas.order_schemas import (CreateOrderRequest, UpdateOwnOrderRequest, UpdateOrderStatusRequest,
                                   OrderResponse, CustomOrderRequest)
from schemas.auth_schemas import MessageResponse
from services.order_service import OrderService
from utils.deps import db_dependency, auth_dependency, admin_dependency, mailer_dependency
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/api",
    tags=["orders"]
)


@router.post("/orders", status_code=status.HTTP_201_CREATED, response_model=OrderResponse)
def create_order(body: CreateOrderRequest, auth: auth_dependency, db: db_dependency,
                 bg: BackgroundTasks, mailer: mailer_dependency):
    order = OrderService.create_order(auth, body, db)

    response = OrderResponse.model_validate(order)
    # Best effort; the order stands whether or not the shop is told
    bg.add_task(mailer.send_order_notification, response.model_dump())

    return response


@router.get("/orders", response_model=list[OrderResponse])
def list_my_orders(auth: auth_dependency, db: db_dependency):
    return OrderService.list_user_orders(auth.user_id, db)


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, auth: auth_dependency, db: db_dependency):
    return OrderService.get_order_for(auth, order_id, db)


@router.put("/orders/{order_id}", response_model=OrderResponse)
def update_my_order(order_id: int, body: UpdateOwnOrderRequest, auth: auth_dependency, db: db_dependency):
    return OrderService.update_owner_order(auth, order_id, body, db)


@router.post("/custom-orders", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def create_custom_order(body: CustomOrderRequest, bg: BackgroundTasks, mailer: mailer_dependency):
    """
    Forwards a free-form request (cakes for events and the like) to the shop.
    Nothing is stored.
    """
    bg.add_task(mailer.send_custom_order_request, body.name, body.email, body.phone,
                body.details, body.date_needed)

    logger.info("Custom order request received", extra={"email": body.email})

    return {"message": "Custom order request received. We will contact you shortly."}


@router.get("/admin/orders", response_model=list[OrderResponse])
def list_all_orders(admin: admin_dependency, db: db_dependency):
    return OrderService.list_all_orders(db)


@router.put("/admin/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: int, body: UpdateOrderStatusRequest, admin: admin_dependency,
                        db: db_dependency):
    return OrderService.update_status(
        order_id,
        body.status,
        db,
        tracking_number=body.tracking_number,
        estimated_delivery=body.estimated_delivery,
        notes=body.notes
    )
