from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from core.exceptions import (ValidationError, AuthorizationError, ConflictError,
                             NotFoundError, ConcurrentUpdateError)
from models.cart_items import CartItem
from models.orders import Order, TERMINAL_STATUSES
from models.products import Product
from schemas.order_schemas import CreateOrderRequest, OrderItemRequest, UpdateOwnOrderRequest
from services.session_service import AuthContext
from utils.logger import get_logger
from utils.time_utils import utcnow, to_iso

logger = get_logger(__name__)

CONCURRENT_UPDATE = "Order was modified by another request. Please retry."


class OrderService:
    """
    Order lifecycle: creation, status changes with their audit trail, owner
    edits and listings.

    ``status_history`` is append-only. Its last entry always carries the
    current status; an entry is added only when the status changes.
    """

    @staticmethod
    def _price_items(items: list[OrderItemRequest], db: Session) -> tuple[list[dict], int]:
        """
        Snapshots each line from the catalog.

        Returns:
            (snapshots, total) with prices in minor units
        """
        product_ids = {item.product_id for item in items}
        products = {
            p.id: p for p in db.query(Product).filter(Product.id.in_(product_ids)).all()
        }

        snapshots = []
        total = 0
        for item in items:
            product = products.get(item.product_id)
            if product is None:
                raise ValidationError(f"Product {item.product_id} does not exist")

            snapshots.append({
                "product_id": product.id,
                "product_name": product.name,
                "price": product.price,
                "quantity": item.quantity
            })
            total += product.price * item.quantity

        return snapshots, total

    @staticmethod
    def _commit(order_id: int, db: Session):
        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            logger.warning(
                "Concurrent order update rejected",
                extra={"order_id": order_id}
            )
            raise ConcurrentUpdateError(CONCURRENT_UPDATE)

    @staticmethod
    def create_order(auth: AuthContext, body: CreateOrderRequest, db: Session) -> Order:
        """
        Creates a pending order for the caller.

        Flow:
        1. Re-price every line from the catalog
        2. Reject a client total that disagrees with the computed one
        3. Persist with a single "pending" history entry
        4. Empty the cart the order was placed from
        """
        snapshots, total = OrderService._price_items(body.items, db)

        if body.total != total:
            logger.warning(
                "Order rejected - total mismatch",
                extra={"user_id": auth.user_id, "client_total": body.total, "computed_total": total}
            )
            raise ValidationError(f"Order total does not match item prices (expected {total})")

        order = Order(
            user_id=auth.user_id,
            customer_name=body.customer_name,
            email=body.email,
            phone=body.phone,
            address=body.address,
            items=snapshots,
            total=total,
            status="pending",
            status_history=[{"status": "pending", "timestamp": to_iso(utcnow())}],
            notes=body.notes
        )
        db.add(order)

        if body.cart_id:
            db.query(CartItem).filter(CartItem.cart_id == body.cart_id).delete(synchronize_session=False)

        db.commit()
        db.refresh(order)

        logger.info(
            "Order created",
            extra={"order_id": order.id, "user_id": auth.user_id, "total": total}
        )

        return order

    @staticmethod
    def get_order(order_id: int, db: Session) -> Order:
        order = db.query(Order).filter(Order.id == order_id).one_or_none()
        if not order:
            raise NotFoundError("Order not found")
        return order

    @staticmethod
    def get_order_for(auth: AuthContext, order_id: int, db: Session) -> Order:
        order = OrderService.get_order(order_id, db)
        if not auth.is_admin and order.user_id != auth.user_id:
            raise AuthorizationError("You can only view your own orders")
        return order

    @staticmethod
    def list_user_orders(user_id: int, db: Session) -> list[Order]:
        return (
            db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    @staticmethod
    def list_all_orders(db: Session) -> list[Order]:
        return db.query(Order).order_by(Order.created_at.desc(), Order.id.desc()).all()

    @staticmethod
    def update_status(order_id: int, status: str, db: Session,
                      tracking_number: str | None = None,
                      estimated_delivery: datetime | None = None,
                      notes: str | None = None) -> Order:
        """
        Moves an order to ``status``.

        A history entry is appended only when the status actually changes;
        it records the optional fields that were supplied. Tracking number,
        estimated delivery and notes keep their previous values unless new
        ones are given.

        Raises:
            NotFoundError: No such order
            ConcurrentUpdateError: Another request updated the order first
        """
        order = OrderService.get_order(order_id, db)
        previous_status = order.status

        if status != previous_status:
            entry = {"status": status, "timestamp": to_iso(utcnow())}
            if tracking_number is not None:
                entry["tracking_number"] = tracking_number
            if estimated_delivery is not None:
                entry["estimated_delivery"] = to_iso(estimated_delivery)
            if notes is not None:
                entry["notes"] = notes
            # New list so the JSON column is flagged dirty
            order.status_history = list(order.status_history or []) + [entry]

        order.status = status
        order.tracking_number = tracking_number or order.tracking_number
        order.estimated_delivery = estimated_delivery or order.estimated_delivery
        order.notes = notes or order.notes
        order.updated_at = utcnow()

        OrderService._commit(order_id, db)
        db.refresh(order)

        logger.info(
            "Order status updated",
            extra={"order_id": order.id, "from_status": previous_status, "to_status": status}
        )

        return order

    @staticmethod
    def update_owner_order(auth: AuthContext, order_id: int, body: UpdateOwnOrderRequest, db: Session) -> Order:
        """Owner edit of delivery details and items while the order is still open."""
        order = OrderService.get_order(order_id, db)

        if order.user_id != auth.user_id:
            raise AuthorizationError("You can only update your own orders")

        if order.status in TERMINAL_STATUSES:
            raise ConflictError("Cannot edit a completed or cancelled order")

        if body.address is not None:
            order.address = body.address
        if body.phone is not None:
            order.phone = body.phone
        if body.items is not None:
            snapshots, total = OrderService._price_items(body.items, db)
            order.items = snapshots
            order.total = total
        order.updated_at = utcnow()

        OrderService._commit(order_id, db)
        db.refresh(order)

        logger.info("Order updated by owner", extra={"order_id": order.id, "user_id": auth.user_id})

        return order
