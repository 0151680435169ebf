from sqlalchemy.orm import Session, joinedload
from core.exceptions import NotFoundError
from models.cart_items import CartItem
from schemas.catalog_schemas import CartItemRequest
from services.catalog_service import CatalogService


class CartService:
    """
    Anonymous carts. A cart is just the set of lines sharing a client-chosen
    ``cart_id``; there is no cart row.
    """

    @staticmethod
    def get_cart(cart_id: str, db: Session) -> list[CartItem]:
        return (
            db.query(CartItem)
            .options(joinedload(CartItem.product))
            .filter(CartItem.cart_id == cart_id)
            .order_by(CartItem.id)
            .all()
        )

    @staticmethod
    def add_item(body: CartItemRequest, db: Session) -> tuple[CartItem, bool]:
        """
        Adds a product to a cart, merging with an existing line for the same
        product.

        Returns:
            (item, created)
        """
        CatalogService.get_product(body.product_id, db)

        item = db.query(CartItem).filter(
            CartItem.cart_id == body.cart_id,
            CartItem.product_id == body.product_id
        ).first()

        created = item is None
        if created:
            item = CartItem(cart_id=body.cart_id, product_id=body.product_id, quantity=body.quantity)
            db.add(item)
        else:
            item.quantity += body.quantity

        db.commit()
        db.refresh(item)
        return item, created

    @staticmethod
    def _get_item(item_id: int, db: Session) -> CartItem:
        item = db.query(CartItem).filter(CartItem.id == item_id).one_or_none()
        if not item:
            raise NotFoundError("Cart item not found")
        return item

    @staticmethod
    def update_quantity(item_id: int, quantity: int, db: Session) -> CartItem:
        item = CartService._get_item(item_id, db)
        item.quantity = quantity
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def remove_item(item_id: int, db: Session):
        item = CartService._get_item(item_id, db)
        db.delete(item)
        db.commit()

    @staticmethod
    def clear_cart(cart_id: str, db: Session):
        db.query(CartItem).filter(CartItem.cart_id == cart_id).delete(synchronize_session=False)
        db.commit()
