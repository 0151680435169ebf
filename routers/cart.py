from fastapi import APIRouter, Response
from starlette import status
from schemas.catalog_schemas import (CartItemRequest, CartQuantityRequest, CartItemResponse,
                                     CartItemWithProductResponse)
from services.cart_service import CartService
from utils.deps import db_dependency


router = APIRouter(
    prefix="/api/cart",
    tags=["cart"]
)


@router.get("/{cart_id}", response_model=list[CartItemWithProductResponse])
def get_cart(cart_id: str, db: db_dependency):
    return CartService.get_cart(cart_id, db)


@router.post("", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
def add_to_cart(body: CartItemRequest, response: Response, db: db_dependency):
    """
    Adds a product to the cart. Adding a product already in the cart bumps
    its quantity and answers 200 instead of 201.
    """
    item, created = CartService.add_item(body, db)
    if not created:
        response.status_code = status.HTTP_200_OK
    return item


@router.put("/{item_id}", response_model=CartItemResponse)
def update_cart_item(item_id: int, body: CartQuantityRequest, db: db_dependency):
    return CartService.update_quantity(item_id, body.quantity, db)


@router.delete("/clear/{cart_id}", status_code=status.HTTP_204_NO_CONTENT)
def clear_cart(cart_id: str, db: db_dependency):
    CartService.clear_cart(cart_id, db)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_cart_item(item_id: int, db: db_dependency):
    CartService.remove_item(item_id, db)
