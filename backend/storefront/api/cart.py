"""
Cart API Endpoints
The signed-in customer's shopping cart. Admin accounts are refused.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from storefront.core.auth import TokenUser, get_current_user, require_customer
from storefront.domain.cart import CartItemAdd, CartItemQuantityChange
from storefront.domain.pricing import cart_count_badge
from storefront.services.cart_service import (
    CartError,
    CartItemNotFound,
    CartService,
    ProductNotFound,
)

router = APIRouter()


def get_cart_service() -> CartService:
    return CartService()


@router.get("/")
async def get_cart(
    user: TokenUser = Depends(require_customer),
    service: CartService = Depends(get_cart_service)
):
    """Cart lines (newest first) and the order summary"""
    try:
        items, summary = service.get_cart(user.id)

        return {
            "status": "success",
            "count": len(items),
            "data": [item.to_dict() for item in items],
            "summary": summary.to_dict()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching cart: {str(e)}")


@router.get("/count")
async def get_cart_count(
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    """
    Units in the cart for the navbar badge

    Admins always see 0 since they cannot shop.
    """
    try:
        count = 0 if user.is_admin else service.count(user.id)

        return {
            "status": "success",
            "data": {
                "count": count,
                "badge": cart_count_badge(count) if count > 0 else None
            }
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error counting cart items: {str(e)}")


@router.post("/items", status_code=201)
async def add_to_cart(
    request: CartItemAdd,
    user: TokenUser = Depends(require_customer),
    service: CartService = Depends(get_cart_service)
):
    """Add a product (or more units of it) to the cart"""
    try:
        item = service.add_product(user.id, request)

        return {
            "status": "success",
            "message": f"{item.product_name} ({request.quantity}) added to cart",
            "data": item.to_dict()
        }

    except ProductNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding to cart: {str(e)}")


@router.patch("/items/{item_id}")
async def change_cart_item_quantity(
    item_id: UUID,
    change: CartItemQuantityChange,
    user: TokenUser = Depends(require_customer),
    service: CartService = Depends(get_cart_service)
):
    """+/- a line. A line brought to 0 is removed (data is null)."""
    try:
        item = service.change_quantity(user.id, str(item_id), change.delta)

        return {
            "status": "success",
            "removed": item is None,
            "data": item.to_dict() if item else None
        }

    except CartItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating cart item: {str(e)}")


@router.delete("/items/{item_id}")
async def remove_cart_item(
    item_id: UUID,
    user: TokenUser = Depends(require_customer),
    service: CartService = Depends(get_cart_service)
):
    try:
        service.remove_item(user.id, str(item_id))

        return {
            "status": "success",
            "message": "Item removed from cart"
        }

    except CartItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error removing cart item: {str(e)}")
