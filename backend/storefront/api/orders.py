"""
Orders API Endpoints
A customer's own order history and order detail
"""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.core.auth import TokenUser, get_current_user
from storefront.repositories.order_repository import OrderRepository

router = APIRouter()


@router.get("/")
async def get_my_orders(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: TokenUser = Depends(get_current_user)
):
    """Orders placed by the caller, newest first"""
    try:
        orders = OrderRepository().find_by_user(user.id, limit=limit, offset=offset)

        return {
            "status": "success",
            "count": len(orders),
            "limit": limit,
            "offset": offset,
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/{order_id}")
async def get_my_order(
    order_id: UUID,
    user: TokenUser = Depends(get_current_user)
):
    """
    Order detail with its lines

    Orders of other customers are reported as not found.
    """
    try:
        order = OrderRepository().find_for_user(str(order_id), user.id)

        if not order:
            raise HTTPException(status_code=404, detail="Order not found")

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")
