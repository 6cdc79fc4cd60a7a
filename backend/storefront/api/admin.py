"""
Admin API - Back-office endpoints
Catalog management, users, orders and dashboard statistics

Every endpoint requires the admin role.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.core.auth import TokenUser, require_admin
from storefront.domain.order import ORDER_STATUSES, OrderStatusUpdate
from storefront.domain.product import ProductCreate, ProductUpdate
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.profile_repository import ProfileRepository
from storefront.services.admin_service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


# ============================================================================
# Dashboard
# ============================================================================

@router.get("/stats")
async def get_dashboard_stats(
    months: int = Query(6, ge=1, le=24, description="Months of revenue history"),
    low_stock_threshold: Optional[int] = Query(None, ge=0)
):
    """
    Dashboard statistics

    Returns:
    - Total revenue (completed orders only) and order counts
    - Product and user counts
    - Low-stock products
    - Revenue per month
    """
    try:
        stats = AdminService().get_dashboard_stats(
            months=months,
            low_stock_threshold=low_stock_threshold
        )

        return {
            "status": "success",
            "data": stats
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching stats: {str(e)}")


# ============================================================================
# Products
# ============================================================================

@router.get("/products")
async def list_all_products(
    search: Optional[str] = Query(None, description="Search by product name"),
    is_active: Optional[bool] = Query(None, description="Filter by active status"),
    limit: int = Query(200, ge=1, le=1000),
    offset: int = Query(0, ge=0)
):
    """Every product, active or not, newest first"""
    try:
        products, total = ProductRepository().find_all(
            is_active=is_active,
            search=search.strip() if search else None,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.post("/products", status_code=201)
async def create_product(
    product: ProductCreate,
    admin: TokenUser = Depends(require_admin)
):
    """Add a product (name, price and category are required)"""
    try:
        created = ProductRepository().create(product)
        logger.info(f"Admin {admin.id} created product {created.id}")

        return {
            "status": "success",
            "message": "Product created",
            "data": created.to_dict()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")


@router.put("/products/{product_id}")
async def update_product(
    product_id: UUID,
    update: ProductUpdate,
    admin: TokenUser = Depends(require_admin)
):
    """Partial update; only the fields sent are changed"""
    try:
        updated = ProductRepository().update(str(product_id), update)

        if not updated:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

        logger.info(f"Admin {admin.id} updated product {product_id}")

        return {
            "status": "success",
            "message": "Product updated",
            "data": updated.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: UUID,
    admin: TokenUser = Depends(require_admin)
):
    try:
        if not ProductRepository().delete(str(product_id)):
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

        logger.info(f"Admin {admin.id} deleted product {product_id}")

        return {
            "status": "success",
            "message": "Product deleted"
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")


# ============================================================================
# Users
# ============================================================================

@router.get("/users")
async def list_users(
    search: Optional[str] = Query(None, description="Search by name or phone")
):
    """Registered users (profiles) with their role, newest first"""
    try:
        profiles = ProfileRepository().find_all_with_roles(search=search.strip() if search else None)

        return {
            "status": "success",
            "count": len(profiles),
            "data": [profile.to_dict() for profile in profiles]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching users: {str(e)}")


# ============================================================================
# Orders
# ============================================================================

@router.get("/orders")
async def list_all_orders(
    status: Optional[str] = Query(None, description="Filter by order status"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0)
):
    """All orders, newest first, with the customer's name"""
    if status and status not in ORDER_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status '{status}'. Use one of: {', '.join(ORDER_STATUSES)}"
        )

    try:
        orders, total = OrderRepository().find_all(status=status, limit=limit, offset=offset)

        return {
            "status": "success",
            "total": total,
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.put("/orders/{order_id}/status")
async def update_order_status(
    order_id: UUID,
    update: OrderStatusUpdate,
    admin: TokenUser = Depends(require_admin)
):
    try:
        order = OrderRepository().update_status(str(order_id), update.status)

        if not order:
            raise HTTPException(status_code=404, detail="Order not found")

        logger.info(f"Admin {admin.id} set order {order_id} status to {update.status}")

        return {
            "status": "success",
            "message": "Order status updated",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")
