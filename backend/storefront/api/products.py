"""
Products API Endpoints
Public catalog (home page, listing, detail) and product reviews
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.core.auth import TokenUser, get_current_user
from storefront.core.config import settings
from storefront.domain.review import ReviewCreate
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.review_repository import ReviewRepository

logger = logging.getLogger(__name__)

router = APIRouter()

# Category value the storefront sends for "All Products"
ALL_CATEGORIES = "all"


@router.get("/")
async def get_products(
    category: Optional[str] = Query(None, description="Filter by category ('all' for no filter)"),
    search: Optional[str] = Query(None, description="Search by product name"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0)
):
    """
    Active products, newest first, with optional category and name search
    """
    try:
        repo = ProductRepository()

        products, total = repo.find_all(
            category=None if category in (None, "", ALL_CATEGORIES) else category,
            is_active=True,
            search=search.strip() if search else None,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/featured")
async def get_featured_products(
    limit: Optional[int] = Query(None, ge=1, le=24, description="Defaults to FEATURED_PRODUCTS_LIMIT")
):
    """Home page picks: NEW products first, then newest"""
    try:
        products = ProductRepository().find_featured(limit or settings.FEATURED_PRODUCTS_LIMIT)

        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching featured products: {str(e)}")


@router.get("/categories")
async def get_categories():
    """Categories with the number of active products in each"""
    try:
        categories = ProductRepository().get_categories()

        return {
            "status": "success",
            "count": len(categories),
            "data": [category.model_dump() for category in categories]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching categories: {str(e)}")


@router.get("/{product_id}")
async def get_product(product_id: UUID):
    """
    Product detail

    Inactive products are hidden from the storefront.
    """
    try:
        product = ProductRepository().find_by_id(str(product_id), active_only=True)

        if not product:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


# ============================================================================
# Reviews
# ============================================================================

@router.get("/{product_id}/reviews")
async def get_product_reviews(
    product_id: UUID,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0)
):
    """Reviews of a product, newest first, with the rating summary"""
    try:
        repo = ReviewRepository()
        reviews = repo.find_by_product(str(product_id), limit=limit, offset=offset)
        summary = repo.get_rating_summary(str(product_id))

        return {
            "status": "success",
            "summary": summary.model_dump(),
            "count": len(reviews),
            "data": [review.to_dict() for review in reviews]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching reviews: {str(e)}")


@router.post("/{product_id}/reviews", status_code=201)
async def create_product_review(
    product_id: UUID,
    review: ReviewCreate,
    user: TokenUser = Depends(get_current_user)
):
    """Leave a review (1-5 stars, optional comment) on an active product"""
    try:
        product = ProductRepository().find_by_id(str(product_id), active_only=True)
        if not product:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

        created = ReviewRepository().create(
            product_id=product.id,
            user_id=user.id,
            rating=review.rating,
            comment=review.comment
        )
        logger.info(f"Review {created.id} on {product.id} by {user.id} ({review.rating}*)")

        return {
            "status": "success",
            "message": "Review added",
            "data": created.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating review: {str(e)}")


@router.delete("/{product_id}/reviews/{review_id}")
async def delete_product_review(
    product_id: UUID,
    review_id: UUID,
    user: TokenUser = Depends(get_current_user)
):
    """Authors delete their own reviews; admins delete any"""
    try:
        repo = ReviewRepository()
        review = repo.find_by_id(str(review_id))

        if not review or review.product_id != str(product_id):
            raise HTTPException(status_code=404, detail=f"Review {review_id} not found")

        if review.user_id != user.id and not user.is_admin:
            raise HTTPException(status_code=403, detail="You can only delete your own reviews")

        repo.delete(review.id, review.product_id)

        return {
            "status": "success",
            "message": "Review deleted"
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting review: {str(e)}")
