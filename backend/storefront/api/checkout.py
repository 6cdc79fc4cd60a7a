"""
Checkout API Endpoints
Payment methods and order placement
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.core.auth import TokenUser, require_customer
from storefront.domain.order import CheckoutRequest
from storefront.domain.payment import list_payment_methods
from storefront.services.checkout_service import CheckoutError, CheckoutService

router = APIRouter()


def get_checkout_service() -> CheckoutService:
    return CheckoutService()


@router.get("/payment-methods")
async def get_payment_methods():
    """Transfer and e-wallet options with their payment instructions"""
    methods = list_payment_methods()
    return {
        "status": "success",
        "count": len(methods),
        "data": [method.model_dump() for method in methods]
    }


@router.post("/", status_code=201)
async def checkout(
    request: CheckoutRequest,
    user: TokenUser = Depends(require_customer),
    service: CheckoutService = Depends(get_checkout_service)
):
    """
    Place an order for the whole cart

    The order, its items, the stock reduction and the cart cleanup are
    written in one transaction.
    """
    try:
        result = service.checkout(user.id, request.payment_method)

        return {
            "status": "success",
            "message": f"Order placed via {result.payment_method.name}. Thank you for shopping!",
            "data": result.to_dict()
        }

    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error processing checkout: {str(e)}")
