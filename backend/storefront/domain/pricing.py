"""
Pricing rules shared by the catalog, cart and checkout

All amounts are Indonesian Rupiah and carry no minor unit.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from storefront.core.config import settings

Amount = Union[Decimal, int, float, str]


def to_decimal(amount: Optional[Amount]) -> Decimal:
    """Coerce DB numerics, floats and strings to Decimal (None -> 0)"""
    if amount is None:
        return Decimal("0")
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def discount_percent(price: Amount, original_price: Optional[Amount]) -> int:
    """
    Percentage saved against the original price, rounded half up.

    Returns 0 when there is no (positive) original price or the product
    sells above it.
    """
    original = to_decimal(original_price)
    if original <= 0:
        return 0
    pct = (original - to_decimal(price)) / original * 100
    return max(0, int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def shipping_cost(subtotal: Amount) -> Decimal:
    """Flat shipping, free once the subtotal is strictly above the threshold"""
    if to_decimal(subtotal) > settings.FREE_SHIPPING_THRESHOLD:
        return Decimal("0")
    return settings.FLAT_SHIPPING_COST


def free_shipping_remaining(subtotal: Amount) -> Decimal:
    """How much more the customer has to add to get free shipping"""
    subtotal = to_decimal(subtotal)
    if subtotal < settings.FREE_SHIPPING_THRESHOLD:
        return settings.FREE_SHIPPING_THRESHOLD - subtotal
    return Decimal("0")


def format_rupiah(amount: Optional[Amount]) -> str:
    """
    Format an amount as Rupiah the way the storefront displays it.

    Examples:
        format_rupiah(1500000)   -> "Rp 1.500.000"
        format_rupiah(24999.5)   -> "Rp 25.000"
        format_rupiah(-25000)    -> "-Rp 25.000"
    """
    value = to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(int(value)):,}".replace(",", ".")
    return f"{sign}Rp {grouped}"


def cart_count_badge(count: int) -> str:
    """Navbar badge text"""
    return "99+" if count > 99 else str(count)
