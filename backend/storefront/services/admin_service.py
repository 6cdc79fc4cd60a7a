"""
Admin Service
Aggregates for the back-office dashboard
"""
from typing import Any, Dict, Optional

from storefront.core.config import settings
from storefront.domain.pricing import format_rupiah
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.profile_repository import ProfileRepository


class AdminService:
    """Builds the dashboard numbers from the repositories"""

    def __init__(
        self,
        product_repository: Optional[ProductRepository] = None,
        order_repository: Optional[OrderRepository] = None,
        profile_repository: Optional[ProfileRepository] = None
    ):
        self.product_repository = product_repository or ProductRepository()
        self.order_repository = order_repository or OrderRepository()
        self.profile_repository = profile_repository or ProfileRepository()

    def get_dashboard_stats(self, months: int = 6, low_stock_threshold: Optional[int] = None) -> Dict[str, Any]:
        """
        Dashboard cards and charts

        Revenue counts completed orders only. The order count covers every status.
        """
        threshold = settings.LOW_STOCK_THRESHOLD if low_stock_threshold is None else low_stock_threshold

        totals = self.order_repository.get_sales_totals()
        total_revenue = totals['total_revenue']
        low_stock = self.product_repository.find_low_stock(threshold)

        return {
            'total_revenue': float(total_revenue),
            'total_revenue_formatted': format_rupiah(total_revenue),
            'total_orders': totals['total_orders'],
            'completed_orders': totals['completed_orders'],
            'pending_orders': totals['pending_orders'],
            'total_products': self.product_repository.count_by_filters(),
            'active_products': self.product_repository.count_by_filters(is_active=True),
            'total_users': self.profile_repository.count(),
            'low_stock_threshold': threshold,
            'low_stock_products': [
                {'id': p.id, 'name': p.name, 'stock': p.stock} for p in low_stock
            ],
            'monthly_revenue': self.order_repository.get_monthly_revenue(months),
        }
