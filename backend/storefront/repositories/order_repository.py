"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and order_items and returns Order
domain models. Placing an order is the one multi-table write in the system
and runs in a single transaction.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple, Dict, Any

from dateutil.relativedelta import relativedelta

from storefront.domain.cart import CartItem
from storefront.domain.order import Order, OrderItem
from storefront.core.database import get_db_connection_dict

logger = logging.getLogger(__name__)

ORDER_COLUMNS = """
    o.id, o.user_id, o.total_amount, o.shipping_cost,
    o.payment_method, o.status, o.created_at
"""

ITEM_COLUMNS = "id, order_id, product_name, product_image, price, quantity"


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    """

    def place_order(
        self,
        user_id: str,
        items: List[CartItem],
        shipping_cost: Decimal,
        total_amount: Decimal,
        payment_method: str,
        status: str = "completed"
    ) -> Order:
        """
        Turn cart lines into an order, atomically.

        Steps (one transaction):
        1. Insert the order row
        2. Insert one order_items row per cart line
        3. Reduce the stock of each product (matched by name), never below 0
        4. Delete the checked-out cart lines

        Any failure rolls the whole checkout back.

        Returns:
            The created Order with its items
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO orders AS o (user_id, total_amount, shipping_cost, payment_method, status)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING {ORDER_COLUMNS}
            """, (user_id, total_amount, shipping_cost, payment_method, status))
            order_row = dict(cursor.fetchone())
            order_id = order_row['id']

            order_items = []
            for item in items:
                cursor.execute(f"""
                    INSERT INTO order_items (order_id, product_name, product_image, price, quantity)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {ITEM_COLUMNS}
                """, (order_id, item.product_name, item.product_image, item.price, item.quantity))
                order_items.append(OrderItem(**cursor.fetchone()))

            for item in items:
                cursor.execute("""
                    UPDATE products
                    SET stock = GREATEST(stock - %s, 0),
                        updated_at = NOW()
                    WHERE name = %s
                """, (item.quantity, item.product_name))

            cursor.execute("""
                DELETE FROM cart_items
                WHERE user_id = %s AND id::text = ANY(%s)
            """, (user_id, [item.id for item in items]))

            conn.commit()

            order_row['items'] = order_items
            return Order(**order_row)

        except Exception:
            conn.rollback()
            logger.exception(f"Checkout transaction rolled back for user {user_id}")
            raise
        finally:
            cursor.close()
            conn.close()

    def find_by_user(self, user_id: str, limit: int = 50, offset: int = 0) -> List[Order]:
        """A customer's order history, newest first, with unit counts"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT
                    {ORDER_COLUMNS},
                    COALESCE(SUM(oi.quantity), 0) as item_count
                FROM orders o
                LEFT JOIN order_items oi ON oi.order_id = o.id
                WHERE o.user_id = %s
                GROUP BY o.id
                ORDER BY o.created_at DESC
                LIMIT %s OFFSET %s
            """, (user_id, limit, offset))

            return [Order(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_for_user(self, order_id: str, user_id: str) -> Optional[Order]:
        """
        Order detail with items, only if the order belongs to user_id

        Returns:
            Order or None if missing or owned by someone else
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders o
                WHERE o.id = %s AND o.user_id = %s
            """, (order_id, user_id))

            row = cursor.fetchone()
            if not row:
                return None

            cursor.execute(f"""
                SELECT {ITEM_COLUMNS}
                FROM order_items
                WHERE order_id = %s
                ORDER BY product_name
            """, (order_id,))

            order_dict = dict(row)
            order_dict['items'] = [OrderItem(**item) for item in cursor.fetchall()]
            return Order(**order_dict)

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        status: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        All orders for the back-office, newest first

        Customer names come from profiles in the same query (no N+1).

        Returns:
            Tuple of (list of orders, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params: List[Any] = []

            if status:
                conditions.append("o.status = %s")
                params.append(status)

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM orders o
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT
                    {ORDER_COLUMNS},
                    p.full_name as customer_name
                FROM orders o
                LEFT JOIN profiles p ON p.user_id = o.user_id
                WHERE {where_clause}
                ORDER BY o.created_at DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            return [Order(**row) for row in cursor.fetchall()], total

        finally:
            cursor.close()
            conn.close()

    def update_status(self, order_id: str, status: str) -> Optional[Order]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE orders o
                SET status = %s
                WHERE o.id = %s
                RETURNING {ORDER_COLUMNS}
            """, (status, order_id))

            row = cursor.fetchone()
            conn.commit()
            return Order(**row) if row else None

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def get_sales_totals(self) -> Dict[str, Any]:
        """
        Revenue and order counts

        Revenue only counts completed orders.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COUNT(*) as total_orders,
                    COALESCE(SUM(total_amount) FILTER (WHERE status = 'completed'), 0) as total_revenue,
                    COUNT(*) FILTER (WHERE status = 'completed') as completed_orders,
                    COUNT(*) FILTER (WHERE status = 'pending') as pending_orders
                FROM orders
            """)
            return dict(cursor.fetchone())

        finally:
            cursor.close()
            conn.close()

    def get_monthly_revenue(self, months: int = 6) -> List[Dict[str, Any]]:
        """
        Completed-order revenue per month for the last N months (current month included)

        Months without orders are returned with zero revenue.
        """
        start = (datetime.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
                 - relativedelta(months=months - 1))

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    DATE_TRUNC('month', created_at) as month,
                    COALESCE(SUM(total_amount), 0) as revenue,
                    COUNT(*) as orders
                FROM orders
                WHERE status = 'completed' AND created_at >= %s
                GROUP BY DATE_TRUNC('month', created_at)
                ORDER BY month
            """, (start,))

            by_month = {
                row['month'].strftime('%Y-%m'): row
                for row in cursor.fetchall()
            }

            series = []
            for offset in range(months):
                key = (start + relativedelta(months=offset)).strftime('%Y-%m')
                row = by_month.get(key)
                series.append({
                    'month': key,
                    'revenue': float(row['revenue']) if row else 0.0,
                    'orders': int(row['orders']) if row else 0,
                })
            return series

        finally:
            cursor.close()
            conn.close()
