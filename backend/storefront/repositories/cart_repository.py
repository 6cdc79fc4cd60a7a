"""
Cart Repository - Data Access Layer for cart_items

Every query is scoped by user_id so one customer can never read or change
another customer's cart.
"""
from typing import List, Optional
from decimal import Decimal

from storefront.domain.cart import CartItem
from storefront.core.database import get_db_connection_dict

CART_COLUMNS = """
    id, user_id, product_name, product_image, price, quantity, size, color, created_at
"""


class CartRepository:
    """Repository for CartItem data access"""

    def find_by_user(self, user_id: str) -> List[CartItem]:
        """All cart lines of a user, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CART_COLUMNS}
                FROM cart_items
                WHERE user_id = %s
                ORDER BY created_at DESC
            """, (user_id,))

            return [CartItem(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_item(self, user_id: str, item_id: str) -> Optional[CartItem]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CART_COLUMNS}
                FROM cart_items
                WHERE id = %s AND user_id = %s
            """, (item_id, user_id))

            row = cursor.fetchone()
            return CartItem(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_by_product_name(self, user_id: str, product_name: str) -> Optional[CartItem]:
        """The line holding this product, if the user already has one"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CART_COLUMNS}
                FROM cart_items
                WHERE user_id = %s AND product_name = %s
                LIMIT 1
            """, (user_id, product_name))

            row = cursor.fetchone()
            return CartItem(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def add(
        self,
        user_id: str,
        product_name: str,
        product_image: Optional[str],
        price: Decimal,
        quantity: int,
        size: Optional[str] = None,
        color: Optional[str] = None
    ) -> CartItem:
        """Insert a new cart line"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO cart_items (
                    user_id, product_name, product_image, price, quantity, size, color
                ) VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING {CART_COLUMNS}
            """, (user_id, product_name, product_image, price, quantity, size, color))

            row = cursor.fetchone()
            conn.commit()
            return CartItem(**row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def set_quantity(self, user_id: str, item_id: str, quantity: int) -> Optional[CartItem]:
        """Overwrite a line's quantity. Returns None when the line is not the user's."""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE cart_items
                SET quantity = %s
                WHERE id = %s AND user_id = %s
                RETURNING {CART_COLUMNS}
            """, (quantity, item_id, user_id))

            row = cursor.fetchone()
            conn.commit()
            return CartItem(**row) if row else None

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def remove(self, user_id: str, item_id: str) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM cart_items
                WHERE id = %s AND user_id = %s
                RETURNING id
            """, (item_id, user_id))

            removed = cursor.fetchone() is not None
            conn.commit()
            return removed

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def count_quantity(self, user_id: str) -> int:
        """Sum of quantities across the user's cart (navbar badge)"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT COALESCE(SUM(quantity), 0) as total
                FROM cart_items
                WHERE user_id = %s
            """, (user_id,))

            return int(cursor.fetchone()['total'])

        finally:
            cursor.close()
            conn.close()
