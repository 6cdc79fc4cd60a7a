"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.
"""
import logging
from typing import List, Optional, Tuple

from storefront.domain.product import CategoryCount, Product, ProductCreate, ProductUpdate
from storefront.core.database import get_db_connection_dict

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = """
    id, name, description, price, original_price, image, category,
    stock, is_active, is_new, rating, reviews_count, created_at, updated_at
"""

# Columns an admin may write
WRITABLE_COLUMNS = (
    'name', 'description', 'price', 'original_price', 'image',
    'category', 'stock', 'is_active', 'is_new',
)


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        return Product(**row)

    def find_by_id(self, product_id: str, active_only: bool = False) -> Optional[Product]:
        """
        Find product by id

        Args:
            product_id: Product uuid
            active_only: Hide inactive products (storefront view)

        Returns:
            Product or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            query = f"SELECT {PRODUCT_COLUMNS} FROM products WHERE id = %s"
            if active_only:
                query += " AND is_active = true"
            cursor.execute(query, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_by_name(self, name: str) -> Optional[Product]:
        """Find product by exact name (cart lines reference products by name)"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE name = %s
                LIMIT 1
            """, (name,))

            row = cursor.fetchone()
            return self._map_row_to_product(row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters, newest first

        Args:
            category: Filter by category
            is_active: Filter by active status (None = all)
            search: Case-insensitive search in name
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if category:
                conditions.append("category = %s")
                params.append(category)

            if is_active is not None:
                conditions.append("is_active = %s")
                params.append(is_active)

            if search:
                conditions.append("name ILIKE %s")
                params.append(f"%{search}%")

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM products
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE {where_clause}
                ORDER BY created_at DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            rows = cursor.fetchall()
            products = [self._map_row_to_product(row) for row in rows]

            return products, total

        finally:
            cursor.close()
            conn.close()

    def find_featured(self, limit: int = 4) -> List[Product]:
        """Active products for the home page, NEW ones first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE is_active = true
                ORDER BY is_new DESC, created_at DESC
                LIMIT %s
            """, (limit,))

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def get_categories(self) -> List[CategoryCount]:
        """Categories with their number of active products"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT category, COUNT(*) as count
                FROM products
                WHERE is_active = true
                GROUP BY category
                ORDER BY count DESC, category
            """)

            return [CategoryCount(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_low_stock(self, threshold: int) -> List[Product]:
        """Active products with stock at or below the threshold"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE is_active = true AND stock <= %s
                ORDER BY stock ASC, name
            """, (threshold,))

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def count_by_filters(self, is_active: Optional[bool] = None) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            if is_active is None:
                cursor.execute("SELECT COUNT(*) as total FROM products")
            else:
                cursor.execute(
                    "SELECT COUNT(*) as total FROM products WHERE is_active = %s",
                    (is_active,)
                )

            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    def create(self, data: ProductCreate) -> Product:
        """Insert a product and return the stored row"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            values = data.model_dump()
            columns = [col for col in WRITABLE_COLUMNS if col in values]

            cursor.execute(f"""
                INSERT INTO products ({', '.join(columns)})
                VALUES ({', '.join(['%s'] * len(columns))})
                RETURNING {PRODUCT_COLUMNS}
            """, [values[col] for col in columns])

            row = cursor.fetchone()
            conn.commit()
            logger.info(f"Product created: {row['id']} ({row['name']})")
            return self._map_row_to_product(row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def update(self, product_id: str, data: ProductUpdate) -> Optional[Product]:
        """
        Partially update a product

        Only fields present in the request body are written.

        Returns:
            Updated Product or None if not found
        """
        changes = {
            key: value for key, value in data.model_dump(exclude_unset=True).items()
            if key in WRITABLE_COLUMNS
        }
        if not changes:
            return self.find_by_id(product_id)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            assignments = ", ".join(f"{col} = %s" for col in changes)

            cursor.execute(f"""
                UPDATE products
                SET {assignments}, updated_at = NOW()
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
            """, list(changes.values()) + [product_id])

            row = cursor.fetchone()
            if not row:
                conn.rollback()
                return None

            conn.commit()
            logger.info(f"Product updated: {product_id} fields={sorted(changes)}")
            return self._map_row_to_product(row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete(self, product_id: str) -> bool:
        """Delete a product. Returns False when it did not exist."""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM products WHERE id = %s RETURNING id", (product_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            if deleted:
                logger.info(f"Product deleted: {product_id}")
            return deleted

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
