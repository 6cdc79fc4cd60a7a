"""
Review Repository - Data Access Layer for product reviews

The products table caches rating and reviews_count; every write here
refreshes that cache in the same transaction.
"""
from typing import List, Optional

from storefront.domain.review import RatingSummary, Review
from storefront.core.database import get_db_connection_dict

REVIEW_COLUMNS = "r.id, r.product_id, r.user_id, r.rating, r.comment, r.created_at"

REFRESH_PRODUCT_RATING = """
    UPDATE products
    SET rating = agg.rating,
        reviews_count = agg.reviews_count,
        updated_at = NOW()
    FROM (
        SELECT
            ROUND(AVG(rating)::numeric, 1) as rating,
            COUNT(*) as reviews_count
        FROM reviews
        WHERE product_id = %s
    ) agg
    WHERE products.id = %s
"""


class ReviewRepository:
    """Repository for Review data access"""

    def find_by_product(self, product_id: str, limit: int = 50, offset: int = 0) -> List[Review]:
        """Reviews of a product, newest first, with the reviewer's name"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {REVIEW_COLUMNS}, p.full_name as reviewer_name
                FROM reviews r
                LEFT JOIN profiles p ON p.user_id = r.user_id
                WHERE r.product_id = %s
                ORDER BY r.created_at DESC
                LIMIT %s OFFSET %s
            """, (product_id, limit, offset))

            return [Review(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, review_id: str) -> Optional[Review]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {REVIEW_COLUMNS}
                FROM reviews r
                WHERE r.id = %s
            """, (review_id,))

            row = cursor.fetchone()
            return Review(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, product_id: str, user_id: str, rating: int, comment: Optional[str]) -> Review:
        """Insert a review and refresh the product's rating cache"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO reviews AS r (product_id, user_id, rating, comment)
                VALUES (%s, %s, %s, %s)
                RETURNING {REVIEW_COLUMNS}
            """, (product_id, user_id, rating, comment))
            row = cursor.fetchone()

            cursor.execute(REFRESH_PRODUCT_RATING, (product_id, product_id))
            conn.commit()
            return Review(**row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete(self, review_id: str, product_id: str) -> bool:
        """Delete a review and refresh the product's rating cache"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM reviews WHERE id = %s RETURNING id", (review_id,))
            deleted = cursor.fetchone() is not None

            if deleted:
                cursor.execute(REFRESH_PRODUCT_RATING, (product_id, product_id))

            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def get_rating_summary(self, product_id: str) -> RatingSummary:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    ROUND(AVG(rating)::numeric, 1) as rating,
                    COUNT(*) as reviews_count
                FROM reviews
                WHERE product_id = %s
            """, (product_id,))

            row = cursor.fetchone()
            return RatingSummary(
                product_id=product_id,
                rating=float(row['rating']) if row['rating'] is not None else None,
                reviews_count=row['reviews_count'],
            )

        finally:
            cursor.close()
            conn.close()
