"""
Profile Repository - Data Access Layer for profiles and user_roles
"""
from typing import List, Optional

from storefront.domain.profile import Profile, ProfileUpdate, ROLE_ADMIN, ROLE_USER
from storefront.core.database import get_db_connection_dict

PROFILE_COLUMNS = "p.id, p.user_id, p.full_name, p.phone, p.address, p.created_at"


class ProfileRepository:
    """Repository for Profile and UserRole data access"""

    def find_by_user_id(self, user_id: str) -> Optional[Profile]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PROFILE_COLUMNS}
                FROM profiles p
                WHERE p.user_id = %s
            """, (user_id,))

            row = cursor.fetchone()
            return Profile(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def upsert(self, user_id: str, data: ProfileUpdate) -> Profile:
        """
        Write the provided profile fields, creating the row when missing

        Fields not present in the request keep their stored value.
        """
        changes = data.model_dump(exclude_unset=True)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            columns = ['user_id'] + list(changes)
            values = [user_id] + list(changes.values())

            if changes:
                on_conflict = "DO UPDATE SET " + ", ".join(
                    f"{col} = EXCLUDED.{col}" for col in changes
                )
            else:
                # No-op update so RETURNING yields the existing row
                on_conflict = "DO UPDATE SET user_id = EXCLUDED.user_id"

            cursor.execute(f"""
                INSERT INTO profiles AS p ({', '.join(columns)})
                VALUES ({', '.join(['%s'] * len(columns))})
                ON CONFLICT (user_id) {on_conflict}
                RETURNING {PROFILE_COLUMNS}
            """, values)

            row = cursor.fetchone()
            conn.commit()
            return Profile(**row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def find_all_with_roles(self, search: Optional[str] = None) -> List[Profile]:
        """Every profile with its role, newest first (admin user list)"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if search:
                conditions.append("(p.full_name ILIKE %s OR p.phone ILIKE %s)")
                params.extend([f"%{search}%", f"%{search}%"])

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT
                    {PROFILE_COLUMNS},
                    CASE WHEN ur.user_id IS NULL THEN %s ELSE %s END as role
                FROM profiles p
                LEFT JOIN user_roles ur ON ur.user_id = p.user_id AND ur.role = %s
                WHERE {where_clause}
                ORDER BY p.created_at DESC
            """, [ROLE_USER, ROLE_ADMIN, ROLE_ADMIN] + params)

            return [Profile(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def count(self) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) as total FROM profiles")
            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    def get_role(self, user_id: str) -> str:
        """admin when user_roles has an admin row for the user, otherwise user"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT role
                FROM user_roles
                WHERE user_id = %s AND role = %s
                LIMIT 1
            """, (user_id, ROLE_ADMIN))

            return ROLE_ADMIN if cursor.fetchone() else ROLE_USER

        finally:
            cursor.close()
            conn.close()
