"""
Centralized application configuration
"""
import json
from decimal import Decimal
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration"""

    # API Settings
    API_TITLE: str = "DAZMerch API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Storefront API for DAZMerch: catalog, cart, checkout and back-office"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database (Supabase Postgres)
    DATABASE_URL: str = ""
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    # Secret used by Supabase Auth to sign access tokens (HS256)
    SUPABASE_JWT_SECRET: str = ""

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:5173,https://dazmerch.id" or '["http://localhost:5173"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:5173,http://localhost:8080"

    # Storefront rules
    FREE_SHIPPING_THRESHOLD: Decimal = Decimal("500000")
    FLAT_SHIPPING_COST: Decimal = Decimal("25000")
    FEATURED_PRODUCTS_LIMIT: int = 4
    LOW_STOCK_THRESHOLD: int = 5

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:5173"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
