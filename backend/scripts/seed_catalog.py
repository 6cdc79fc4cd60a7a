"""
Seed the products table with the DAZMerch demo catalog

Products that already exist (same name) are left untouched, so the script
can be re-run safely.

Usage:
    python3 scripts/seed_catalog.py [--dry-run]
"""
import os
import sys
from decimal import Decimal

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from storefront.domain.pricing import format_rupiah
from storefront.domain.product import ProductCreate
from storefront.repositories.product_repository import ProductRepository

# Storefront prices were set in USD and shown at 15.000 IDR per dollar
USD_TO_IDR = Decimal("15000")

DEMO_PRODUCTS = [
    {"name": "Premium Leather Case", "usd": "49.99", "usd_original": "79.99", "category": "cases",
     "image": "https://images.unsplash.com/photo-1601593346740-925612772716?w=500", "is_new": True},
    {"name": "Wireless Earbuds Pro", "usd": "129.99", "category": "audio",
     "image": "https://images.unsplash.com/photo-1590658268037-6bf12165a8df?w=500"},
    {"name": "Fast Charging Cable 2M", "usd": "24.99", "usd_original": "34.99", "category": "cables",
     "image": "https://images.unsplash.com/photo-1583394838336-acd977736f90?w=500"},
    {"name": "Tempered Glass Shield", "usd": "19.99", "category": "protection",
     "image": "https://images.unsplash.com/photo-1601784551446-20c9e07cdbdb?w=500", "is_new": True},
    {"name": "Magnetic Car Mount", "usd": "34.99", "category": "accessories",
     "image": "https://images.unsplash.com/photo-1586953208448-b95a79798f07?w=500"},
    {"name": "Power Bank 20000mAh", "usd": "59.99", "usd_original": "89.99", "category": "power",
     "image": "https://images.unsplash.com/photo-1609091839311-d5365f9ff1c5?w=500"},
    {"name": "Silicone Case Pack", "usd": "29.99", "category": "cases",
     "image": "https://images.unsplash.com/photo-1592899677977-9c10ca588bbd?w=500"},
    {"name": "Bluetooth Speaker Mini", "usd": "79.99", "category": "audio",
     "image": "https://images.unsplash.com/photo-1608043152269-423dbba4e7e1?w=500", "is_new": True},
]

DEFAULT_STOCK = 50


def to_product(entry: dict) -> ProductCreate:
    original = entry.get("usd_original")
    return ProductCreate(
        name=entry["name"],
        price=Decimal(entry["usd"]) * USD_TO_IDR,
        original_price=Decimal(original) * USD_TO_IDR if original else None,
        image=entry["image"],
        category=entry["category"],
        stock=DEFAULT_STOCK,
        is_new=entry.get("is_new", False),
    )


def seed_catalog(dry_run: bool = False):
    repo = ProductRepository()
    created = 0

    for entry in DEMO_PRODUCTS:
        product = to_product(entry)

        if repo.find_by_name(product.name):
            print(f"⏭️  {product.name} already exists, skipping")
            continue

        print(f"{'[DRY RUN] ' if dry_run else ''}Creating {product.name} "
              f"({product.category}) at {format_rupiah(product.price)}")

        if not dry_run:
            repo.create(product)
            created += 1

    if dry_run:
        print("\n✅ Dry run complete, no changes made")
    else:
        print(f"\n✅ Created {created} products")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Seed the demo product catalog')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be created')
    args = parser.parse_args()

    print("=" * 80)
    print("SEED CATALOG")
    print("=" * 80)

    seed_catalog(dry_run=args.dry_run)
