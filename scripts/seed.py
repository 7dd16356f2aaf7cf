"""Seed the storefront with a starter catalogue and a bootstrap administrator.

The administrator is created from STOREFRONT_ADMIN_EMAIL and
STOREFRONT_ADMIN_PASSWORD when both are set, or from --admin-email and
--admin-password. An existing account with that email is promoted instead.

Usage:
    # Against PostgreSQL (schema is created first)
    PROTEAN_ENV=production DATABASE_URL=postgresql://... python scripts/seed.py --setup-db

    # Catalogue only
    python scripts/seed.py --skip-admin
"""

import argparse
import sys

# Add src/ to path so we can import domain modules
sys.path.insert(0, "src")

PRODUCTS = [
    {
        "name": "iPhone 15 Pro",
        "description": "Latest Apple iPhone with A17 Pro chip, 48MP camera, and titanium design.",
        "price": 999.99,
        "category": "Electronics",
        "stock": 50,
    },
    {
        "name": "Samsung Galaxy S24 Ultra",
        "description": "Flagship Android phone with Snapdragon 8 Gen 3, 200MP camera, and S Pen.",
        "price": 1199.99,
        "category": "Electronics",
        "stock": 45,
        "sale_percentage": 10,
    },
    {
        "name": "Premium Cotton T-Shirt",
        "description": "Soft, breathable 100% organic cotton t-shirt in various colors.",
        "price": 24.99,
        "category": "Clothing",
        "stock": 100,
    },
    {
        "name": "Winter Parka Jacket",
        "description": "Warm, waterproof jacket with faux fur hood and multiple pockets.",
        "price": 149.99,
        "category": "Clothing",
        "stock": 40,
        "sale_percentage": 25,
    },
    {
        "name": "Smart Coffee Maker",
        "description": "Wi-Fi enabled coffee maker with programmable brewing and app control.",
        "price": 129.99,
        "category": "Home & Kitchen",
        "stock": 25,
    },
    {
        "name": "Atomic Habits",
        "description": "James Clear's guide to building good habits and breaking bad ones.",
        "price": 16.99,
        "category": "Books",
        "stock": 60,
    },
]


def seed_admin(email, password):
    from protean.utils.globals import current_domain

    from storefront.user.promotion import PromoteToAdmin
    from storefront.user.registration import RegisterUser
    from storefront.user.user import User

    existing = current_domain.repository_for(User).find_by_email(email)
    if existing is None:
        user_id = current_domain.process(
            RegisterUser(name="Admin User", email=email, password=password),
            asynchronous=False,
        )
    else:
        user_id = str(existing.id)

    current_domain.process(PromoteToAdmin(user_id=user_id), asynchronous=False)
    return user_id


def seed_products():
    from protean.utils.globals import current_domain

    from storefront.product.management import CreateProduct
    from storefront.product.sales import ApplySale

    created = []
    for data in PRODUCTS:
        sale_percentage = data.get("sale_percentage")
        product_id = current_domain.process(
            CreateProduct(**{k: v for k, v in data.items() if k != "sale_percentage"}),
            asynchronous=False,
        )
        if sale_percentage:
            current_domain.process(
                ApplySale(product_id=product_id, sale_percentage=sale_percentage),
                asynchronous=False,
            )
        created.append(product_id)
    return created


def main():
    parser = argparse.ArgumentParser(description="Seed the storefront catalogue and administrator")
    parser.add_argument("--setup-db", action="store_true", help="Create SQL tables before seeding")
    parser.add_argument("--skip-admin", action="store_true", help="Do not create the bootstrap administrator")
    parser.add_argument("--admin-email", help="Administrator email (overrides STOREFRONT_ADMIN_EMAIL)")
    parser.add_argument("--admin-password", help="Administrator password (overrides STOREFRONT_ADMIN_PASSWORD)")
    args = parser.parse_args()

    from storefront.config import get_settings
    from storefront.domain import logger, storefront
    from storefront.utils.db import setup_db

    storefront.init()
    if args.setup_db:
        setup_db(storefront)

    settings = get_settings()
    admin_email = args.admin_email or settings.admin_email
    admin_password = args.admin_password or settings.admin_password

    with storefront.domain_context():
        product_ids = seed_products()
        print(f"  Seeded {len(product_ids)} products")

        if not args.skip_admin:
            if admin_email and admin_password:
                seed_admin(admin_email, admin_password)
                print(f"  Administrator ready: {admin_email}")
            else:
                logger.warning("admin_not_seeded", reason="no administrator credentials configured")
                print("  No administrator credentials configured; skipping")


if __name__ == "__main__":
    main()
