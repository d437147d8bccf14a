"""
Seed the catalog with a starter set of produce through the admin API.

Run: python scripts/seed_products.py [password]
Requires: backend running on STOREFRONT_API_URL (default http://127.0.0.1:8000)
The admin password defaults to ADMIN_SECRET from .env.

Products whose name already exists are skipped, so the script can be re-run.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio

from client.storefront import StorefrontClient, StorefrontError
from config import settings

SEED_PRODUCTS = [
    ("Tomatoes (10 kg crate)", 18.50),
    ("Red Onions (25 kg sack)", 22.00),
    ("Potatoes (25 kg sack)", 16.75),
    ("Carrots (10 kg box)", 12.40),
    ("Bananas (13 kg box)", 19.90),
    ("Apples, Gala (18 kg case)", 34.00),
    ("Spinach (5 kg bag)", 14.25),
    ("Green Chillies (5 kg bag)", 11.60),
]


async def seed(password: str) -> int:
    created = 0
    async with StorefrontClient() as api:
        await api.login(password)
        existing = {p["name"] for p in await api.list_all_products()}

        for name, price in SEED_PRODUCTS:
            if name in existing:
                print(f"  [SKIP] {name}")
                continue
            product = await api.create_product(name, price)
            print(f"  [ADD]  #{product['id']} {name} @ {price:.2f}")
            created += 1
    return created


def main():
    password = sys.argv[1] if len(sys.argv) > 1 else settings.admin_secret
    if not password:
        print("No admin password given and ADMIN_SECRET is not set.")
        sys.exit(2)

    print(f"\n=== Seeding catalog at {settings.storefront_api_url} ===")
    try:
        created = asyncio.run(seed(password))
    except StorefrontError as e:
        print(f"  [FAIL] {e}")
        sys.exit(1)
    print(f"\nDone: {created} product(s) added")


if __name__ == "__main__":
    main()
