# scripts/seed_data.py
import asyncio
import logging
from decimal import Decimal

from qrdine.core.db import init_db, close_db
from qrdine.models import Customer, MenuItem, Tenant

log = logging.getLogger("seed_data")

DEMO_MENU = [
    ("Paneer Tikka", "149.00", "Starters", True, True),
    ("Chicken Wings", "199.00", "Starters", False, True),
    ("Butter Chicken", "329.00", "Mains", False, False),
    ("Dal Makhani", "249.00", "Mains", True, False),
    ("Gulab Jamun", "99.00", "Desserts", True, False),
    ("Masala Chai", "49.00", "Drinks", True, False),
]


async def seed():
    tenant, _ = await Tenant.get_or_create(
        email="demo@qrdine.local", defaults={"display_name": "Demo Restaurant", "table_count": 12}
    )
    log.info(f"Tenant: {tenant.id}")

    for name, price, category, vegetarian, spicy in DEMO_MENU:
        item, created = await MenuItem.get_or_create(
            tenant=tenant,
            name=name,
            defaults={"price": Decimal(price), "category": category, "is_vegetarian": vegetarian, "is_spicy": spicy},
        )
        if not created and item.is_out_of_stock:
            # Re-running the seed puts the demo menu back in stock
            item.is_out_of_stock = False
            await item.save(update_fields=["is_out_of_stock", "updated_at"])
        log.info(f"Menu item {item.id}: {item.name}")

    customer, _ = await Customer.get_or_create(email="guest@qrdine.local", defaults={"name": "Demo Guest"})
    log.info(f"Customer: {customer.id}")


async def main():
    logging.basicConfig(level=logging.INFO)
    await init_db()
    await seed()
    await close_db()

if __name__ == "__main__":
    asyncio.run(main())
