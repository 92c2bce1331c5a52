"""Seed the catalog with random demo products."""
import random
import sys

from bson import ObjectId

from suq.config import get_settings
from suq.models.product import PRODUCTS_COLLECTION, ProductStatus
from suq.mongo import MongoHandle
from suq.services.product_repository import ProductRepository


def build_product(seller_id: str) -> dict:
    """
    Build one random product listing.

    Args:
        seller_id: 24-hex id of the listing's seller
    """
    categories = [
        "Electronics",
        "Office Supplies",
        "Furniture",
        "Industrial",
        "Packaging",
        "Textiles",
        "Food & Beverage",
        "Automotive",
    ]

    adjectives = [
        "Premium",
        "Standard",
        "Heavy-Duty",
        "Compact",
        "Refurbished",
        "Bulk",
        "Eco-Friendly",
        "Wholesale",
    ]

    items = ["Desk", "Pallet", "Printer", "Chair", "Toolkit", "Crate", "Monitor", "Cable Set"]

    locations = ["Riyadh", "Jeddah", "Dammam", "Mecca", "Medina"]

    category = random.choice(categories)
    adjective = random.choice(adjectives)
    item = random.choice(items)
    slug = f"{adjective}-{item}".lower().replace(" ", "-")

    return {
        "name": f"{adjective} {item}",
        "description": f"{adjective} {item.lower()} for {category.lower()} buyers.",
        "price": round(random.uniform(5, 2500), 2),
        "images": [f"https://picsum.photos/seed/{slug}-{random.randint(1, 9999)}/640/480"],
        "sellerId": seller_id,
        "status": random.choice(list(ProductStatus)).value,
        "category": category,
        "location": random.choice(locations),
    }


def main():
    """Main function to parse arguments and insert products."""
    if len(sys.argv) < 2:
        print("Usage: python seed_products.py <count> [seller_id]")
        print("Example: python seed_products.py 50 507f1f77bcf86cd799439011")
        sys.exit(1)

    count = int(sys.argv[1])
    seller_id = sys.argv[2] if len(sys.argv) > 2 else str(ObjectId())

    mongo = MongoHandle.from_settings(get_settings())
    repo = ProductRepository(mongo.collection(PRODUCTS_COLLECTION))

    print(f"Seeding {count:,} products for seller {seller_id}...")
    try:
        for i in range(count):
            repo.create(build_product(seller_id))
            if (i + 1) % 100 == 0:
                print(f"Inserted {i+1:,} products...")
    finally:
        mongo.close()

    print(f"✅ Successfully seeded {count:,} products")


if __name__ == "__main__":
    main()
