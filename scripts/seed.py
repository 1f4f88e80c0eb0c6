"""Database seeder: the four stock categories plus random demo products."""
import asyncio
import argparse
import random
import time
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.database import engine, async_session, Base
from app.models import Category, Product

CATEGORIES = ["Electronics", "Clothing", "Home & Kitchen", "Books"]

WORDS = ["lamp", "kettle", "jacket", "novel", "speaker", "mug", "scarf", "atlas",
         "charger", "blender", "sneaker", "notebook", "headphones", "pillow",
         "cookbook", "monitor", "hoodie", "toaster", "backpack", "keyboard"]


def _sentence(rng: random.Random) -> str:
    words = rng.sample(WORDS, k=rng.randint(4, 8))
    return " ".join(words).capitalize() + "."


def _product_row(rng: random.Random, category_ids: list[int]) -> dict:
    name = rng.choice(WORDS)
    color = f"{rng.randint(0, 0xFFFFFF):06X}"
    return {
        "name": name,
        "description": _sentence(rng),
        "price": Decimal(str(round(rng.uniform(10, 1000), 2))),
        "category_id": rng.choice(category_ids),
        "image_url": f"https://placehold.co/600x400/{color}/FFF?text={name}",
    }


async def seed(
    product_count: int = 20,
    bind: AsyncEngine = engine,
    session_factory: async_sessionmaker[AsyncSession] = async_session,
    rng: random.Random | None = None,
) -> None:
    rng = rng or random.Random()
    print(f"Seeding: {len(CATEGORIES)} categories, {product_count} products")
    start = time.perf_counter()

    # Recreate the schema so reseeding always starts from empty tables.
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        categories = [Category(name=name) for name in CATEGORIES]
        session.add_all(categories)
        await session.flush()
        print(f"  Created {len(categories)} categories")

        category_ids = [c.id for c in categories]
        session.add_all(
            Product(**_product_row(rng, category_ids)) for _ in range(product_count)
        )
        await session.flush()
        print(f"  Created {product_count} products")

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the product catalog database")
    parser.add_argument("--products", type=int, default=20, help="Number of products to create")
    args = parser.parse_args()
    asyncio.run(seed(product_count=args.products))


if __name__ == "__main__":
    main()
