"""
Seed the configured database with a demo inventory dataset.

Usage: python scripts/seed_database.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
)

from app.config import get_settings
from app.database import create_engine_for

metadata = MetaData()

categories = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(100), nullable=False),
    Column("description", Text),
)

customers = Table(
    "customers",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255)),
    Column("total_spent", Numeric(12, 2), nullable=False),
    Column("last_purchase", DateTime),
)

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("brand", String(100)),
    Column("price", Numeric(10, 2), nullable=False),
    Column("cost", Numeric(10, 2), nullable=False),
    Column("stock_quantity", Integer, nullable=False),
    Column("category_id", Integer, ForeignKey("categories.id")),
)

sales = Table(
    "sales",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("total_amount", Numeric(10, 2), nullable=False),
    Column("sale_date", DateTime, nullable=False),
    Column("customer_id", Integer, ForeignKey("customers.id")),
)


def build_frames() -> dict:
    """Demo rows per table, in foreign key order."""
    brands = ["Apple", "Samsung", "Sony", "LG", "Dell"]
    category_names = ["Electronics", "Computers", "Audio", "Appliances", "Accessories"]

    categories_df = pd.DataFrame({
        "id": range(1, 6),
        "name": category_names,
        "description": [f"{name} and related products" for name in category_names],
    })

    customers_df = pd.DataFrame({
        "id": range(1, 51),
        "name": [f"Customer {i}" for i in range(1, 51)],
        "email": [f"customer{i}@example.com" for i in range(1, 51)],
        "total_spent": [round(500 + i * 137.25, 2) for i in range(1, 51)],
        "last_purchase": pd.date_range("2024-01-01", periods=50, freq="D"),
    })

    products_df = pd.DataFrame({
        "id": range(1, 101),
        "name": [f"Product {i}" for i in range(1, 101)],
        "brand": [brands[i % len(brands)] for i in range(1, 101)],
        "price": [round(99 + i * 12.5, 2) for i in range(1, 101)],
        "cost": [round((99 + i * 12.5) * 0.6, 2) for i in range(1, 101)],
        "stock_quantity": [(i * 7) % 120 for i in range(1, 101)],
        "category_id": [(i % 5) + 1 for i in range(1, 101)],
    })

    sales_df = pd.DataFrame({
        "id": range(1, 501),
        "product_id": [(i % 100) + 1 for i in range(1, 501)],
        "quantity": [(i % 5) + 1 for i in range(1, 501)],
        "sale_date": pd.date_range("2024-01-01", periods=500, freq="6h"),
        "customer_id": [(i % 50) + 1 for i in range(1, 501)],
    })
    unit_prices = products_df.set_index("id")["price"]
    sales_df["total_amount"] = (
        sales_df["product_id"].map(unit_prices) * sales_df["quantity"]
    ).round(2)

    return {
        "categories": categories_df,
        "customers": customers_df,
        "products": products_df,
        "sales": sales_df,
    }


def write_frames(sync_conn, frames: dict) -> None:
    """Recreate the demo tables and load the frames."""
    metadata.drop_all(sync_conn)
    metadata.create_all(sync_conn)
    for name, frame in frames.items():
        frame.to_sql(name, sync_conn, if_exists="append", index=False)
        print(f"Created '{name}' table with {len(frame)} rows")


async def main():
    """Run all seed operations."""
    settings = get_settings()
    config = settings.connection_config().database

    print("=" * 50)
    print(f"Seeding {config.dialect} database '{config.database}'...")
    print("=" * 50)

    engine = create_engine_for(config)
    try:
        frames = build_frames()
        async with engine.begin() as conn:
            await conn.run_sync(write_frames, frames)
    finally:
        await engine.dispose()

    print("=" * 50)
    print("Database seeding complete!")
    print("=" * 50)


if __name__ == "__main__":
    asyncio.run(main())
