#!/usr/bin/env python3
"""Setup script for the Tourer API."""

import asyncio
import logging
import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select

from tourer.core.database import async_session_factory, close_db
from tourer.core.security import hash_password
from tourer.models import CarouselItem, Package, User
from tourer.models.package import Category, Difficulty
from tourer.models.user import UserRole

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def setup_database():
    """Bring the database schema up to the latest revision."""
    logger.info("Running database migrations...")

    alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))
    command.upgrade(alembic_cfg, "head")

    logger.info("Database migrations completed")


async def create_sample_data():
    """Create an admin account, a few packages and a carousel slide."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        try:
            existing = await db.execute(select(func.count()).select_from(Package))
            if existing.scalar_one() > 0:
                logger.info("Sample data already exists, skipping...")
                return

            admin_email = os.getenv("ADMIN_EMAIL", "admin@tourer.local")
            db.add(User(
                email=admin_email,
                password_hash=hash_password(os.getenv("ADMIN_PASSWORD", "change-me-now")),
                first_name="Tourer",
                last_name="Admin",
                role=UserRole.ADMIN
            ))

            db.add(Package(
                title="Northern Lights Adventure",
                slug="northern-lights-adventure",
                short_description="Chase the Aurora Borealis across Iceland with expert guides",
                price=Decimal("1299.00"),
                currency="USD",
                duration=6,
                max_guests=12,
                difficulty=Difficulty.MODERATE,
                category=Category.NATURE,
                location_name="Reykjavik",
                country="Iceland",
                highlights=["Aurora hunting", "Golden Circle", "Blue Lagoon"],
                includes=["Hotel", "Breakfast", "Guided tours"],
                excludes=["Flights"],
                itinerary=[
                    {"day": 1, "title": "Arrival", "activities": ["Airport transfer"]},
                    {"day": 2, "title": "Golden Circle", "activities": ["Thingvellir", "Geysir"]}
                ],
                available_from=date(2026, 9, 1),
                available_to=date(2027, 3, 31)
            ))
            db.add(Package(
                title="Lisbon City Walk",
                slug="lisbon-city-walk",
                short_description="Old town, trams and pasteis de nata",
                price=Decimal("89.00"),
                currency="EUR",
                duration=1,
                difficulty=Difficulty.EASY,
                category=Category.CITY,
                location_name="Lisbon",
                country="Portugal"
            ))

            db.add(CarouselItem(
                title="Winter aurora season",
                image_url="https://images.tourer.local/aurora.jpg",
                action_value="/packages/slug/northern-lights-adventure",
                sort_order=1
            ))

            await db.commit()
            logger.info("Sample data created successfully! Admin account: %s", admin_email)

        except Exception:
            await db.rollback()
            logger.exception("Failed to create sample data")
            raise

    await close_db()


def main():
    """Main setup function."""
    logger.info("Starting Tourer API setup...")

    setup_database()
    asyncio.run(create_sample_data())

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn tourer.main:app --reload")


if __name__ == "__main__":
    main()
