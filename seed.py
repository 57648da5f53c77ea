"""
Seed script -- populates the database with the fleet catalog.

Run after migrations:
    python seed.py

Creates:
  - the 14 bikes from ``rydeit.domain.catalog.FLEET``
  - 3 sample bookings (pending payment, confirmed, completed) priced by the
    pricing engine
"""

import asyncio
from datetime import date, datetime, time

from sqlalchemy import text

from rydeit.api.dependencies import get_pricing_engine
from rydeit.domain.catalog import FLEET
from rydeit.domain.enums import BookingStatus, HandoverMethod
from rydeit.domain.pricing import RentalQuoteRequest
from rydeit.infrastructure.database import async_session_factory, engine
from rydeit.infrastructure.models import BikeModel, BookingModel

BOOKINGS = [
    {
        "readable_id": "RD-100001",
        "bike_id": 16,
        "customer_name": "Aarav Sharma",
        "customer_phone": "9800000001",
        "pickup": (date(2024, 1, 1), time(10, 0)),
        "drop": (date(2024, 1, 1), time(20, 0)),
        "pickup_method": HandoverMethod.GARAGE,
        "drop_method": HandoverMethod.GARAGE,
        "status": BookingStatus.PENDING_PAYMENT,
    },
    {
        "readable_id": "RD-100002",
        "bike_id": 8,
        "customer_name": "Priya Patel",
        "customer_phone": "9800000002",
        "pickup": (date(2024, 1, 2), time(9, 0)),
        "drop": (date(2024, 1, 4), time(18, 0)),
        "pickup_method": HandoverMethod.HOME,
        "drop_method": HandoverMethod.GARAGE,
        "status": BookingStatus.BOOKING_CONFIRMED,
    },
    {
        "readable_id": "RD-100003",
        "bike_id": 11,
        "customer_name": "Rohan Mehta",
        "customer_phone": "9800000003",
        "pickup": (date(2024, 1, 5), time(7, 0)),
        "drop": (date(2024, 1, 6), time(21, 0)),
        "pickup_method": HandoverMethod.GARAGE,
        "drop_method": HandoverMethod.HOME,
        "status": BookingStatus.COMPLETED,
    },
]


async def seed():
    pricing = get_pricing_engine()
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM bikes"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Bikes ─────────────────────────────────────────────────────
        rates = {}
        for bike in FLEET:
            session.add(
                BikeModel(
                    id=bike.id,
                    name=bike.name,
                    description=bike.description,
                    image_url=bike.image_url,
                    color=bike.color,
                    category=bike.category,
                    daily_rate=bike.daily_rate,
                    status=bike.status,
                )
            )
            rates[bike.id] = bike.daily_rate
        await session.flush()
        print(f"  Created {len(FLEET)} bikes")

        # ── Bookings ──────────────────────────────────────────────────
        for b in BOOKINGS:
            quote = pricing.quote(
                RentalQuoteRequest(
                    daily_rate=rates[b["bike_id"]],
                    pickup_at=datetime.combine(*b["pickup"]),
                    drop_at=datetime.combine(*b["drop"]),
                    pickup_method=b["pickup_method"],
                    drop_method=b["drop_method"],
                )
            )
            session.add(
                BookingModel(
                    readable_id=b["readable_id"],
                    bike_id=b["bike_id"],
                    customer_name=b["customer_name"],
                    customer_phone=b["customer_phone"],
                    pickup_date=b["pickup"][0],
                    pickup_time=b["pickup"][1],
                    return_date=b["drop"][0],
                    return_time=b["drop"][1],
                    pickup_method=b["pickup_method"],
                    drop_method=b["drop_method"],
                    address="Salt Lake, Kolkata",
                    total_rent=quote.final_payable,
                    advance_amount=quote.advance,
                    security_deposit=int(quote.security),
                    status=b["status"],
                )
            )
        await session.flush()
        print(f"  Created {len(BOOKINGS)} bookings")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
