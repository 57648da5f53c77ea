"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``bikes``             -- fleet catalog with live status
* ``bookings``          -- rental bookings with the quoted price snapshot
* ``maintenance_logs``  -- per-bike service records

Indexes
-------
* **Unique** on ``bookings.readable_id`` backs the upsert-by-identifier
  contract used by booking submission.
* **B-Tree** on ``status``, ``bike_id``, ``user_id`` for the admin views.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    func,
)

from .database import Base
from rydeit.domain.enums import (
    BikeCategory,
    BikeStatus,
    BookingStatus,
    HandoverMethod,
    PaymentMethod,
)


def _values(enum_cls):
    return [member.value for member in enum_cls]


class BikeModel(Base):
    __tablename__ = "bikes"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(120), nullable=False)
    description = Column(String(255), default="")
    image_url = Column(String(255), default="")
    color = Column(String(20), default="black")
    category = Column(
        Enum(BikeCategory, name="bikecategory", values_callable=_values),
        nullable=False,
    )
    daily_rate = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(BikeStatus, name="bikestatus", values_callable=_values),
        default=BikeStatus.AVAILABLE,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_bikes_category", "category"),
        Index("idx_bikes_status", "status"),
    )


class BookingModel(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    readable_id = Column(String(16), unique=True, nullable=False)
    user_id = Column(String(64), nullable=True)
    bike_id = Column(Integer, ForeignKey("bikes.id"), nullable=False)

    customer_name = Column(String(120), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    customer_email = Column(String(255), nullable=True)

    pickup_date = Column(Date, nullable=False)
    pickup_time = Column(Time, nullable=False)
    return_date = Column(Date, nullable=False)
    return_time = Column(Time, nullable=False)
    pickup_method = Column(
        Enum(HandoverMethod, name="handovermethod", values_callable=_values),
        default=HandoverMethod.GARAGE,
        nullable=False,
    )
    drop_method = Column(
        Enum(HandoverMethod, name="handovermethod", values_callable=_values),
        default=HandoverMethod.GARAGE,
        nullable=False,
    )
    is_outstation = Column(Boolean, default=False, nullable=False)
    address = Column(Text, nullable=True)

    # Price snapshot taken at submission; never recomputed
    total_rent = Column(Integer, nullable=False)
    advance_amount = Column(Integer, nullable=False)
    security_deposit = Column(Integer, nullable=False)

    status = Column(
        Enum(BookingStatus, name="bookingstatus", values_callable=_values),
        default=BookingStatus.PENDING_PAYMENT,
        nullable=False,
    )
    payment_method = Column(
        Enum(PaymentMethod, name="paymentmethod", values_callable=_values),
        nullable=True,
    )
    # Naive wall-clock times in the operator timezone, like pickup/return
    agreement_signed_at = Column(DateTime, nullable=True)
    start_timestamp = Column(DateTime, nullable=True)
    end_timestamp = Column(DateTime, nullable=True)
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_bookings_status", "status"),
        Index("idx_bookings_bike", "bike_id"),
        Index("idx_bookings_user", "user_id"),
    )
    __mapper_args__ = {"eager_defaults": True}


class MaintenanceLogModel(Base):
    __tablename__ = "maintenance_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bike_id = Column(Integer, ForeignKey("bikes.id"), nullable=False)
    description = Column(Text, nullable=False)
    cost = Column(Numeric(10, 2), default=0, nullable=False)
    log_date = Column("date", Date, nullable=False)
    odometer_reading = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_maintenance_bike", "bike_id"),)
