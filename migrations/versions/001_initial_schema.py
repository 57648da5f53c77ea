"""Initial schema: bikes, bookings and maintenance logs.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "001"
down_revision = None
branch_labels = None
depends_on = None

# Shared by pickup_method and drop_method, so it is created once up front
handover_method = postgresql.ENUM(
    "garage", "home", name="handovermethod", create_type=False
)


def upgrade() -> None:
    handover_method.create(op.get_bind(), checkfirst=True)

    # ── bikes ─────────────────────────────────────────────────────────
    op.create_table(
        "bikes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.String(255), default=""),
        sa.Column("image_url", sa.String(255), default=""),
        sa.Column("color", sa.String(20), default="black"),
        sa.Column(
            "category",
            sa.Enum(
                "Scooter", "Bikes", "Royal Enfield", "Sports", name="bikecategory"
            ),
            nullable=False,
        ),
        sa.Column("daily_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "Available", "Booked", "Running", "Maintenance", name="bikestatus"
            ),
            default="Available",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_bikes_category", "bikes", ["category"])
    op.create_index("idx_bikes_status", "bikes", ["status"])

    # ── bookings ──────────────────────────────────────────────────────
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("readable_id", sa.String(16), unique=True, nullable=False),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column(
            "bike_id", sa.Integer, sa.ForeignKey("bikes.id"), nullable=False
        ),
        sa.Column("customer_name", sa.String(120), nullable=False),
        sa.Column("customer_phone", sa.String(20), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=True),
        sa.Column("pickup_date", sa.Date, nullable=False),
        sa.Column("pickup_time", sa.Time, nullable=False),
        sa.Column("return_date", sa.Date, nullable=False),
        sa.Column("return_time", sa.Time, nullable=False),
        sa.Column("pickup_method", handover_method, nullable=False),
        sa.Column("drop_method", handover_method, nullable=False),
        sa.Column("is_outstation", sa.Boolean, default=False, nullable=False),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("total_rent", sa.Integer, nullable=False),
        sa.Column("advance_amount", sa.Integer, nullable=False),
        sa.Column("security_deposit", sa.Integer, nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "pending_payment",
                "verifying_payment",
                "booking_confirmed",
                "ongoing",
                "completed",
                "cancelled",
                name="bookingstatus",
            ),
            default="pending_payment",
            nullable=False,
        ),
        sa.Column(
            "payment_method",
            sa.Enum("upi", "cash", name="paymentmethod"),
            nullable=True,
        ),
        sa.Column("agreement_signed_at", sa.DateTime, nullable=True),
        sa.Column("start_timestamp", sa.DateTime, nullable=True),
        sa.Column("end_timestamp", sa.DateTime, nullable=True),
        sa.Column("admin_notes", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_bookings_status", "bookings", ["status"])
    op.create_index("idx_bookings_bike", "bookings", ["bike_id"])
    op.create_index("idx_bookings_user", "bookings", ["user_id"])

    # ── maintenance_logs ──────────────────────────────────────────────
    op.create_table(
        "maintenance_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "bike_id", sa.Integer, sa.ForeignKey("bikes.id"), nullable=False
        ),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("cost", sa.Numeric(10, 2), default=0, nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("odometer_reading", sa.Float, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_maintenance_bike", "maintenance_logs", ["bike_id"])


def downgrade() -> None:
    op.drop_table("maintenance_logs")
    op.drop_table("bookings")
    op.drop_table("bikes")
    op.execute("DROP TYPE IF EXISTS paymentmethod")
    op.execute("DROP TYPE IF EXISTS bookingstatus")
    op.execute("DROP TYPE IF EXISTS handovermethod")
    op.execute("DROP TYPE IF EXISTS bikestatus")
    op.execute("DROP TYPE IF EXISTS bikecategory")
