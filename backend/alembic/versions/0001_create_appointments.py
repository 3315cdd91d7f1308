"""create appointments

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_SLOT_WHERE = sa.text("status != 'cancelled'")


def upgrade() -> None:
    op.create_table(
        "appointments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("veterinarian_id", sa.Uuid(), nullable=False),
        sa.Column("pet_name", sa.String(100), nullable=False),
        sa.Column("pet_species", sa.String(50), nullable=False),
        sa.Column("pet_breed", sa.String(50)),
        sa.Column("pet_age", sa.Integer(), nullable=False),
        sa.Column("appointment_date", sa.DateTime(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'scheduled'")),
        sa.Column("reason", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("cancel_reason", sa.Text()),
        sa.Column("client_name", sa.String(100), nullable=False),
        sa.Column("client_email", sa.String(100), nullable=False),
        sa.Column("client_phone", sa.String(20)),
        sa.Column("veterinarian_name", sa.String(100), nullable=False),
        sa.Column("cost", sa.Numeric(10, 2)),
        sa.Column("is_emergency", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index(
        "uq_appointments_vet_date_active",
        "appointments",
        ["veterinarian_id", "appointment_date"],
        unique=True,
        sqlite_where=ACTIVE_SLOT_WHERE,
        postgresql_where=ACTIVE_SLOT_WHERE,
    )
    op.create_index(
        "ix_appointments_client_date",
        "appointments",
        ["client_id", "appointment_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_appointments_client_date", table_name="appointments")
    op.drop_index("uq_appointments_vet_date_active", table_name="appointments")
    op.drop_table("appointments")
