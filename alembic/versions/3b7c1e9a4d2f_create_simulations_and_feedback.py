"""create simulations and feedback tables

Revision ID: 3b7c1e9a4d2f
Revises:
Create Date: 2026-10-18 09:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b7c1e9a4d2f'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "simulations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("simulation_type", sa.String(), nullable=False),
        sa.Column("building_type", sa.String(), nullable=True),
        sa.Column("weather_station", sa.String(), nullable=False),
        sa.Column("construction_period", sa.String(), nullable=True),
        sa.Column("batch_config", sa.JSON(), nullable=True),
        sa.Column("building_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("total_heating", sa.Float(), nullable=False),
        sa.Column("total_cooling", sa.Float(), nullable=False),
        sa.Column("total_energy", sa.Float(), nullable=False),
        sa.Column("eui", sa.Float(), nullable=False),
        sa.Column("floor_area", sa.Float(), nullable=False),
        sa.Column("results_json", sa.JSON(), nullable=True),
        sa.Column("hourly_data", sa.JSON(), nullable=True),
    )
    op.create_index("ix_simulations_user_created", "simulations", ["user_id", "created_at"])

    op.create_table(
        "feedback",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("user_email", sa.String(), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("page", sa.String(), nullable=True),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
    )


def downgrade() -> None:
    op.drop_table("feedback")
    op.drop_index("ix_simulations_user_created", table_name="simulations")
    op.drop_table("simulations")
