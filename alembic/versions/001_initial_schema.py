"""Initial schema: trip, day, activity

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the trip, day and activity tables."""

    # sa.Uuid renders as native UUID on PostgreSQL and CHAR(32) on SQLite,
    # matching what the ORM models read back.
    uuid_type = sa.Uuid()

    # Create trip table
    op.create_table(
        'trip',
        sa.Column('trip_id', uuid_type, primary_key=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('destination', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('budget', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(8), nullable=False),
        sa.Column('cover_image', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    # Create day table
    op.create_table(
        'day',
        sa.Column('day_id', uuid_type, primary_key=True),
        sa.Column('trip_id', uuid_type, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('index', sa.Integer(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['trip_id'], ['trip.trip_id'], ondelete='CASCADE'),
        sa.UniqueConstraint('trip_id', 'date', name='uq_day_trip_date'),
    )
    op.create_index('idx_day_trip_index', 'day', ['trip_id', 'index'])

    # Create activity table
    op.create_table(
        'activity',
        sa.Column('activity_id', uuid_type, primary_key=True),
        sa.Column('day_id', uuid_type, nullable=False),
        sa.Column('type', sa.String(64), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(), nullable=True),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('cost', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(8), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['day_id'], ['day.day_id'], ondelete='CASCADE'),
    )
    op.create_index('ix_activity_day_id', 'activity', ['day_id'])


def downgrade() -> None:
    """Drop all tables in reverse order."""
    op.drop_index('ix_activity_day_id', table_name='activity')
    op.drop_table('activity')
    op.drop_index('idx_day_trip_index', table_name='day')
    op.drop_table('day')
    op.drop_table('trip')
