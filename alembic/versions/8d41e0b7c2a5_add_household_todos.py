"""add_household_todos

Revision ID: 8d41e0b7c2a5
Revises: 3f2c9a71d4e8
Create Date: 2026-10-18 14:03:27.551902

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d41e0b7c2a5'
down_revision: Union[str, Sequence[str], None] = '3f2c9a71d4e8'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the todos table (household tasks with personal/household visibility)."""
    op.create_table(
        'todos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('household_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('priority', sa.String(length=6), nullable=False, server_default='medium'),
        sa.Column('visibility', sa.String(length=9), nullable=False, server_default='household'),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('assigned_to', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['household_id'], ['households.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.ForeignKeyConstraint(['assigned_to'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_todos_household_id', 'todos', ['household_id'])
    op.create_index('ix_todos_household_completed', 'todos', ['household_id', 'completed'])


def downgrade() -> None:
    """Drop the todos table."""
    op.drop_index('ix_todos_household_completed', table_name='todos')
    op.drop_index('ix_todos_household_id', table_name='todos')
    op.drop_table('todos')
