"""create employees table

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
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('salary', sa.Float(), nullable=False),
        sa.Column('department', sa.String(length=100), nullable=False),
        sa.Column('gender', sa.String(length=50), nullable=False),
        sa.Column('bonus', sa.Float(), nullable=True),
        sa.Column('provident_fund', sa.Float(), nullable=True),
        sa.Column('tax', sa.Float(), nullable=True),
        sa.UniqueConstraint('email', name='uq_employees_email'),
    )
    op.create_index('ix_employees_id', 'employees', ['id'], unique=False)
    op.create_index('ix_employees_department', 'employees', ['department'], unique=False)
    op.create_index('ix_employees_gender', 'employees', ['gender'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_employees_gender', table_name='employees')
    op.drop_index('ix_employees_department', table_name='employees')
    op.drop_index('ix_employees_id', table_name='employees')
    op.drop_table('employees')
