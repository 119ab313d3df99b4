"""create waitlist tables

Revision ID: 4b1d2e7c9a10
Revises:
Create Date: 2025-06-02 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4b1d2e7c9a10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'registration_codes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=64), nullable=False),
        sa.Column(
            'pool',
            sa.Enum('STANDARD', 'LATE', name='code_pool', native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('(CURRENT_TIMESTAMP)'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_registration_codes')),
        sa.UniqueConstraint('code', name='uq_registration_codes_code'),
    )
    op.create_index('ix_registration_codes_pool_code', 'registration_codes', ['pool', 'code'])

    op.create_table(
        'registrants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('phone_number', sa.String(length=32), nullable=False),
        sa.Column('state', sa.String(length=64), nullable=False),
        sa.Column('photo_reference', sa.String(length=255), nullable=True),
        sa.Column('event_number', sa.BigInteger(), nullable=False),
        sa.Column('event_id', sa.String(length=64), nullable=False),
        sa.Column('submitted_code', sa.String(length=64), nullable=False),
        sa.Column('late_code', sa.String(length=64), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('(CURRENT_TIMESTAMP)'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_registrants')),
        sa.UniqueConstraint('email', name='uq_registrants_email'),
        sa.UniqueConstraint('event_id', name='uq_registrants_event_id'),
        sa.UniqueConstraint('event_number', name='uq_registrants_event_number'),
    )
    op.create_index('ix_registrants_created_at', 'registrants', ['created_at'])

    op.create_table(
        'event_id_counters',
        sa.Column('name', sa.String(length=32), nullable=False),
        sa.Column('value', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('name', name=op.f('pk_event_id_counters')),
    )


def downgrade():
    op.drop_table('event_id_counters')
    op.drop_index('ix_registrants_created_at', table_name='registrants')
    op.drop_table('registrants')
    op.drop_index('ix_registration_codes_pool_code', table_name='registration_codes')
    op.drop_table('registration_codes')
