"""initial credential schema

Revision ID: 7f3b2c9d1a04
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '7f3b2c9d1a04'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('password_digest', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('secret', sa.String(length=128), nullable=False),
        sa.Column('subject_id', sa.String(length=36), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['subject_id'], ['users.id'],
            name=op.f('fk_refresh_tokens_subject_id_users'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_refresh_tokens')),
        sa.UniqueConstraint('secret', name='uq_refresh_tokens_secret'),
    )
    op.create_index('ix_refresh_tokens_subject_id', 'refresh_tokens', ['subject_id'], unique=False)
    op.create_table(
        'blocked_tokens',
        sa.Column('token_id', sa.String(length=64), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('token_id', name=op.f('pk_blocked_tokens')),
    )
    op.create_index('ix_blocked_tokens_expires_at', 'blocked_tokens', ['expires_at'], unique=False)


def downgrade():
    op.drop_index('ix_blocked_tokens_expires_at', table_name='blocked_tokens')
    op.drop_table('blocked_tokens')
    op.drop_index('ix_refresh_tokens_subject_id', table_name='refresh_tokens')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
